from typing import Dict, Iterable

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from .config import Settings


def connect(settings: Settings) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(settings.mongo_url, tz_aware=True)


def get_db(request: Request) -> AsyncIOMotorDatabase:
    return request.app.state.db


async def users_by_id(db, user_ids: Iterable[str]) -> Dict[str, dict]:
    ids = list(set(user_ids))
    if not ids:
        return {}
    users = await db.users.find({"id": {"$in": ids}}).to_list(length=None)
    return {user["id"]: user for user in users}
