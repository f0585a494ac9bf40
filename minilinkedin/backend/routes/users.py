import re
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..database import get_db
from ..models import FriendRequestStatus, PostWithAuthor, User, UserUpdate
from ..security import get_current_user, get_optional_user
from .posts import load_posts

router = APIRouter(tags=["users"])


async def friend_ids(db, user_id: str) -> List[str]:
    accepted = await db.friend_requests.find({
        "status": FriendRequestStatus.ACCEPTED.value,
        "$or": [{"sender_id": user_id}, {"receiver_id": user_id}]
    }).to_list(length=None)
    return [
        request["receiver_id"] if request["sender_id"] == user_id else request["sender_id"]
        for request in accepted
    ]


# User routes
@router.get("", response_model=List[User])
async def list_users(
    search: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db=Depends(get_db),
):
    query = {}
    if search:
        query["name"] = {"$regex": re.escape(search), "$options": "i"}

    users = await db.users.find(query).sort("name", 1).skip(offset).limit(limit).to_list(length=None)
    return [User(**user) for user in users]


@router.put("/me", response_model=User)
async def update_current_user(
    user_update: UserUpdate,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db),
):
    update_data = {k: v for k, v in user_update.model_dump().items() if v is not None}

    if update_data:
        await db.users.update_one(
            {"id": current_user.id},
            {"$set": update_data}
        )

    updated_user = await db.users.find_one({"id": current_user.id})
    return User(**updated_user)


@router.get("/{user_id}", response_model=User)
async def get_user(user_id: str, db=Depends(get_db)):
    user = await db.users.find_one({"id": user_id})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return User(**user)


@router.get("/{user_id}/posts", response_model=List[PostWithAuthor])
async def get_user_posts(
    user_id: str,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: Optional[User] = Depends(get_optional_user),
    db=Depends(get_db),
):
    if not await db.users.find_one({"id": user_id}):
        raise HTTPException(status_code=404, detail="User not found")
    return await load_posts(db, {"user_id": user_id}, viewer=current_user, limit=limit, offset=offset)


@router.get("/{user_id}/friends", response_model=List[User])
async def get_friends(user_id: str, db=Depends(get_db)):
    if not await db.users.find_one({"id": user_id}):
        raise HTTPException(status_code=404, detail="User not found")

    ids = await friend_ids(db, user_id)
    if not ids:
        return []
    friends = await db.users.find({"id": {"$in": ids}}).sort("name", 1).to_list(length=None)
    return [User(**friend) for friend in friends]
