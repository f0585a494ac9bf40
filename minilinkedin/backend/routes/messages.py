from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..database import get_db, users_by_id
from ..models import Conversation, Message, MessageCreate, NotificationType, User
from ..security import get_current_user
from .notifications import notify

router = APIRouter(tags=["messages"])


def _between(user_id: str, other_id: str) -> dict:
    return {"$or": [
        {"sender_id": user_id, "receiver_id": other_id},
        {"sender_id": other_id, "receiver_id": user_id},
    ]}


@router.post("", response_model=Message, status_code=status.HTTP_201_CREATED)
async def send_message(
    message_data: MessageCreate,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db),
):
    if message_data.receiver_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot message yourself")
    if not await db.users.find_one({"id": message_data.receiver_id}):
        raise HTTPException(status_code=404, detail="User not found")

    content = message_data.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="Message cannot be empty")

    message = Message(sender_id=current_user.id, receiver_id=message_data.receiver_id, content=content)
    await db.messages.insert_one(message.model_dump())
    await notify(
        db,
        message.receiver_id,
        NotificationType.MESSAGE,
        f"New message from {current_user.name}",
        actor_id=current_user.id,
        reference_id=message.id,
    )
    return message


@router.get("/conversations", response_model=List[Conversation])
async def get_conversations(current_user: User = Depends(get_current_user), db=Depends(get_db)):
    messages = await db.messages.find({
        "$or": [{"sender_id": current_user.id}, {"receiver_id": current_user.id}]
    }).sort([("created_at", -1), ("_id", -1)]).to_list(length=None)

    # Newest first, so the first message seen per peer is the latest one
    latest: Dict[str, dict] = {}
    unread: Dict[str, int] = {}
    for message in messages:
        peer = message["receiver_id"] if message["sender_id"] == current_user.id else message["sender_id"]
        latest.setdefault(peer, message)
        if message["receiver_id"] == current_user.id and not message["read"]:
            unread[peer] = unread.get(peer, 0) + 1

    peers = await users_by_id(db, latest.keys())
    return [
        Conversation(user=User(**peers[peer]), last_message=Message(**message), unread_count=unread.get(peer, 0))
        for peer, message in latest.items()
        if peer in peers
    ]


@router.get("/{user_id}", response_model=List[Message])
async def get_conversation(
    user_id: str,
    limit: int = Query(100, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db=Depends(get_db),
):
    if not await db.users.find_one({"id": user_id}):
        raise HTTPException(status_code=404, detail="User not found")

    messages = await db.messages.find(
        _between(current_user.id, user_id)
    ).sort([("created_at", 1), ("_id", 1)]).skip(offset).limit(limit).to_list(length=None)

    await db.messages.update_many(
        {"sender_id": user_id, "receiver_id": current_user.id, "read": False},
        {"$set": {"read": True}}
    )
    return [Message(**message) for message in messages]
