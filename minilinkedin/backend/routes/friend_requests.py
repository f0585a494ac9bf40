import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from ..database import get_db, users_by_id
from ..models import (
    FriendRequest,
    FriendRequestCreate,
    FriendRequestStatus,
    FriendRequestWithUsers,
    NotificationType,
    User,
    utcnow,
)
from ..security import get_current_user
from .notifications import notify

logger = logging.getLogger(__name__)

router = APIRouter(tags=["friend-requests"])

PENDING = FriendRequestStatus.PENDING.value
ACCEPTED = FriendRequestStatus.ACCEPTED.value


async def _with_users(db, requests: List[dict]) -> List[FriendRequestWithUsers]:
    users = await users_by_id(
        db, [r["sender_id"] for r in requests] + [r["receiver_id"] for r in requests]
    )
    return [
        FriendRequestWithUsers(
            **request,
            sender_name=users.get(request["sender_id"], {}).get("name"),
            receiver_name=users.get(request["receiver_id"], {}).get("name"),
        )
        for request in requests
    ]


async def _pending_for_receiver(db, request_id: str, current_user: User) -> dict:
    request = await db.friend_requests.find_one({"id": request_id})
    if not request:
        raise HTTPException(status_code=404, detail="Friend request not found")
    if request["receiver_id"] != current_user.id:
        raise HTTPException(status_code=403, detail="Only the receiver can respond to this request")
    if request["status"] != PENDING:
        raise HTTPException(status_code=409, detail="Friend request already answered")
    return request


@router.post("", response_model=FriendRequestWithUsers, status_code=status.HTTP_201_CREATED)
async def send_friend_request(
    request_data: FriendRequestCreate,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db),
):
    receiver_id = request_data.receiver_id
    if receiver_id == current_user.id:
        raise HTTPException(status_code=400, detail="Cannot send a friend request to yourself")

    receiver = await db.users.find_one({"id": receiver_id})
    if not receiver:
        raise HTTPException(status_code=404, detail="User not found")

    existing = await db.friend_requests.find_one({
        "status": {"$in": [PENDING, ACCEPTED]},
        "$or": [
            {"sender_id": current_user.id, "receiver_id": receiver_id},
            {"sender_id": receiver_id, "receiver_id": current_user.id},
        ]
    })
    if existing:
        detail = "Already friends" if existing["status"] == ACCEPTED else "Friend request already pending"
        raise HTTPException(status_code=409, detail=detail)

    friend_request = FriendRequest(sender_id=current_user.id, receiver_id=receiver_id)
    await db.friend_requests.insert_one(friend_request.model_dump())
    await notify(
        db,
        receiver_id,
        NotificationType.FRIEND_REQUEST,
        f"{current_user.name} sent you a friend request",
        actor_id=current_user.id,
        reference_id=friend_request.id,
    )

    return FriendRequestWithUsers(
        **friend_request.model_dump(),
        sender_name=current_user.name,
        receiver_name=receiver["name"],
    )


@router.get("/incoming", response_model=List[FriendRequestWithUsers])
async def get_incoming(current_user: User = Depends(get_current_user), db=Depends(get_db)):
    requests = await db.friend_requests.find(
        {"receiver_id": current_user.id, "status": PENDING}
    ).sort("created_at", -1).to_list(length=None)
    return await _with_users(db, requests)


@router.get("/outgoing", response_model=List[FriendRequestWithUsers])
async def get_outgoing(current_user: User = Depends(get_current_user), db=Depends(get_db)):
    requests = await db.friend_requests.find(
        {"sender_id": current_user.id, "status": PENDING}
    ).sort("created_at", -1).to_list(length=None)
    return await _with_users(db, requests)


@router.put("/{request_id}/accept", response_model=FriendRequestWithUsers)
async def accept_friend_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db),
):
    request = await _pending_for_receiver(db, request_id, current_user)

    await db.friend_requests.update_one(
        {"id": request_id},
        {"$set": {"status": ACCEPTED, "responded_at": utcnow()}}
    )
    await db.users.update_many(
        {"id": {"$in": [request["sender_id"], request["receiver_id"]]}},
        {"$inc": {"friends_count": 1}}
    )
    await notify(
        db,
        request["sender_id"],
        NotificationType.FRIEND_ACCEPT,
        f"{current_user.name} accepted your friend request",
        actor_id=current_user.id,
        reference_id=request_id,
    )
    logger.info("Friend request %s accepted", request_id)

    updated = await db.friend_requests.find_one({"id": request_id})
    return (await _with_users(db, [updated]))[0]


@router.put("/{request_id}/reject", response_model=FriendRequestWithUsers)
async def reject_friend_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db),
):
    await _pending_for_receiver(db, request_id, current_user)

    await db.friend_requests.update_one(
        {"id": request_id},
        {"$set": {"status": FriendRequestStatus.REJECTED.value, "responded_at": utcnow()}}
    )

    updated = await db.friend_requests.find_one({"id": request_id})
    return (await _with_users(db, [updated]))[0]


@router.delete("/{request_id}")
async def cancel_friend_request(
    request_id: str,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db),
):
    request = await db.friend_requests.find_one({"id": request_id})
    if not request:
        raise HTTPException(status_code=404, detail="Friend request not found")
    if request["sender_id"] != current_user.id:
        raise HTTPException(status_code=403, detail="Only the sender can cancel this request")
    if request["status"] != PENDING:
        raise HTTPException(status_code=409, detail="Friend request already answered")

    await db.friend_requests.delete_one({"id": request_id})
    return {"message": "Friend request cancelled"}
