from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..database import get_db
from ..models import Notification, NotificationType, User
from ..security import get_current_user

router = APIRouter(tags=["notifications"])


async def notify(
    db,
    user_id: str,
    kind: NotificationType,
    message: str,
    actor_id: Optional[str] = None,
    reference_id: Optional[str] = None,
) -> Optional[Notification]:
    """Record a notification for user_id. Users are never notified of their own actions."""
    if actor_id and actor_id == user_id:
        return None
    notification = Notification(
        user_id=user_id,
        type=kind,
        message=message,
        actor_id=actor_id,
        reference_id=reference_id,
    )
    await db.notifications.insert_one(notification.model_dump())
    return notification


@router.get("", response_model=List[Notification])
async def get_notifications(
    unread_only: bool = False,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db=Depends(get_db),
):
    query = {"user_id": current_user.id}
    if unread_only:
        query["read"] = False

    notifications = await db.notifications.find(query).sort(
        [("created_at", -1), ("_id", -1)]
    ).skip(offset).limit(limit).to_list(length=None)

    return [Notification(**notification) for notification in notifications]


@router.get("/unread-count")
async def get_unread_count(current_user: User = Depends(get_current_user), db=Depends(get_db)):
    count = await db.notifications.count_documents({"user_id": current_user.id, "read": False})
    return {"count": count}


@router.put("/read-all")
async def mark_all_read(current_user: User = Depends(get_current_user), db=Depends(get_db)):
    result = await db.notifications.update_many(
        {"user_id": current_user.id, "read": False},
        {"$set": {"read": True}}
    )
    return {"updated": result.modified_count}


@router.put("/{notification_id}/read", response_model=Notification)
async def mark_read(
    notification_id: str,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db),
):
    query = {"id": notification_id, "user_id": current_user.id}
    if not await db.notifications.find_one(query):
        raise HTTPException(status_code=404, detail="Notification not found")

    await db.notifications.update_one(query, {"$set": {"read": True}})
    notification = await db.notifications.find_one(query)
    return Notification(**notification)
