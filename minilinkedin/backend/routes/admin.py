import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import Settings, get_settings
from ..database import get_db
from ..models import FriendRequestStatus, PostWithAuthor, User
from ..security import get_current_admin
from .posts import delete_post_cascade, load_posts

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"], dependencies=[Depends(get_current_admin)])


@router.get("/stats")
async def get_stats(db=Depends(get_db)):
    return {
        "users": await db.users.count_documents({}),
        "posts": await db.posts.count_documents({}),
        "comments": await db.comments.count_documents({}),
        "messages": await db.messages.count_documents({}),
    }


@router.get("/users", response_model=List[User])
async def list_users(
    limit: int = Query(100, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db=Depends(get_db),
):
    users = await db.users.find({}).sort("created_at", -1).skip(offset).limit(limit).to_list(length=None)
    return [User(**user) for user in users]


@router.get("/posts", response_model=List[PostWithAuthor])
async def list_posts(
    limit: int = Query(100, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db=Depends(get_db),
):
    return await load_posts(db, {}, limit=limit, offset=offset)


@router.delete("/users/{user_id}")
async def delete_user(user_id: str, settings: Settings = Depends(get_settings), db=Depends(get_db)):
    user = await db.users.find_one({"id": user_id})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    posts = await db.posts.find({"user_id": user_id}).to_list(length=None)
    for post in posts:
        await delete_post_cascade(db, post, settings.uploads_dir)

    # Keep counters on other users' posts in step with what is removed
    comments = await db.comments.find({"user_id": user_id}).to_list(length=None)
    for comment in comments:
        await db.posts.update_one({"id": comment["post_id"]}, {"$inc": {"comments_count": -1}})
    likes = await db.likes.find({"user_id": user_id}).to_list(length=None)
    for like in likes:
        await db.posts.update_one({"id": like["post_id"]}, {"$inc": {"likes_count": -1}})

    friendships = await db.friend_requests.find({
        "status": FriendRequestStatus.ACCEPTED.value,
        "$or": [{"sender_id": user_id}, {"receiver_id": user_id}]
    }).to_list(length=None)
    for friendship in friendships:
        other = friendship["receiver_id"] if friendship["sender_id"] == user_id else friendship["sender_id"]
        await db.users.update_one({"id": other}, {"$inc": {"friends_count": -1}})

    await db.comments.delete_many({"user_id": user_id})
    await db.likes.delete_many({"user_id": user_id})
    await db.messages.delete_many({"$or": [{"sender_id": user_id}, {"receiver_id": user_id}]})
    await db.friend_requests.delete_many({"$or": [{"sender_id": user_id}, {"receiver_id": user_id}]})
    await db.notifications.delete_many({"$or": [{"user_id": user_id}, {"actor_id": user_id}]})
    await db.users.delete_one({"id": user_id})

    logger.info("Admin deleted user %s", user_id)
    return {"message": "User deleted"}


@router.delete("/posts/{post_id}")
async def delete_post(post_id: str, settings: Settings = Depends(get_settings), db=Depends(get_db)):
    post = await db.posts.find_one({"id": post_id})
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    await delete_post_cascade(db, post, settings.uploads_dir)
    logger.info("Admin deleted post %s", post_id)
    return {"message": "Post deleted"}
