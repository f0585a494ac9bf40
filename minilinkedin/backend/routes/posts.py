import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from ..config import Settings, get_settings
from ..database import get_db, users_by_id
from ..models import MAX_POST_LENGTH, Like, NotificationType, Post, PostWithAuthor, User
from ..security import get_current_user, get_optional_user
from ..uploads import is_allowed_media, remove_upload, save_upload
from .notifications import notify

logger = logging.getLogger(__name__)

router = APIRouter(tags=["posts"])

EMPTY_POST_MESSAGE = "Please enter some text or attach media to post."
TOO_LONG_MESSAGE = f"Post content cannot exceed {MAX_POST_LENGTH} characters."
BAD_MEDIA_MESSAGE = "Please select an image or video file only."


async def load_posts(
    db,
    query: dict,
    viewer: Optional[User] = None,
    limit: int = 20,
    offset: int = 0,
) -> List[PostWithAuthor]:
    """Fetch posts newest first and join in the author name and the viewer's like."""
    posts = await db.posts.find(query).sort(
        [("created_at", -1), ("_id", -1)]
    ).skip(offset).limit(limit).to_list(length=None)

    authors = await users_by_id(db, (post["user_id"] for post in posts))

    liked = set()
    if viewer and posts:
        likes = await db.likes.find({
            "user_id": viewer.id,
            "post_id": {"$in": [post["id"] for post in posts]}
        }).to_list(length=None)
        liked = {like["post_id"] for like in likes}

    result = []
    for post in posts:
        author = authors.get(post["user_id"])
        if not author:
            # Author was deleted
            continue
        result.append(PostWithAuthor(
            **Post(**post).model_dump(),
            name=author["name"],
            is_liked=post["id"] in liked,
        ))
    return result


async def delete_post_cascade(db, post: dict, uploads_dir: Path) -> None:
    await db.comments.delete_many({"post_id": post["id"]})
    await db.likes.delete_many({"post_id": post["id"]})
    await db.posts.delete_one({"id": post["id"]})
    await db.users.update_one(
        {"id": post["user_id"]},
        {"$inc": {"posts_count": -1}}
    )
    remove_upload(post.get("media_url"), uploads_dir)
    logger.info("Deleted post %s", post["id"])


# Post routes
@router.get("", response_model=List[PostWithAuthor])
async def get_posts(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    current_user: Optional[User] = Depends(get_optional_user),
    db=Depends(get_db),
):
    return await load_posts(db, {}, viewer=current_user, limit=limit, offset=offset)


@router.post("", response_model=PostWithAuthor, status_code=status.HTTP_201_CREATED)
async def create_post(
    content: str = Form(""),
    media: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    db=Depends(get_db),
):
    content = content.strip()
    if media is not None and not media.filename:
        # Browsers send an empty part for an untouched file input
        media = None

    if not content and media is None:
        raise HTTPException(status_code=400, detail=EMPTY_POST_MESSAGE)
    if len(content) > MAX_POST_LENGTH:
        raise HTTPException(status_code=400, detail=TOO_LONG_MESSAGE)
    if media is not None and not is_allowed_media(media.content_type):
        raise HTTPException(status_code=400, detail=BAD_MEDIA_MESSAGE)

    post = Post(user_id=current_user.id, content=content)
    if media is not None:
        post.media_url = save_upload(media, settings.uploads_dir)
        post.media_type = media.content_type

    await db.posts.insert_one(post.model_dump())

    # Update user's posts count
    await db.users.update_one(
        {"id": current_user.id},
        {"$inc": {"posts_count": 1}}
    )
    logger.info("User %s created post %s", current_user.id, post.id)

    return PostWithAuthor(**post.model_dump(), name=current_user.name)


@router.get("/{post_id}", response_model=PostWithAuthor)
async def get_post(
    post_id: str,
    current_user: Optional[User] = Depends(get_optional_user),
    db=Depends(get_db),
):
    posts = await load_posts(db, {"id": post_id}, viewer=current_user, limit=1)
    if not posts:
        raise HTTPException(status_code=404, detail="Post not found")
    return posts[0]


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    db=Depends(get_db),
):
    post = await db.posts.find_one({"id": post_id})
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    if post["user_id"] != current_user.id:
        raise HTTPException(status_code=403, detail="You can only delete your own posts")

    await delete_post_cascade(db, post, settings.uploads_dir)
    return {"message": "Post deleted"}


# Like routes
@router.post("/{post_id}/like")
async def toggle_like(post_id: str, current_user: User = Depends(get_current_user), db=Depends(get_db)):
    post = await db.posts.find_one({"id": post_id})
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    # Check if already liked
    existing_like = await db.likes.find_one({
        "post_id": post_id,
        "user_id": current_user.id
    })

    if existing_like:
        # Unlike
        await db.likes.delete_one({"id": existing_like["id"]})
        await db.posts.update_one(
            {"id": post_id},
            {"$inc": {"likes_count": -1}}
        )
        return {"liked": False}

    like = Like(post_id=post_id, user_id=current_user.id)
    await db.likes.insert_one(like.model_dump())
    await db.posts.update_one(
        {"id": post_id},
        {"$inc": {"likes_count": 1}}
    )
    await notify(
        db,
        post["user_id"],
        NotificationType.LIKE,
        f"{current_user.name} liked your post",
        actor_id=current_user.id,
        reference_id=post_id,
    )
    return {"liked": True}
