from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..database import get_db, users_by_id
from ..models import Comment, CommentCreate, CommentWithAuthor, NotificationType, User
from ..security import get_current_user
from .notifications import notify

router = APIRouter(tags=["comments"])


# Comment routes
@router.post("", response_model=CommentWithAuthor, status_code=status.HTTP_201_CREATED)
async def create_comment(
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db),
):
    content = comment_data.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="Comment cannot be empty")

    post = await db.posts.find_one({"id": comment_data.post_id})
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")

    comment = Comment(post_id=post["id"], user_id=current_user.id, content=content)
    await db.comments.insert_one(comment.model_dump())

    # Update post's comments count
    await db.posts.update_one(
        {"id": post["id"]},
        {"$inc": {"comments_count": 1}}
    )
    await notify(
        db,
        post["user_id"],
        NotificationType.COMMENT,
        f"{current_user.name} commented on your post",
        actor_id=current_user.id,
        reference_id=post["id"],
    )

    return CommentWithAuthor(**comment.model_dump(), name=current_user.name)


@router.get("/post/{post_id}", response_model=List[CommentWithAuthor])
async def get_comments(
    post_id: str,
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db=Depends(get_db),
):
    comments = await db.comments.find(
        {"post_id": post_id}
    ).sort([("created_at", -1), ("_id", -1)]).skip(offset).limit(limit).to_list(length=None)

    authors = await users_by_id(db, (comment["user_id"] for comment in comments))
    return [
        CommentWithAuthor(**comment, name=authors[comment["user_id"]]["name"])
        for comment in comments
        if comment["user_id"] in authors
    ]


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: str,
    current_user: User = Depends(get_current_user),
    db=Depends(get_db),
):
    comment = await db.comments.find_one({"id": comment_id})
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")

    post = await db.posts.find_one({"id": comment["post_id"]})
    post_owner = post["user_id"] if post else None
    if current_user.id not in (comment["user_id"], post_owner):
        raise HTTPException(status_code=403, detail="You cannot delete this comment")

    await db.comments.delete_one({"id": comment_id})
    if post:
        await db.posts.update_one(
            {"id": post["id"]},
            {"$inc": {"comments_count": -1}}
        )
    return {"message": "Comment deleted"}
