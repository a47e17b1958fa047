"""CRUD operations for comments."""

from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.crud.common import ensure_owner, get_or_404, validate_payload
from vidtube.models.comment import Comment
from vidtube.models.engagement import Like, LikeTargetType
from vidtube.models.schemas import CommentWrite
from vidtube.models.video import Video


async def add_comment(
    db: AsyncSession,
    video_id: int,
    owner_id: int,
    data: CommentWrite,
) -> Comment:
    """Add a comment to an existing video."""
    video = await get_or_404(db, Video, video_id, "Video")

    comment = Comment(video_id=video.id, owner_id=owner_id, content=data.content)
    db.add(comment)
    await db.commit()
    await db.refresh(comment)
    return comment


async def update_comment(
    db: AsyncSession,
    comment_id: int,
    actor_id: int,
    data: Any,
) -> Comment:
    comment = await get_or_404(db, Comment, comment_id, "Comment")
    ensure_owner(comment, actor_id, "You can only edit your own comments")
    data = validate_payload(CommentWrite, data)

    comment.content = data.content
    await db.commit()
    await db.refresh(comment)
    return comment


async def delete_comment(db: AsyncSession, comment_id: int, actor_id: int) -> None:
    comment = await get_or_404(db, Comment, comment_id, "Comment")
    ensure_owner(comment, actor_id, "You can only delete your own comments")

    await db.execute(
        delete(Like).where(
            Like.target_type == LikeTargetType.COMMENT,
            Like.target_id == comment.id,
        )
    )
    await db.execute(delete(Comment).where(Comment.id == comment.id))
    await db.commit()
