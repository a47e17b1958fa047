"""CRUD operations for videos."""

from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.crud.common import ensure_owner, get_or_404, validate_payload
from vidtube.models.comment import Comment
from vidtube.models.engagement import Like, LikeTargetType
from vidtube.models.playlist import playlist_videos
from vidtube.models.schemas import VideoCreate, VideoUpdate
from vidtube.models.video import Video


async def create_video(db: AsyncSession, owner_id: int, data: VideoCreate) -> Video:
    """Create a video. New videos are published immediately."""
    video = Video(
        owner_id=owner_id,
        title=data.title,
        description=data.description,
        media_url=data.media_url,
        thumbnail_url=data.thumbnail_url,
        duration_seconds=data.duration_seconds,
        is_published=True,
    )
    db.add(video)
    await db.commit()
    await db.refresh(video)
    return video


async def get_video(db: AsyncSession, video_id: int) -> Video:
    return await get_or_404(db, Video, video_id, "Video")


async def update_video(
    db: AsyncSession,
    video_id: int,
    actor_id: int,
    data: Any,
) -> Video:
    """Update title, description or thumbnail of the actor's own video."""
    video = await get_video(db, video_id)
    ensure_owner(video, actor_id, "You can only update your own videos")
    data = validate_payload(VideoUpdate, data)

    if data.title:
        video.title = data.title
    if data.description:
        video.description = data.description
    if data.thumbnail_url:
        video.thumbnail_url = data.thumbnail_url

    await db.commit()
    await db.refresh(video)
    return video


async def toggle_publish_status(db: AsyncSession, video_id: int, actor_id: int) -> Video:
    """Flip ``is_published`` on the actor's own video."""
    video = await get_video(db, video_id)
    ensure_owner(video, actor_id, "You can only modify your own videos")

    video.is_published = not video.is_published
    await db.commit()
    await db.refresh(video)
    return video


async def delete_video(db: AsyncSession, video_id: int, actor_id: int) -> None:
    """Delete a video together with its comments, likes and playlist memberships.

    Uses bulk deletes instead of ORM cascades so nothing is lazy-loaded.
    """
    video = await get_video(db, video_id)
    ensure_owner(video, actor_id, "You can only delete your own videos")

    comment_ids = select(Comment.id).where(Comment.video_id == video.id)
    try:
        await db.execute(
            delete(Like).where(
                Like.target_type == LikeTargetType.COMMENT,
                Like.target_id.in_(comment_ids),
            )
        )
        await db.execute(
            delete(Like).where(
                Like.target_type == LikeTargetType.VIDEO,
                Like.target_id == video.id,
            )
        )
        await db.execute(delete(Comment).where(Comment.video_id == video.id))
        await db.execute(delete(playlist_videos).where(playlist_videos.c.video_id == video.id))
        await db.execute(delete(Video).where(Video.id == video.id))
        await db.commit()
    except Exception:
        await db.rollback()
        raise
