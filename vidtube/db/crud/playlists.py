"""CRUD operations for playlists and their ordered membership."""

from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.crud.common import ensure_id, ensure_owner, get_or_404, validate_payload
from vidtube.exceptions import Conflict
from vidtube.models.base import utcnow
from vidtube.models.playlist import Playlist, playlist_videos
from vidtube.models.schemas import PlaylistCreate, PlaylistRead, PlaylistUpdate
from vidtube.models.video import Video


async def get_playlist_video_ids(db: AsyncSession, playlist_id: int) -> list[int]:
    """Member video ids in playlist order."""
    result = await db.execute(
        select(playlist_videos.c.video_id)
        .where(playlist_videos.c.playlist_id == playlist_id)
        .order_by(playlist_videos.c.position)
    )
    return list(result.scalars().all())


async def to_playlist_read(db: AsyncSession, playlist: Playlist) -> PlaylistRead:
    return PlaylistRead(
        id=playlist.id,
        owner_id=playlist.owner_id,
        name=playlist.name,
        description=playlist.description,
        video_ids=await get_playlist_video_ids(db, playlist.id),
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
    )


async def create_playlist(db: AsyncSession, owner_id: int, data: PlaylistCreate) -> Playlist:
    playlist = Playlist(owner_id=owner_id, name=data.name, description=data.description)
    db.add(playlist)
    await db.commit()
    await db.refresh(playlist)
    return playlist


async def get_playlist(db: AsyncSession, playlist_id: int) -> Playlist:
    return await get_or_404(db, Playlist, playlist_id, "Playlist")


async def update_playlist(
    db: AsyncSession,
    playlist_id: int,
    actor_id: int,
    data: Any,
) -> Playlist:
    playlist = await get_playlist(db, playlist_id)
    ensure_owner(playlist, actor_id, "You can only update your own playlists")
    data = validate_payload(PlaylistUpdate, data)

    if data.name:
        playlist.name = data.name
    if data.description:
        playlist.description = data.description

    await db.commit()
    await db.refresh(playlist)
    return playlist


async def delete_playlist(db: AsyncSession, playlist_id: int, actor_id: int) -> None:
    playlist = await get_playlist(db, playlist_id)
    ensure_owner(playlist, actor_id, "You can only delete your own playlists")

    await db.execute(delete(playlist_videos).where(playlist_videos.c.playlist_id == playlist.id))
    await db.execute(delete(Playlist).where(Playlist.id == playlist.id))
    await db.commit()


async def add_video_to_playlist(
    db: AsyncSession,
    playlist_id: int,
    video_id: int,
    actor_id: int,
) -> Playlist:
    """Append a video to the end of the actor's playlist."""
    playlist = await get_playlist(db, playlist_id)
    ensure_owner(playlist, actor_id, "You can only add videos to your own playlists")
    video = await get_or_404(db, Video, video_id, "Video")

    member_ids = await get_playlist_video_ids(db, playlist.id)
    if video.id in member_ids:
        raise Conflict("Video is already in the playlist")

    next_position = await db.scalar(
        select(func.coalesce(func.max(playlist_videos.c.position), -1) + 1).where(
            playlist_videos.c.playlist_id == playlist.id
        )
    )
    await db.execute(
        playlist_videos.insert().values(
            playlist_id=playlist.id,
            video_id=video.id,
            position=next_position,
        )
    )
    playlist.updated_at = utcnow()
    await db.commit()
    await db.refresh(playlist)
    return playlist


async def remove_video_from_playlist(
    db: AsyncSession,
    playlist_id: int,
    video_id: int,
    actor_id: int,
) -> Playlist:
    playlist = await get_playlist(db, playlist_id)
    ensure_owner(playlist, actor_id, "You can only remove videos from your own playlists")

    member_ids = await get_playlist_video_ids(db, playlist.id)
    video_id = ensure_id(video_id, "video")
    if video_id not in member_ids:
        raise Conflict("Video is not in the playlist")

    await db.execute(
        delete(playlist_videos).where(
            playlist_videos.c.playlist_id == playlist.id,
            playlist_videos.c.video_id == video_id,
        )
    )
    playlist.updated_at = utcnow()
    await db.commit()
    await db.refresh(playlist)
    return playlist
