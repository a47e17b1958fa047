"""Video API endpoints."""

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.common import (
    LimitQuery,
    PageQuery,
    RawBody,
    SearchQuery,
    SortByQuery,
    SortOrderQuery,
    resolve_sort,
)
from vidtube.auth import CurrentUser, OptionalUser
from vidtube.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from vidtube.db import get_db
from vidtube.db.crud import (
    create_video,
    delete_video,
    toggle_publish_status,
    update_video,
)
from vidtube.models.schemas import VideoCreate, VideoRead
from vidtube.services.dashboard import VideoStats, video_stats
from vidtube.services.engagement import record_view
from vidtube.services.views import Page, VideoView, ViewFilters, ViewKind, get_view, list_view

router = APIRouter()


@router.post("", response_model=VideoRead, status_code=201)
async def create_video_endpoint(
    data: VideoCreate,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> VideoRead:
    """Publish a new video from already-uploaded media."""
    video = await create_video(db, user.id, data)
    return VideoRead.model_validate(video)


@router.get("", response_model=Page[VideoView])
async def list_videos(
    user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    owner_id: Annotated[int | None, Query()] = None,
    sort_by: SortByQuery = None,
    sort_order: SortOrderQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """List published videos, optionally for one channel."""
    filters = ViewFilters(query=query, owner_id=owner_id)
    return await list_view(
        db,
        ViewKind.VIDEOS,
        filters,
        resolve_sort(ViewKind.VIDEOS, filters, sort_by, sort_order),
        viewer_id=user.id if user else None,
        page=page,
        limit=limit,
    )


@router.get("/mine", response_model=Page[VideoView])
async def list_my_videos(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    sort_by: SortByQuery = None,
    sort_order: SortOrderQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """List the current user's videos, drafts included."""
    filters = ViewFilters(query=query)
    return await list_view(
        db,
        ViewKind.MY_VIDEOS,
        filters,
        resolve_sort(ViewKind.MY_VIDEOS, filters, sort_by, sort_order),
        viewer_id=user.id,
        page=page,
        limit=limit,
    )


@router.get("/trending", response_model=Page[VideoView])
async def list_trending_videos(
    user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """Published videos from the trailing window, by views and likes."""
    return await list_view(
        db,
        ViewKind.TRENDING,
        viewer_id=user.id if user else None,
        page=page,
        limit=limit,
    )


@router.get("/recommended", response_model=Page[VideoView])
async def list_recommended_videos(
    user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """Published videos from other channels, by recommendation score."""
    return await list_view(
        db,
        ViewKind.RECOMMENDED,
        viewer_id=user.id if user else None,
        page=page,
        limit=limit,
    )


@router.get("/{video_id}", response_model=VideoView)
async def get_video_endpoint(
    video_id: int,
    user: OptionalUser,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Video detail; counts one view after the response is sent."""
    video = await get_view(db, ViewKind.VIDEO_DETAIL, video_id, viewer_id=user.id if user else None)
    background_tasks.add_task(record_view, video.id)
    return video


@router.get("/{video_id}/stats", response_model=VideoStats)
async def get_video_stats(
    video_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> VideoStats:
    return await video_stats(db, video_id)


@router.patch("/{video_id}", response_model=VideoRead)
async def update_video_endpoint(
    video_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    data: RawBody = None,
) -> VideoRead:
    video = await update_video(db, video_id, user.id, data)
    return VideoRead.model_validate(video)


@router.patch("/{video_id}/publish", response_model=VideoRead)
async def toggle_publish_endpoint(
    video_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> VideoRead:
    """Flip the video between published and draft."""
    video = await toggle_publish_status(db, video_id, user.id)
    return VideoRead.model_validate(video)


@router.delete("/{video_id}", status_code=204)
async def delete_video_endpoint(
    video_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    """Delete a video with its comments, likes and playlist memberships."""
    await delete_video(db, video_id, user.id)
