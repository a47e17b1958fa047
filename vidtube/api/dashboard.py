"""Channel dashboard API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.common import (
    LimitQuery,
    PageQuery,
    SearchQuery,
    SortByQuery,
    SortOrderQuery,
    resolve_sort,
)
from vidtube.auth import CurrentUser
from vidtube.constants import (
    ANALYTICS_DEFAULT_DAYS,
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    RECENT_ACTIVITY_DEFAULT_LIMIT,
    TOP_VIDEOS_DEFAULT_LIMIT,
)
from vidtube.db import get_db
from vidtube.services import dashboard
from vidtube.services.views import Page, VideoView, ViewFilters, ViewKind, list_view

router = APIRouter()


@router.get("/stats", response_model=dashboard.ChannelStats)
async def get_channel_stats(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dashboard.ChannelStats:
    """Totals for the current user's channel."""
    return await dashboard.channel_stats(db, user.id)


@router.get("/videos", response_model=Page[VideoView])
async def get_channel_videos(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    sort_by: SortByQuery = None,
    sort_order: SortOrderQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """Every video of the channel with likes, comments and engagement score."""
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


@router.get("/analytics", response_model=dashboard.ChannelAnalytics)
async def get_channel_analytics(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    days: Annotated[int, Query()] = ANALYTICS_DEFAULT_DAYS,
) -> dashboard.ChannelAnalytics:
    return await dashboard.channel_analytics(db, user.id, days)


@router.get("/top", response_model=list[VideoView])
async def get_top_videos(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Annotated[int, Query()] = TOP_VIDEOS_DEFAULT_LIMIT,
    sort_by: Annotated[str, Query()] = "views",
) -> list[VideoView]:
    return await dashboard.top_videos(db, user.id, limit, sort_by)


@router.get("/activity", response_model=list[dashboard.ActivityItem])
async def get_recent_activity(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: Annotated[int, Query()] = RECENT_ACTIVITY_DEFAULT_LIMIT,
) -> list[dashboard.ActivityItem]:
    return await dashboard.recent_activity(db, user.id, limit)
