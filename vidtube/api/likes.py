"""Like API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.common import LimitQuery, PageQuery
from vidtube.auth import CurrentUser
from vidtube.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from vidtube.db import get_db
from vidtube.models.engagement import CommentRef, TweetRef, VideoRef
from vidtube.models.schemas import LikeStats, ToggleResult
from vidtube.services.engagement import get_like_stats, toggle
from vidtube.services.views import LikeView, Page, ViewKind, list_view

router = APIRouter()


@router.post("/toggle/video/{video_id}", response_model=ToggleResult)
async def toggle_video_like(
    video_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ToggleResult:
    return await toggle(db, user.id, VideoRef(video_id))


@router.post("/toggle/comment/{comment_id}", response_model=ToggleResult)
async def toggle_comment_like(
    comment_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ToggleResult:
    return await toggle(db, user.id, CommentRef(comment_id))


@router.post("/toggle/tweet/{tweet_id}", response_model=ToggleResult)
async def toggle_tweet_like(
    tweet_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ToggleResult:
    return await toggle(db, user.id, TweetRef(tweet_id))


@router.get("/videos", response_model=Page[LikeView])
async def list_liked_videos(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """Published videos the current user liked, most recent like first."""
    return await list_view(db, ViewKind.LIKED_VIDEOS, viewer_id=user.id, page=page, limit=limit)


@router.get("/comments", response_model=Page[LikeView])
async def list_liked_comments(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    return await list_view(db, ViewKind.LIKED_COMMENTS, viewer_id=user.id, page=page, limit=limit)


@router.get("/tweets", response_model=Page[LikeView])
async def list_liked_tweets(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    return await list_view(db, ViewKind.LIKED_TWEETS, viewer_id=user.id, page=page, limit=limit)


@router.get("/stats", response_model=LikeStats)
async def like_stats(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LikeStats:
    return await get_like_stats(db, user.id)
