"""Subscription API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.common import LimitQuery, PageQuery, SearchQuery
from vidtube.auth import CurrentUser, OptionalUser
from vidtube.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from vidtube.db import get_db
from vidtube.db.crud import get_user
from vidtube.models.engagement import ChannelRef
from vidtube.models.schemas import ToggleResult
from vidtube.services.engagement import count_subscribers, is_subscribed, toggle
from vidtube.services.views import (
    Page,
    SubscriptionView,
    VideoView,
    ViewFilters,
    ViewKind,
    list_view,
)

router = APIRouter()


class SubscriptionStatus(BaseModel):
    channel_id: int
    is_subscribed: bool
    subscribers_count: int


@router.post("/channel/{channel_id}", response_model=ToggleResult)
async def toggle_subscription(
    channel_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> ToggleResult:
    """Subscribe to or unsubscribe from a channel."""
    return await toggle(db, user.id, ChannelRef(channel_id))


@router.get("/channel/{channel_id}", response_model=Page[SubscriptionView])
async def list_channel_subscribers(
    channel_id: int,
    user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """Subscribers of a channel; ``is_subscribed`` tells whether the viewer follows each back."""
    channel = await get_user(db, channel_id)
    return await list_view(
        db,
        ViewKind.SUBSCRIBERS,
        ViewFilters(query=query, channel_id=channel.id),
        viewer_id=user.id if user else None,
        page=page,
        limit=limit,
    )


@router.get("/user/{subscriber_id}", response_model=Page[SubscriptionView])
async def list_subscribed_channels(
    subscriber_id: int,
    user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """Channels a user subscribes to, with their latest published video."""
    subscriber = await get_user(db, subscriber_id)
    return await list_view(
        db,
        ViewKind.SUBSCRIBED_CHANNELS,
        ViewFilters(query=query, subscriber_id=subscriber.id),
        viewer_id=user.id if user else None,
        page=page,
        limit=limit,
    )


@router.get("/mine", response_model=Page[SubscriptionView])
async def list_my_subscriptions(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    return await list_view(
        db,
        ViewKind.SUBSCRIBED_CHANNELS,
        ViewFilters(query=query, subscriber_id=user.id),
        viewer_id=user.id,
        page=page,
        limit=limit,
    )


@router.get("/status/{channel_id}", response_model=SubscriptionStatus)
async def subscription_status(
    channel_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SubscriptionStatus:
    channel = await get_user(db, channel_id)
    return SubscriptionStatus(
        channel_id=channel.id,
        is_subscribed=await is_subscribed(db, user.id, channel.id),
        subscribers_count=await count_subscribers(db, channel.id),
    )


@router.get("/feed", response_model=Page[VideoView])
async def subscription_feed(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """Published videos from every subscribed channel, newest first."""
    return await list_view(db, ViewKind.FEED, viewer_id=user.id, page=page, limit=limit)
