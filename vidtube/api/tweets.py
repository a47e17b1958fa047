"""Tweet API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
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
from vidtube.db.crud import create_tweet, delete_tweet, get_user, update_tweet
from vidtube.models.schemas import TweetRead, TweetWrite
from vidtube.services.dashboard import TweetStats, tweet_stats
from vidtube.services.views import Page, TweetView, ViewFilters, ViewKind, get_view, list_view

router = APIRouter()


async def _list_tweets(
    db: AsyncSession,
    filters: ViewFilters,
    viewer_id: int | None,
    sort_by: str | None,
    sort_order: str | None,
    page: int,
    limit: int,
):
    return await list_view(
        db,
        ViewKind.TWEETS,
        filters,
        resolve_sort(ViewKind.TWEETS, filters, sort_by, sort_order),
        viewer_id=viewer_id,
        page=page,
        limit=limit,
    )


@router.post("", response_model=TweetRead, status_code=201)
async def create_tweet_endpoint(
    data: TweetWrite,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TweetRead:
    tweet = await create_tweet(db, user.id, data)
    return TweetRead.model_validate(tweet)


@router.get("", response_model=Page[TweetView])
async def list_tweets(
    user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    sort_by: SortByQuery = None,
    sort_order: SortOrderQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """All tweets, newest first by default."""
    return await _list_tweets(
        db, ViewFilters(query=query), user.id if user else None, sort_by, sort_order, page, limit
    )


@router.get("/mine", response_model=Page[TweetView])
async def list_my_tweets(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    sort_by: SortByQuery = None,
    sort_order: SortOrderQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    return await _list_tweets(
        db, ViewFilters(query=query, owner_id=user.id), user.id, sort_by, sort_order, page, limit
    )


@router.get("/user/{user_id}", response_model=Page[TweetView])
async def list_user_tweets(
    user_id: int,
    user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    sort_by: SortByQuery = None,
    sort_order: SortOrderQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    owner = await get_user(db, user_id)
    return await _list_tweets(
        db,
        ViewFilters(query=query, owner_id=owner.id),
        user.id if user else None,
        sort_by,
        sort_order,
        page,
        limit,
    )


@router.get("/{tweet_id}", response_model=TweetView)
async def get_tweet_endpoint(
    tweet_id: int,
    user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Single tweet with its author, likes count and the viewer's like."""
    return await get_view(db, ViewKind.TWEET_DETAIL, tweet_id, user.id if user else None)


@router.get("/{tweet_id}/stats", response_model=TweetStats)
async def get_tweet_stats(
    tweet_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TweetStats:
    return await tweet_stats(db, tweet_id)


@router.patch("/{tweet_id}", response_model=TweetRead)
async def update_tweet_endpoint(
    tweet_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    data: RawBody = None,
) -> TweetRead:
    tweet = await update_tweet(db, tweet_id, user.id, data)
    return TweetRead.model_validate(tweet)


@router.delete("/{tweet_id}", status_code=204)
async def delete_tweet_endpoint(
    tweet_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await delete_tweet(db, tweet_id, user.id)
