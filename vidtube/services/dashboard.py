"""Channel dashboard aggregates.

These read from the same join plans as the list views so that a video's
``likes_count`` or ``engagement_score`` is identical on the dashboard and in
``/api/videos/mine``.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Literal

from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.constants import (
    ANALYTICS_DEFAULT_DAYS,
    MAX_PAGE_SIZE,
    RECENT_ACTIVITY_DEFAULT_LIMIT,
    TOP_VIDEOS_DEFAULT_LIMIT,
)
from vidtube.db.crud.common import get_or_404
from vidtube.exceptions import InvalidInput, InvalidOperation
from vidtube.models import Comment, Like, Subscription, Tweet, Video
from vidtube.models.base import utcnow
from vidtube.models.engagement import LikeTargetType
from vidtube.services.views.definitions import VIEWS, ViewKind, owner_join
from vidtube.services.views.derived import attach_scores, engagement_score
from vidtube.services.views.joins import JoinPlan, JoinSpec, execute_plan
from vidtube.services.views.ranking import SortSpec, sort_records
from vidtube.services.views.records import fetch_records
from vidtube.services.views.view_models import OwnerProfile, VideoView
from vidtube.utils.logging import get_logger

logger = get_logger(__name__)

TOP_VIDEO_SORTS = {
    "views": "views",
    "engagement": "engagement_score",
    "likes_count": "likes_count",
}


class ChannelStats(BaseModel):
    total_videos: int = 0
    total_views: int = 0
    total_likes: int = 0
    total_subscribers: int = 0


class DailyAnalytics(BaseModel):
    """Activity on the videos published on one day."""

    date: str  # YYYY-MM-DD
    videos_published: int
    total_views: int
    total_likes: int
    total_comments: int


class ChannelAnalytics(BaseModel):
    days: int
    daily: list[DailyAnalytics]


class ActivityItem(BaseModel):
    type: Literal["comment", "subscription"]
    created_at: datetime
    actor: OwnerProfile | None = None
    video_id: int | None = None
    video_title: str | None = None
    content: str | None = None


class VideoStats(BaseModel):
    video_id: int
    views: int
    likes_count: int
    comments_count: int
    engagement_score: float


class TweetStats(BaseModel):
    tweet_id: int
    likes_count: int


def _positive(value: int, name: str, upper: int | None = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidInput(f"{name} must be a positive integer")
    if upper is not None and value > upper:
        raise InvalidInput(f"{name} cannot exceed {upper}")
    return value


async def _owner_video_records(db: AsyncSession, owner_id: int, *criteria) -> list[dict[str, Any]]:
    """The owner's videos with likes and comments counts attached."""
    records = await fetch_records(db, "videos", [Video.owner_id == owner_id, *criteria])
    return await execute_plan(db, VIEWS[ViewKind.MY_VIDEOS].plan, records)


async def channel_stats(db: AsyncSession, owner_id: int) -> ChannelStats:
    """Totals across every video of the channel; zeros for an empty channel."""
    totals = (
        await db.execute(
            select(
                func.count(Video.id).label("videos"),
                func.coalesce(func.sum(Video.views), 0).label("views"),
            ).where(Video.owner_id == owner_id)
        )
    ).one()
    total_likes = await db.scalar(
        select(func.count(Like.id))
        .join(Video, Video.id == Like.target_id)
        .where(Like.target_type == LikeTargetType.VIDEO, Video.owner_id == owner_id)
    )
    total_subscribers = await db.scalar(
        select(func.count(Subscription.id)).where(Subscription.channel_id == owner_id)
    )
    return ChannelStats(
        total_videos=totals.videos,
        total_views=totals.views,
        total_likes=total_likes or 0,
        total_subscribers=total_subscribers or 0,
    )


async def channel_analytics(
    db: AsyncSession,
    owner_id: int,
    days: int = ANALYTICS_DEFAULT_DAYS,
    now: datetime | None = None,
) -> ChannelAnalytics:
    """Per-day buckets over the videos created in the trailing ``days`` window."""
    days = _positive(days, "days")
    cutoff = (now or utcnow()) - timedelta(days=days)
    videos = await _owner_video_records(db, owner_id, Video.created_at >= cutoff)
    logger.debug(f"Analytics for channel {owner_id}: {len(videos)} videos in the last {days} days")

    buckets: dict[str, dict[str, int]] = defaultdict(
        lambda: {"videos_published": 0, "total_views": 0, "total_likes": 0, "total_comments": 0}
    )
    for video in videos:
        bucket = buckets[video["created_at"].strftime("%Y-%m-%d")]
        bucket["videos_published"] += 1
        bucket["total_views"] += video["views"] or 0
        bucket["total_likes"] += video["likes_count"]
        bucket["total_comments"] += video["comments_count"]

    return ChannelAnalytics(
        days=days,
        daily=[DailyAnalytics(date=day, **values) for day, values in sorted(buckets.items())],
    )


async def top_videos(
    db: AsyncSession,
    owner_id: int,
    limit: int = TOP_VIDEOS_DEFAULT_LIMIT,
    sort_by: str = "views",
) -> list[VideoView]:
    """Best performing published videos of the channel."""
    if sort_by not in TOP_VIDEO_SORTS:
        raise InvalidOperation(
            f"Invalid sort_by: {sort_by}. Use one of {', '.join(TOP_VIDEO_SORTS)}"
        )
    limit = _positive(limit, "limit", MAX_PAGE_SIZE)

    videos = await _owner_video_records(db, owner_id, Video.is_published.is_(True))
    videos = attach_scores(videos, ("engagement_score",))
    definition = VIEWS[ViewKind.MY_VIDEOS]
    ordered = sort_records(videos, SortSpec(TOP_VIDEO_SORTS[sort_by], "desc"), definition.sort_keys)
    return [VideoView.model_validate(v) for v in ordered[:limit]]


_ACTIVITY_COMMENTS_PLAN = JoinPlan(
    "comments",
    (
        owner_join("comments", as_field="actor"),
        JoinSpec(
            source="comments",
            local_key="video_id",
            target="videos",
            foreign_key="id",
            as_field="video",
            fields=("id", "title"),
        ),
    ),
)
_ACTIVITY_SUBSCRIPTIONS_PLAN = JoinPlan(
    "subscriptions",
    (owner_join("subscriptions", local_key="subscriber_id", as_field="actor"),),
)


async def recent_activity(
    db: AsyncSession,
    owner_id: int,
    limit: int = RECENT_ACTIVITY_DEFAULT_LIMIT,
) -> list[ActivityItem]:
    """Latest comments on the channel's videos and latest subscribers, newest first."""
    limit = _positive(limit, "limit", MAX_PAGE_SIZE)

    owned_video_ids = select(Video.id).where(Video.owner_id == owner_id)
    comments = await fetch_records(db, "comments", [Comment.video_id.in_(owned_video_ids)])
    comments = await execute_plan(db, _ACTIVITY_COMMENTS_PLAN, comments)
    subscriptions = await fetch_records(db, "subscriptions", [Subscription.channel_id == owner_id])
    subscriptions = await execute_plan(db, _ACTIVITY_SUBSCRIPTIONS_PLAN, subscriptions)

    items = [
        ActivityItem(
            type="comment",
            created_at=c["created_at"],
            actor=c["actor"],
            video_id=c["video_id"],
            video_title=(c["video"] or {}).get("title"),
            content=c["content"],
        )
        for c in comments
    ] + [
        ActivityItem(type="subscription", created_at=s["created_at"], actor=s["actor"])
        for s in subscriptions
    ]
    items.sort(key=lambda item: item.created_at, reverse=True)
    return items[:limit]


async def video_stats(db: AsyncSession, video_id: int) -> VideoStats:
    video = await get_or_404(db, Video, video_id, "Video")
    [record] = await _owner_video_records(db, video.owner_id, Video.id == video.id)
    return VideoStats(
        video_id=video.id,
        views=record["views"],
        likes_count=record["likes_count"],
        comments_count=record["comments_count"],
        engagement_score=engagement_score(record),
    )


async def tweet_stats(db: AsyncSession, tweet_id: int) -> TweetStats:
    tweet = await get_or_404(db, Tweet, tweet_id, "Tweet")
    likes = await db.scalar(
        select(func.count(Like.id)).where(
            Like.target_type == LikeTargetType.TWEET, Like.target_id == tweet.id
        )
    )
    return TweetStats(tweet_id=tweet.id, likes_count=likes or 0)
