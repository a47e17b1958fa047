"""Typed read models produced by the view pipeline.

One model per entity, each tagged with ``kind``. Derived fields that only
some views compute are optional and stay ``None`` elsewhere.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class OwnerProfile(BaseModel):
    """Public profile of the user behind a record."""

    id: int
    username: str
    display_name: str = ""
    avatar_url: str | None = None
    subscribers_count: int | None = None
    is_subscribed: bool | None = None


class LatestVideo(BaseModel):
    id: int
    title: str
    thumbnail_url: str
    created_at: datetime


class ChannelProfile(BaseModel):
    kind: Literal["channel"] = "channel"

    id: int
    username: str
    display_name: str = ""
    avatar_url: str | None = None
    cover_url: str | None = None
    created_at: datetime | None = None
    subscribers_count: int = 0
    videos_count: int = 0
    is_subscribed: bool | None = None
    latest_video: LatestVideo | None = None


class VideoView(BaseModel):
    kind: Literal["video"] = "video"

    id: int
    owner_id: int
    title: str
    description: str
    media_url: str
    thumbnail_url: str
    duration_seconds: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime

    owner: OwnerProfile | None = None
    likes_count: int | None = None
    comments_count: int | None = None
    is_liked: bool | None = None

    engagement_score: float | None = None
    trending_score: float | None = None
    recommendation_score: float | None = None


class CommentView(BaseModel):
    kind: Literal["comment"] = "comment"

    id: int
    video_id: int
    owner_id: int
    content: str
    created_at: datetime
    updated_at: datetime

    owner: OwnerProfile | None = None
    likes_count: int | None = None
    is_liked: bool | None = None


class TweetView(BaseModel):
    kind: Literal["tweet"] = "tweet"

    id: int
    owner_id: int
    content: str
    created_at: datetime
    updated_at: datetime

    owner: OwnerProfile | None = None
    likes_count: int | None = None
    is_liked: bool | None = None


class PlaylistVideo(BaseModel):
    """Published member of a playlist, in playlist order."""

    id: int
    title: str
    thumbnail_url: str
    duration_seconds: float
    views: int
    created_at: datetime
    owner: OwnerProfile | None = None


class PlaylistView(BaseModel):
    kind: Literal["playlist"] = "playlist"

    id: int
    owner_id: int
    name: str
    description: str
    created_at: datetime
    updated_at: datetime

    owner: OwnerProfile | None = None
    videos: list[PlaylistVideo] = []
    total_videos: int = 0
    total_views: int = 0
    total_duration: float = 0
    first_video_thumbnail: str | None = None


class SubscriptionView(BaseModel):
    """A subscription edge seen from either end.

    Subscriber listings fill ``subscriber``; subscribed-channel listings
    fill ``channel``.
    """

    kind: Literal["subscription"] = "subscription"

    id: int
    subscriber_id: int
    channel_id: int
    created_at: datetime

    subscriber: OwnerProfile | None = None
    channel: ChannelProfile | None = None


class LikeView(BaseModel):
    """A like with its target expanded under the target type's name."""

    kind: Literal["like"] = "like"

    id: int
    liked_by_id: int
    target_type: Literal["video", "comment", "tweet"]
    target_id: int
    created_at: datetime

    video: VideoView | None = None
    comment: CommentView | None = None
    tweet: TweetView | None = None


ViewModel = (
    VideoView
    | CommentView
    | TweetView
    | PlaylistView
    | SubscriptionView
    | LikeView
    | ChannelProfile
)
