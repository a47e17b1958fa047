"""Named views: the primary collection, joins, derived fields and sort
vocabulary of every list or detail endpoint."""

import enum
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from pydantic import BaseModel
from sqlalchemy import ColumnElement

from vidtube.config import get_settings
from vidtube.db.crud.common import ensure_id
from vidtube.exceptions import InvalidInput
from vidtube.models import Comment, Like, Playlist, Subscription, Tweet, Video
from vidtube.models.engagement import LikeTargetType
from vidtube.services.views.feed import flatten_feed
from vidtube.services.views.joins import Collapse, JoinPlan, JoinSpec
from vidtube.services.views.ranking import SortSpec
from vidtube.services.views.records import Record
from vidtube.services.views.view_models import (
    ChannelProfile,
    CommentView,
    LikeView,
    PlaylistView,
    SubscriptionView,
    TweetView,
    VideoView,
)


class ViewKind(str, enum.Enum):
    VIDEOS = "videos"
    MY_VIDEOS = "my_videos"
    VIDEO_DETAIL = "video_detail"
    TRENDING = "trending"
    RECOMMENDED = "recommended"
    COMMENTS = "comments"
    TWEETS = "tweets"
    TWEET_DETAIL = "tweet_detail"
    PLAYLISTS = "playlists"
    PLAYLIST_DETAIL = "playlist_detail"
    SUBSCRIBERS = "subscribers"
    SUBSCRIBED_CHANNELS = "subscribed_channels"
    LIKED_VIDEOS = "liked_videos"
    LIKED_COMMENTS = "liked_comments"
    LIKED_TWEETS = "liked_tweets"
    FEED = "feed"
    CHANNEL = "channel"


@dataclass(frozen=True)
class ViewFilters:
    """Caller-supplied filters. Scope ids only apply to views that use them."""

    query: str | None = None
    owner_id: int | None = None
    published_only: bool = True
    date_window_days: int | None = None
    video_id: int | None = None
    channel_id: int | None = None
    subscriber_id: int | None = None


@dataclass(frozen=True)
class ScopeContext:
    filters: ViewFilters
    viewer_id: int | None
    now: datetime


Scope = Callable[[ScopeContext], list[ColumnElement[bool]]]


@dataclass(frozen=True)
class ViewDefinition:
    kind: ViewKind
    plan: JoinPlan
    model: type[BaseModel]
    scope: Scope
    default_sort: SortSpec = SortSpec()
    sort_keys: frozenset[str] = frozenset({"created_at"})
    text_fields: tuple[str, ...] = ()
    scores: tuple[str, ...] = ()
    # Liked flag: the target type the id is checked against, and the nested
    # record holding that id (None for the record itself)
    like_flag: LikeTargetType | None = None
    liked_in: str | None = None
    # Subscribed flag: (channel id field, nested record holding it or None)
    subscribed_flag: tuple[str, str | None] | None = None
    playlist_aggregates: bool = False
    requires_viewer: bool = False
    keep: Callable[[Record, ViewFilters], bool] | None = None
    # Reshapes joined records before derived fields (feed: one record per video)
    flatten: Callable[[list[Record]], list[Record]] | None = None
    public_sort: SortSpec | None = None
    label: str = "Record"

    @property
    def collection(self) -> str:
        return self.plan.collection

    def sort_for(self, filters: ViewFilters) -> SortSpec:
        if self.public_sort is not None and filters.owner_id is None:
            return self.public_sort
        return self.default_sort


OWNER_FIELDS = ("id", "username", "display_name", "avatar_url")
CHANNEL_FIELDS = (*OWNER_FIELDS, "cover_url", "created_at")
PLAYLIST_VIDEO_FIELDS = ("id", "title", "thumbnail_url", "duration_seconds", "views", "created_at")
LATEST_VIDEO_FIELDS = ("id", "title", "thumbnail_url", "created_at")

VIDEO_SORT_KEYS = frozenset(
    {"created_at", "updated_at", "views", "title", "duration_seconds", "likes_count"}
)


def owner_join(source: str, local_key: str = "owner_id", as_field: str = "owner", nested=()) -> JoinSpec:
    return JoinSpec(
        source=source,
        local_key=local_key,
        target="users",
        foreign_key="id",
        as_field=as_field,
        fields=OWNER_FIELDS,
        nested=tuple(nested),
    )


def likes_count_join(source: str, target_type: LikeTargetType) -> JoinSpec:
    return JoinSpec(
        source=source,
        local_key="id",
        target="likes",
        foreign_key="target_id",
        as_field="likes_count",
        collapse=Collapse.COUNT,
        fields=("id",),
        where=(("target_type", target_type),),
    )


def subscribers_count_join(source: str = "users") -> JoinSpec:
    return JoinSpec(
        source=source,
        local_key="id",
        target="subscriptions",
        foreign_key="channel_id",
        as_field="subscribers_count",
        collapse=Collapse.COUNT,
        fields=("id",),
    )


def published_videos_count_join() -> JoinSpec:
    return JoinSpec(
        source="users",
        local_key="id",
        target="videos",
        foreign_key="owner_id",
        as_field="videos_count",
        collapse=Collapse.COUNT,
        fields=("id",),
        where=(("is_published", True),),
    )


COMMENTS_COUNT_JOIN = JoinSpec(
    source="videos",
    local_key="id",
    target="comments",
    foreign_key="video_id",
    as_field="comments_count",
    collapse=Collapse.COUNT,
    fields=("id",),
)


def feed_videos_join() -> JoinSpec:
    """Published videos of a subscription's channel, each with its owner and likes."""
    return JoinSpec(
        source="subscriptions",
        local_key="channel_id",
        target="videos",
        foreign_key="owner_id",
        as_field="videos",
        collapse=Collapse.LIST,
        where=(("is_published", True),),
        order_by=("created_at", "desc"),
        nested=(owner_join("videos"), likes_count_join("videos", LikeTargetType.VIDEO)),
    )


def playlist_members_join(with_owner: bool) -> JoinSpec:
    return JoinSpec(
        source="playlists",
        local_key="video_ids",
        target="videos",
        foreign_key="id",
        as_field="videos",
        collapse=Collapse.LIST,
        fields=PLAYLIST_VIDEO_FIELDS,
        where=(("is_published", True),),
        nested=(owner_join("videos"),) if with_owner else (),
    )


def _liked_target_join(target_type: LikeTargetType) -> JoinSpec:
    target = {"video": "videos", "comment": "comments", "tweet": "tweets"}[target_type.value]
    where = (("is_published", True),) if target_type is LikeTargetType.VIDEO else ()
    return JoinSpec(
        source="likes",
        local_key="target_id",
        target=target,
        foreign_key="id",
        as_field=target_type.value,
        where=where,
        nested=(owner_join(target), likes_count_join(target, target_type)),
    )


# Scopes: hard filters pushed down into the primary query


def _window_start(ctx: ScopeContext, days: int) -> datetime:
    if days < 1:
        raise InvalidInput("date_window_days must be a positive integer")
    return ctx.now - timedelta(days=days)


def _date_window(ctx: ScopeContext, column) -> list[ColumnElement[bool]]:
    days = ctx.filters.date_window_days
    if days is None:
        return []
    return [column >= _window_start(ctx, days)]


def _require(value, label: str) -> int:
    if value is None:
        raise InvalidInput(f"{label} ID is required")
    return ensure_id(value, label.lower())


def _video_scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
    filters = ctx.filters
    criteria = _date_window(ctx, Video.created_at)
    if filters.owner_id is not None:
        owner_id = ensure_id(filters.owner_id, "user")
        criteria.append(Video.owner_id == owner_id)
        # Owners may list their own drafts
        if filters.published_only or owner_id != ctx.viewer_id:
            criteria.append(Video.is_published.is_(True))
    else:
        criteria.append(Video.is_published.is_(True))
    return criteria


def _my_videos_scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
    return [Video.owner_id == ctx.viewer_id, *_date_window(ctx, Video.created_at)]


def _trending_scope(window_days: Callable[[], int]) -> Scope:
    def scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
        # The trending window is fixed; a caller window can only narrow it
        return [
            Video.is_published.is_(True),
            Video.created_at >= _window_start(ctx, window_days()),
            *_date_window(ctx, Video.created_at),
        ]

    return scope


def _recommended_scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
    criteria = [Video.is_published.is_(True), *_date_window(ctx, Video.created_at)]
    if ctx.viewer_id is not None:
        criteria.append(Video.owner_id != ctx.viewer_id)
    return criteria


def _comments_scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
    return [Comment.video_id == _require(ctx.filters.video_id, "Video")]


def _tweets_scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
    criteria = _date_window(ctx, Tweet.created_at)
    if ctx.filters.owner_id is not None:
        criteria.append(Tweet.owner_id == ensure_id(ctx.filters.owner_id, "user"))
    return criteria


def _playlists_scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
    if ctx.filters.owner_id is not None:
        return [Playlist.owner_id == ensure_id(ctx.filters.owner_id, "user")]
    return []


def _subscribers_scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
    return [Subscription.channel_id == _require(ctx.filters.channel_id, "Channel")]


def _subscribed_channels_scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
    return [Subscription.subscriber_id == _require(ctx.filters.subscriber_id, "Subscriber")]


def _liked_scope(target_type: LikeTargetType) -> Scope:
    def scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
        return [Like.liked_by_id == ctx.viewer_id, Like.target_type == target_type]

    return scope


def _feed_scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
    return [Subscription.subscriber_id == ctx.viewer_id]


def _no_scope(ctx: ScopeContext) -> list[ColumnElement[bool]]:
    return []


def _has_target(field_name: str) -> Callable[[Record, ViewFilters], bool]:
    return lambda record, filters: record.get(field_name) is not None


def _public_playlist(record: Record, filters: ViewFilters) -> bool:
    # Public listings only show playlists with at least one published video
    return filters.owner_id is not None or record.get("total_videos", 0) > 0


def _trending_window_days() -> int:
    return get_settings().trending_window_days


def _liked_view(kind: ViewKind, target_type: LikeTargetType) -> ViewDefinition:
    return ViewDefinition(
        kind=kind,
        plan=JoinPlan("likes", (_liked_target_join(target_type),)),
        model=LikeView,
        scope=_liked_scope(target_type),
        requires_viewer=True,
        like_flag=target_type,
        liked_in=target_type.value,
        keep=_has_target(target_type.value),
        label="Like",
    )


VIEWS: dict[ViewKind, ViewDefinition] = {
    ViewKind.VIDEOS: ViewDefinition(
        kind=ViewKind.VIDEOS,
        plan=JoinPlan(
            "videos",
            (owner_join("videos"), likes_count_join("videos", LikeTargetType.VIDEO)),
        ),
        model=VideoView,
        scope=_video_scope,
        sort_keys=VIDEO_SORT_KEYS,
        text_fields=("title", "description"),
        like_flag=LikeTargetType.VIDEO,
        label="Video",
    ),
    ViewKind.MY_VIDEOS: ViewDefinition(
        kind=ViewKind.MY_VIDEOS,
        plan=JoinPlan(
            "videos",
            (likes_count_join("videos", LikeTargetType.VIDEO), COMMENTS_COUNT_JOIN),
        ),
        model=VideoView,
        scope=_my_videos_scope,
        sort_keys=VIDEO_SORT_KEYS | {"comments_count", "engagement_score"},
        text_fields=("title", "description"),
        scores=("engagement_score",),
        requires_viewer=True,
        label="Video",
    ),
    ViewKind.VIDEO_DETAIL: ViewDefinition(
        kind=ViewKind.VIDEO_DETAIL,
        plan=JoinPlan(
            "videos",
            (
                owner_join("videos", nested=(subscribers_count_join(),)),
                likes_count_join("videos", LikeTargetType.VIDEO),
                COMMENTS_COUNT_JOIN,
            ),
        ),
        model=VideoView,
        scope=_no_scope,
        like_flag=LikeTargetType.VIDEO,
        subscribed_flag=("id", "owner"),
        label="Video",
    ),
    ViewKind.TRENDING: ViewDefinition(
        kind=ViewKind.TRENDING,
        plan=JoinPlan(
            "videos",
            (owner_join("videos"), likes_count_join("videos", LikeTargetType.VIDEO)),
        ),
        model=VideoView,
        scope=_trending_scope(_trending_window_days),
        default_sort=SortSpec("trending_score", "desc"),
        sort_keys=VIDEO_SORT_KEYS | {"trending_score"},
        text_fields=("title", "description"),
        scores=("trending_score",),
        like_flag=LikeTargetType.VIDEO,
        label="Video",
    ),
    ViewKind.RECOMMENDED: ViewDefinition(
        kind=ViewKind.RECOMMENDED,
        plan=JoinPlan(
            "videos",
            (owner_join("videos"), likes_count_join("videos", LikeTargetType.VIDEO)),
        ),
        model=VideoView,
        scope=_recommended_scope,
        default_sort=SortSpec("recommendation_score", "desc"),
        sort_keys=VIDEO_SORT_KEYS | {"recommendation_score"},
        text_fields=("title", "description"),
        scores=("recommendation_score",),
        like_flag=LikeTargetType.VIDEO,
        label="Video",
    ),
    ViewKind.COMMENTS: ViewDefinition(
        kind=ViewKind.COMMENTS,
        plan=JoinPlan(
            "comments",
            (owner_join("comments"), likes_count_join("comments", LikeTargetType.COMMENT)),
        ),
        model=CommentView,
        scope=_comments_scope,
        sort_keys=frozenset({"created_at", "updated_at", "likes_count"}),
        text_fields=("content",),
        like_flag=LikeTargetType.COMMENT,
        label="Comment",
    ),
    ViewKind.TWEETS: ViewDefinition(
        kind=ViewKind.TWEETS,
        plan=JoinPlan(
            "tweets",
            (owner_join("tweets"), likes_count_join("tweets", LikeTargetType.TWEET)),
        ),
        model=TweetView,
        scope=_tweets_scope,
        sort_keys=frozenset({"created_at", "updated_at", "likes_count"}),
        text_fields=("content",),
        like_flag=LikeTargetType.TWEET,
        label="Tweet",
    ),
    ViewKind.TWEET_DETAIL: ViewDefinition(
        kind=ViewKind.TWEET_DETAIL,
        plan=JoinPlan(
            "tweets",
            (owner_join("tweets"), likes_count_join("tweets", LikeTargetType.TWEET)),
        ),
        model=TweetView,
        scope=_no_scope,
        like_flag=LikeTargetType.TWEET,
        label="Tweet",
    ),
    ViewKind.PLAYLISTS: ViewDefinition(
        kind=ViewKind.PLAYLISTS,
        plan=JoinPlan("playlists", (owner_join("playlists"), playlist_members_join(False))),
        model=PlaylistView,
        scope=_playlists_scope,
        default_sort=SortSpec("updated_at", "desc"),
        public_sort=SortSpec("total_views", "desc"),
        sort_keys=frozenset(
            {"created_at", "updated_at", "name", "total_views", "total_videos", "total_duration"}
        ),
        text_fields=("name", "description"),
        playlist_aggregates=True,
        keep=_public_playlist,
        label="Playlist",
    ),
    ViewKind.PLAYLIST_DETAIL: ViewDefinition(
        kind=ViewKind.PLAYLIST_DETAIL,
        plan=JoinPlan("playlists", (owner_join("playlists"), playlist_members_join(True))),
        model=PlaylistView,
        scope=_no_scope,
        playlist_aggregates=True,
        label="Playlist",
    ),
    ViewKind.SUBSCRIBERS: ViewDefinition(
        kind=ViewKind.SUBSCRIBERS,
        plan=JoinPlan(
            "subscriptions",
            (
                owner_join(
                    "subscriptions",
                    local_key="subscriber_id",
                    as_field="subscriber",
                    nested=(subscribers_count_join(),),
                ),
            ),
        ),
        model=SubscriptionView,
        scope=_subscribers_scope,
        text_fields=("subscriber.username", "subscriber.display_name"),
        subscribed_flag=("id", "subscriber"),
        label="Subscription",
    ),
    ViewKind.SUBSCRIBED_CHANNELS: ViewDefinition(
        kind=ViewKind.SUBSCRIBED_CHANNELS,
        plan=JoinPlan(
            "subscriptions",
            (
                JoinSpec(
                    source="subscriptions",
                    local_key="channel_id",
                    target="users",
                    foreign_key="id",
                    as_field="channel",
                    fields=CHANNEL_FIELDS,
                    nested=(
                        subscribers_count_join(),
                        published_videos_count_join(),
                        JoinSpec(
                            source="users",
                            local_key="id",
                            target="videos",
                            foreign_key="owner_id",
                            as_field="latest_video",
                            collapse=Collapse.FIRST,
                            fields=LATEST_VIDEO_FIELDS,
                            where=(("is_published", True),),
                            order_by=("created_at", "desc"),
                        ),
                    ),
                ),
            ),
        ),
        model=SubscriptionView,
        scope=_subscribed_channels_scope,
        text_fields=("channel.username", "channel.display_name"),
        label="Subscription",
    ),
    ViewKind.LIKED_VIDEOS: _liked_view(ViewKind.LIKED_VIDEOS, LikeTargetType.VIDEO),
    ViewKind.LIKED_COMMENTS: _liked_view(ViewKind.LIKED_COMMENTS, LikeTargetType.COMMENT),
    ViewKind.LIKED_TWEETS: _liked_view(ViewKind.LIKED_TWEETS, LikeTargetType.TWEET),
    ViewKind.FEED: ViewDefinition(
        kind=ViewKind.FEED,
        plan=JoinPlan("subscriptions", (feed_videos_join(),)),
        model=VideoView,
        scope=_feed_scope,
        sort_keys=frozenset({"created_at"}),
        text_fields=("title", "description"),
        like_flag=LikeTargetType.VIDEO,
        requires_viewer=True,
        flatten=flatten_feed,
        label="Video",
    ),
    ViewKind.CHANNEL: ViewDefinition(
        kind=ViewKind.CHANNEL,
        plan=JoinPlan("users", (subscribers_count_join(), published_videos_count_join())),
        model=ChannelProfile,
        scope=_no_scope,
        subscribed_flag=("id", None),
        label="Channel",
    ),
}
