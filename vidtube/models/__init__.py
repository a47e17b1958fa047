"""SQLAlchemy models."""

from vidtube.models.base import Base
from vidtube.models.comment import Comment
from vidtube.models.engagement import (
    ChannelRef,
    CommentRef,
    Like,
    LikeTarget,
    LikeTargetType,
    Subscription,
    TweetRef,
    VideoRef,
    like_target,
)
from vidtube.models.playlist import Playlist, playlist_videos
from vidtube.models.tweet import Tweet
from vidtube.models.user import User
from vidtube.models.video import Video

__all__ = [
    "Base",
    "User",
    "Video",
    "Comment",
    "Tweet",
    "Like",
    "LikeTarget",
    "LikeTargetType",
    "Subscription",
    "Playlist",
    "playlist_videos",
    "VideoRef",
    "CommentRef",
    "TweetRef",
    "ChannelRef",
    "like_target",
]
