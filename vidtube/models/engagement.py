"""Like and Subscription models plus the typed engagement targets.

A like points at exactly one of a video, a comment or a tweet. In Python the
target is a tagged union (``VideoRef | CommentRef | TweetRef``); in the
database it is stored as ``(target_type, target_id)`` so a like can never
reference two targets at once.
"""

import enum
from dataclasses import dataclass
from typing import ClassVar

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vidtube.models.base import Base, TimestampMixin


class LikeTargetType(str, enum.Enum):
    """Kind of record a like points at."""

    VIDEO = "video"
    COMMENT = "comment"
    TWEET = "tweet"


@dataclass(frozen=True)
class VideoRef:
    id: int
    type: ClassVar[LikeTargetType] = LikeTargetType.VIDEO


@dataclass(frozen=True)
class CommentRef:
    id: int
    type: ClassVar[LikeTargetType] = LikeTargetType.COMMENT


@dataclass(frozen=True)
class TweetRef:
    id: int
    type: ClassVar[LikeTargetType] = LikeTargetType.TWEET


@dataclass(frozen=True)
class ChannelRef:
    """Subscription target: the channel (user) being subscribed to."""

    id: int


LikeTarget = VideoRef | CommentRef | TweetRef
TargetRef = LikeTarget | ChannelRef

_REF_BY_TYPE: dict[LikeTargetType, type[VideoRef] | type[CommentRef] | type[TweetRef]] = {
    LikeTargetType.VIDEO: VideoRef,
    LikeTargetType.COMMENT: CommentRef,
    LikeTargetType.TWEET: TweetRef,
}


def like_target(target_type: LikeTargetType | str, target_id: int) -> LikeTarget:
    """Build the typed target for a stored (type, id) pair."""
    return _REF_BY_TYPE[LikeTargetType(target_type)](target_id)


class Like(Base, TimestampMixin):
    """Existence flag: ``liked_by`` likes ``target``."""

    __tablename__ = "likes"

    id: Mapped[int] = mapped_column(primary_key=True)
    liked_by_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    target_type: Mapped[LikeTargetType] = mapped_column(Enum(LikeTargetType), nullable=False)
    target_id: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("liked_by_id", "target_type", "target_id", name="uq_like_actor_target"),
        Index("ix_like_target", "target_type", "target_id"),
    )

    @property
    def target(self) -> LikeTarget:
        return like_target(self.target_type, self.target_id)

    def __repr__(self) -> str:
        return f"<Like(id={self.id}, by={self.liked_by_id}, {self.target_type.value}={self.target_id})>"


class Subscription(Base, TimestampMixin):
    """Directed edge: ``subscriber`` follows ``channel``."""

    __tablename__ = "subscriptions"

    id: Mapped[int] = mapped_column(primary_key=True)
    subscriber_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    channel_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    __table_args__ = (
        UniqueConstraint("subscriber_id", "channel_id", name="uq_subscription_pair"),
        CheckConstraint("subscriber_id <> channel_id", name="no_self_subscription"),
    )

    def __repr__(self) -> str:
        return f"<Subscription(subscriber={self.subscriber_id}, channel={self.channel_id})>"
