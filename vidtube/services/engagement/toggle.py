"""Toggle engagement store for likes and subscriptions.

Both records are pure existence flags between an actor and a target. A single
``toggle`` call decides between create and delete, so repeated calls flip the
state while the invariant "at most one record per (actor, target)" always
holds. The database unique constraint is the final arbiter: when a concurrent
request created the record first, the losing insert is reported as active
instead of failing.
"""

from sqlalchemy import case, delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.exceptions import InvalidOperation, NotFound
from vidtube.models.comment import Comment
from vidtube.models.engagement import (
    ChannelRef,
    Like,
    LikeTarget,
    LikeTargetType,
    Subscription,
    TargetRef,
)
from vidtube.models.schemas import LikeStats, ToggleResult
from vidtube.models.tweet import Tweet
from vidtube.models.user import User
from vidtube.models.video import Video
from vidtube.utils.logging import get_logger
from vidtube.utils.metrics import metrics

logger = get_logger(__name__)

_TARGET_MODELS = {
    LikeTargetType.VIDEO: (Video, "Video"),
    LikeTargetType.COMMENT: (Comment, "Comment"),
    LikeTargetType.TWEET: (Tweet, "Tweet"),
}


async def toggle(db: AsyncSession, actor_id: int, target: TargetRef) -> ToggleResult:
    """Flip the engagement flag between ``actor_id`` and ``target``."""
    if isinstance(target, ChannelRef):
        result = await _toggle_subscription(db, actor_id, target)
        label = "channel"
    else:
        result = await _toggle_like(db, actor_id, target)
        label = target.type.value

    metrics.engagement_toggles_total.inc(target=label, active=str(result.active).lower())
    return result


async def _toggle_like(db: AsyncSession, actor_id: int, target: LikeTarget) -> ToggleResult:
    model, label = _TARGET_MODELS[target.type]
    if await db.get(model, target.id) is None:
        raise NotFound(f"{label} not found")

    existing_id = await db.scalar(
        select(Like.id).where(
            Like.liked_by_id == actor_id,
            Like.target_type == target.type,
            Like.target_id == target.id,
        )
    )
    if existing_id is not None:
        await db.execute(delete(Like).where(Like.id == existing_id))
        await db.commit()
        return ToggleResult(active=False)

    db.add(Like(liked_by_id=actor_id, target_type=target.type, target_id=target.id))
    return await _commit_create(db, f"like {target.type.value}={target.id} by {actor_id}")


async def _toggle_subscription(db: AsyncSession, actor_id: int, target: ChannelRef) -> ToggleResult:
    if target.id == actor_id:
        raise InvalidOperation("You cannot subscribe to yourself")
    if await db.get(User, target.id) is None:
        raise NotFound("Channel not found")

    existing_id = await db.scalar(
        select(Subscription.id).where(
            Subscription.subscriber_id == actor_id,
            Subscription.channel_id == target.id,
        )
    )
    if existing_id is not None:
        await db.execute(delete(Subscription).where(Subscription.id == existing_id))
        await db.commit()
        return ToggleResult(active=False)

    db.add(Subscription(subscriber_id=actor_id, channel_id=target.id))
    return await _commit_create(db, f"subscription {actor_id}->{target.id}")


async def _commit_create(db: AsyncSession, description: str) -> ToggleResult:
    """Commit a pending create; a uniqueness violation means another request won."""
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        logger.info(f"Concurrent toggle already created {description}; treating as active")
    return ToggleResult(active=True)


async def is_subscribed(db: AsyncSession, subscriber_id: int | None, channel_id: int) -> bool:
    """Whether ``subscriber_id`` currently subscribes to ``channel_id``."""
    if subscriber_id is None:
        return False
    found = await db.scalar(
        select(Subscription.id).where(
            Subscription.subscriber_id == subscriber_id,
            Subscription.channel_id == channel_id,
        )
    )
    return found is not None


async def count_subscribers(db: AsyncSession, channel_id: int) -> int:
    total = await db.scalar(
        select(func.count(Subscription.id)).where(Subscription.channel_id == channel_id)
    )
    return total or 0


async def get_like_stats(db: AsyncSession, user_id: int) -> LikeStats:
    """Likes given by ``user_id``, broken down by target type."""
    row = (
        await db.execute(
            select(
                func.count(Like.id).label("total"),
                *(
                    func.coalesce(
                        func.sum(case((Like.target_type == target_type, 1), else_=0)), 0
                    ).label(target_type.value)
                    for target_type in LikeTargetType
                ),
            ).where(Like.liked_by_id == user_id)
        )
    ).one()
    return LikeStats(
        total_likes=row.total,
        videos_liked=row.video,
        comments_liked=row.comment,
        tweets_liked=row.tweet,
    )
