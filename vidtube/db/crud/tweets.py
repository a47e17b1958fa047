"""CRUD operations for tweets."""

from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.crud.common import ensure_owner, get_or_404, validate_payload
from vidtube.models.engagement import Like, LikeTargetType
from vidtube.models.schemas import TweetWrite
from vidtube.models.tweet import Tweet


async def create_tweet(db: AsyncSession, owner_id: int, data: TweetWrite) -> Tweet:
    tweet = Tweet(owner_id=owner_id, content=data.content)
    db.add(tweet)
    await db.commit()
    await db.refresh(tweet)
    return tweet


async def update_tweet(
    db: AsyncSession,
    tweet_id: int,
    actor_id: int,
    data: Any,
) -> Tweet:
    """Replace the content of the actor's own tweet.

    ``data`` may be a raw body; it is validated only after ownership.
    """
    tweet = await get_or_404(db, Tweet, tweet_id, "Tweet")
    ensure_owner(tweet, actor_id, "You can only update your own tweets")
    data = validate_payload(TweetWrite, data)

    tweet.content = data.content
    await db.commit()
    await db.refresh(tweet)
    return tweet


async def delete_tweet(db: AsyncSession, tweet_id: int, actor_id: int) -> None:
    tweet = await get_or_404(db, Tweet, tweet_id, "Tweet")
    ensure_owner(tweet, actor_id, "You can only delete your own tweets")

    await db.execute(
        delete(Like).where(
            Like.target_type == LikeTargetType.TWEET,
            Like.target_id == tweet.id,
        )
    )
    await db.execute(delete(Tweet).where(Tweet.id == tweet.id))
    await db.commit()
