"""Derived fields: viewer flags, composite scores and playlist aggregates.

Everything here is computed at request time from joined records and is
never written back to storage.
"""

import random
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.constants import (
    ENGAGEMENT_COMMENT_WEIGHT,
    ENGAGEMENT_LIKE_WEIGHT,
    ENGAGEMENT_VIEW_WEIGHT,
    RECOMMENDATION_LIKE_WEIGHT,
    RECOMMENDATION_NOISE_MAX,
    RECOMMENDATION_VIEW_WEIGHT,
    TRENDING_LIKE_WEIGHT,
    TRENDING_VIEW_WEIGHT,
)
from vidtube.exceptions import PipelineError
from vidtube.models.engagement import Like, LikeTargetType, Subscription
from vidtube.services.views.records import Record

SCORE_FIELDS = frozenset({"engagement_score", "trending_score", "recommendation_score"})


class NoiseSource(Protocol):
    """Supplies the random term of the recommendation score."""

    def sample(self, record_id: int) -> float: ...


class RandomNoise:
    """Uniform noise in ``[0, RECOMMENDATION_NOISE_MAX)``, fresh on every call."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()

    def sample(self, record_id: int) -> float:
        return self._rng.random() * RECOMMENDATION_NOISE_MAX


class SeededNoise:
    """Deterministic noise per ``(seed, record_id)``."""

    def __init__(self, seed: str) -> None:
        self.seed = seed

    def sample(self, record_id: int) -> float:
        return random.Random(f"{self.seed}:{record_id}").random() * RECOMMENDATION_NOISE_MAX

    @classmethod
    def for_viewer(cls, viewer_id: int | None, day: date) -> "SeededNoise":
        return cls(f"{viewer_id or 'anonymous'}:{day.isoformat()}")


class FixedNoise:
    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def sample(self, record_id: int) -> float:
        return self.value


def engagement_score(record: Record) -> float:
    return (
        (record.get("views") or 0) * ENGAGEMENT_VIEW_WEIGHT
        + (record.get("likes_count") or 0) * ENGAGEMENT_LIKE_WEIGHT
        + (record.get("comments_count") or 0) * ENGAGEMENT_COMMENT_WEIGHT
    )


def trending_score(record: Record) -> float:
    return (
        (record.get("views") or 0) * TRENDING_VIEW_WEIGHT
        + (record.get("likes_count") or 0) * TRENDING_LIKE_WEIGHT
    )


def recommendation_score(record: Record, noise: NoiseSource) -> float:
    return (
        (record.get("views") or 0) * RECOMMENDATION_VIEW_WEIGHT
        + (record.get("likes_count") or 0) * RECOMMENDATION_LIKE_WEIGHT
        + noise.sample(record["id"])
    )


def attach_scores(
    records: Iterable[Record],
    names: Iterable[str],
    noise: NoiseSource | None = None,
) -> list[Record]:
    """Copy ``records`` with the requested score fields added."""
    names = tuple(names)
    noise = noise or RandomNoise()
    scored = []
    for record in records:
        out = dict(record)
        for name in names:
            if name == "engagement_score":
                out[name] = engagement_score(record)
            elif name == "trending_score":
                out[name] = trending_score(record)
            elif name == "recommendation_score":
                out[name] = recommendation_score(record, noise)
            else:
                raise PipelineError(f"Unknown score field: {name}")
        scored.append(out)
    return scored


def attach_flag(
    records: Iterable[Record],
    flag: str,
    key: str,
    active: set[int],
    into: str | None = None,
) -> list[Record]:
    """Set ``flag`` to whether ``key`` is in ``active``.

    With ``into`` the flag goes on the nested record under that field (left
    untouched when the nested record is missing).
    """
    flagged = []
    for record in records:
        out = dict(record)
        if into is None:
            out[flag] = out.get(key) in active
        elif out.get(into) is not None:
            nested = dict(out[into])
            nested[flag] = nested.get(key) in active
            out[into] = nested
        flagged.append(out)
    return flagged


async def liked_target_ids(
    db: AsyncSession,
    viewer_id: int | None,
    target_type: LikeTargetType,
    target_ids: Sequence[int],
) -> set[int]:
    """Subset of ``target_ids`` the viewer has liked; one query, none without a viewer."""
    if viewer_id is None or not target_ids:
        return set()
    result = await db.execute(
        select(Like.target_id).where(
            Like.liked_by_id == viewer_id,
            Like.target_type == target_type,
            Like.target_id.in_(set(target_ids)),
        )
    )
    return set(result.scalars().all())


async def subscribed_channel_ids(
    db: AsyncSession,
    viewer_id: int | None,
    channel_ids: Sequence[int],
) -> set[int]:
    """Subset of ``channel_ids`` the viewer subscribes to."""
    if viewer_id is None or not channel_ids:
        return set()
    result = await db.execute(
        select(Subscription.channel_id).where(
            Subscription.subscriber_id == viewer_id,
            Subscription.channel_id.in_(set(channel_ids)),
        )
    )
    return set(result.scalars().all())


def playlist_aggregates(record: Record, members_field: str = "videos") -> dict[str, Any]:
    """Totals over the (already filtered) member videos of a playlist record."""
    videos = record.get(members_field) or []
    return {
        "total_videos": len(videos),
        "total_views": sum(v.get("views") or 0 for v in videos),
        "total_duration": sum(v.get("duration_seconds") or 0 for v in videos),
        "first_video_thumbnail": videos[0].get("thumbnail_url") if videos else None,
    }


def attach_playlist_aggregates(records: Iterable[Record]) -> list[Record]:
    return [{**record, **playlist_aggregates(record)} for record in records]
