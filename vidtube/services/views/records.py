"""Plain-dict records loaded from the entity store.

The view pipeline works on detached dictionaries rather than ORM instances:
joins add keys, derived fields add keys, and nothing flows back into the
session. Datetimes are normalized to timezone-aware UTC so that records
loaded from SQLite compare cleanly with aware cutoffs.
"""

import enum
from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import ColumnElement, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.exceptions import PipelineError
from vidtube.models import Comment, Like, Playlist, Subscription, Tweet, User, Video
from vidtube.models.playlist import playlist_videos

Record = dict[str, Any]

COLLECTIONS: dict[str, type] = {
    "users": User,
    "videos": Video,
    "comments": Comment,
    "tweets": Tweet,
    "likes": Like,
    "subscriptions": Subscription,
    "playlists": Playlist,
}

# Synthetic list-valued field attached to every playlist record
PLAYLIST_MEMBERS_FIELD = "video_ids"


def model_for(collection: str) -> type:
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise PipelineError(f"Unknown collection: {collection}") from None


def field_names(collection: str) -> tuple[str, ...]:
    """Names of the stored fields a record of ``collection`` carries."""
    names = tuple(attr.key for attr in inspect(model_for(collection)).column_attrs)
    if collection == "playlists":
        names += (PLAYLIST_MEMBERS_FIELD,)
    return names


def column(collection: str, name: str):
    """Mapped column attribute for ``collection.name``."""
    model = model_for(collection)
    if name not in inspect(model).column_attrs:
        raise PipelineError(f"Unknown field {collection}.{name}")
    return getattr(model, name)


def normalize_value(value: Any) -> Any:
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    if isinstance(value, enum.Enum):
        return value.value
    return value


def to_record(instance: Any) -> Record:
    """Detach an ORM instance into a record of its column values."""
    return {
        attr.key: normalize_value(getattr(instance, attr.key))
        for attr in inspect(type(instance)).column_attrs
    }


async def fetch_records(
    db: AsyncSession,
    collection: str,
    criteria: Sequence[ColumnElement[bool]] = (),
) -> list[Record]:
    """Load every record of ``collection`` matching ``criteria``, ordered by id."""
    model = model_for(collection)
    result = await db.execute(
        select(model)
        .where(*criteria)
        .order_by(model.id)
        .execution_options(populate_existing=True)
    )
    records = [to_record(row) for row in result.scalars().all()]

    if collection == "playlists":
        await _attach_playlist_members(db, records)
    return records


async def _attach_playlist_members(db: AsyncSession, records: list[Record]) -> None:
    for record in records:
        record[PLAYLIST_MEMBERS_FIELD] = []
    if not records:
        return

    by_id = {record["id"]: record for record in records}
    result = await db.execute(
        select(playlist_videos.c.playlist_id, playlist_videos.c.video_id)
        .where(playlist_videos.c.playlist_id.in_(by_id))
        .order_by(playlist_videos.c.playlist_id, playlist_videos.c.position)
    )
    for playlist_id, video_id in result.all():
        by_id[playlist_id][PLAYLIST_MEMBERS_FIELD].append(video_id)
