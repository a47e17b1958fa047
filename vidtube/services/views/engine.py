"""View engine: runs a named view end to end.

Stages, in order: hard filters (pushed into the primary query), joins,
derived fields, text search, sort, pagination. Each request recomputes the
view from source records; nothing is cached between requests.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.config import get_settings
from vidtube.constants import DEFAULT_PAGE
from vidtube.db.crud.common import ensure_id
from vidtube.exceptions import InvalidInput, NotFound
from vidtube.models.base import utcnow
from vidtube.services.views.definitions import (
    VIEWS,
    ScopeContext,
    ViewDefinition,
    ViewFilters,
    ViewKind,
)
from vidtube.services.views.derived import (
    NoiseSource,
    RandomNoise,
    SeededNoise,
    attach_flag,
    attach_playlist_aggregates,
    attach_scores,
    liked_target_ids,
    subscribed_channel_ids,
)
from vidtube.services.views.joins import execute_plan
from vidtube.services.views.pagination import Page, paginate, validate_page_params
from vidtube.services.views.ranking import SortSpec, search, sort_records
from vidtube.services.views.records import Record, column, fetch_records
from vidtube.utils.logging import LogContext, get_logger
from vidtube.utils.metrics import metrics

logger = get_logger(__name__)


def default_noise(viewer_id: int | None, now: datetime) -> NoiseSource:
    if get_settings().recommendation_noise_seeded:
        return SeededNoise.for_viewer(viewer_id, now.date())
    return RandomNoise()


async def _derive(
    db: AsyncSession,
    definition: ViewDefinition,
    records: list[Record],
    viewer_id: int | None,
    noise: NoiseSource,
) -> list[Record]:
    """Attach viewer flags, playlist aggregates and scores."""
    if definition.like_flag is not None:
        into = definition.liked_in
        holders = [r[into] if into else r for r in records]
        target_ids = [h["id"] for h in holders if h is not None]
        liked = await liked_target_ids(db, viewer_id, definition.like_flag, target_ids)
        records = attach_flag(records, "is_liked", "id", liked, into=into)

    if definition.subscribed_flag is not None:
        key, into = definition.subscribed_flag
        holders = [r[into] if into else r for r in records]
        channel_ids = [h[key] for h in holders if h is not None]
        subscribed = await subscribed_channel_ids(db, viewer_id, channel_ids)
        records = attach_flag(records, "is_subscribed", key, subscribed, into=into)

    if definition.playlist_aggregates:
        records = attach_playlist_aggregates(records)

    if definition.scores:
        records = attach_scores(records, definition.scores, noise)
    return records


async def _load(
    db: AsyncSession,
    definition: ViewDefinition,
    filters: ViewFilters,
    viewer_id: int | None,
    now: datetime,
    noise: NoiseSource,
    record_id: int | None = None,
) -> list[Record]:
    criteria = definition.scope(ScopeContext(filters=filters, viewer_id=viewer_id, now=now))
    if record_id is not None:
        criteria.append(column(definition.collection, "id") == record_id)

    records = await fetch_records(db, definition.collection, criteria)
    records = await execute_plan(db, definition.plan, records)
    if definition.flatten is not None:
        records = definition.flatten(records)
    records = await _derive(db, definition, records, viewer_id, noise)
    if definition.keep is not None:
        records = [r for r in records if definition.keep(r, filters)]
    return records


def _check_viewer(definition: ViewDefinition, viewer_id: int | None) -> None:
    if definition.requires_viewer and viewer_id is None:
        raise InvalidInput(f"The {definition.kind.value} view requires a signed-in viewer")


async def list_view(
    db: AsyncSession,
    kind: ViewKind,
    filters: ViewFilters | None = None,
    sort: SortSpec | None = None,
    viewer_id: int | None = None,
    page: Any = DEFAULT_PAGE,
    limit: Any = None,
    *,
    noise: NoiseSource | None = None,
    now: datetime | None = None,
) -> Page[BaseModel]:
    """Run the ``kind`` view and return one page of typed view models."""
    definition = VIEWS[kind]
    filters = filters or ViewFilters()
    settings = get_settings()
    if limit is None:
        limit = settings.default_page_size
    page, limit = validate_page_params(page, limit, settings.max_page_size)
    _check_viewer(definition, viewer_id)
    now = now or utcnow()
    sort = sort or definition.sort_for(filters)
    log = LogContext(logger, view=kind.value, viewer=viewer_id)

    with metrics.time_view(kind.value):
        records = await _load(
            db, definition, filters, viewer_id, now, noise or default_noise(viewer_id, now)
        )
        records = search(records, filters.query, definition.text_fields)
        ordered = sort_records(records, sort, definition.sort_keys)

        result = paginate(ordered, page, limit, settings.max_page_size)
        result.items = [definition.model.model_validate(r) for r in result.items]

    log.debug(
        f"page {result.page}/{result.total_pages} with {len(result.items)} of {result.total_count} records"
    )
    return result


async def get_view(
    db: AsyncSession,
    kind: ViewKind,
    record_id: Any,
    viewer_id: int | None = None,
    *,
    noise: NoiseSource | None = None,
    now: datetime | None = None,
) -> BaseModel:
    """Run the ``kind`` view for a single record; NotFound when it does not exist."""
    definition = VIEWS[kind]
    record_id = ensure_id(record_id, definition.label.lower())
    _check_viewer(definition, viewer_id)
    now = now or utcnow()

    with metrics.time_view(kind.value):
        records = await _load(
            db,
            definition,
            ViewFilters(),
            viewer_id,
            now,
            noise or default_noise(viewer_id, now),
            record_id=record_id,
        )
    if not records:
        raise NotFound(f"{definition.label} not found")
    return definition.model.model_validate(records[0])
