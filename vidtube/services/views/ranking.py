"""Text search and deterministic sorting of joined records."""

from collections.abc import Collection, Iterable, Sequence
from dataclasses import dataclass

from vidtube.constants import DEFAULT_SORT_FIELD, DEFAULT_SORT_ORDER, VALID_SORT_ORDERS
from vidtube.exceptions import InvalidOperation
from vidtube.services.views.derived import SCORE_FIELDS
from vidtube.services.views.records import Record


@dataclass(frozen=True)
class SortSpec:
    key: str = DEFAULT_SORT_FIELD
    direction: str = DEFAULT_SORT_ORDER

    @classmethod
    def parse(cls, key: str | None, direction: str | None, default: "SortSpec") -> "SortSpec":
        """Build a sort from optional query parameters, falling back to ``default``."""
        return cls(
            key=key or default.key,
            direction=(direction or default.direction).lower(),
        )


def _lookup(record: Record, path: str):
    """Value at a dotted path such as ``channel.username``; None when any hop is missing."""
    value = record
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def search(records: Iterable[Record], query: str | None, fields: Sequence[str]) -> list[Record]:
    """Keep records where any of ``fields`` contains ``query``, case-insensitively."""
    records = list(records)
    needle = (query or "").strip().casefold()
    if not needle:
        return records
    return [
        record
        for record in records
        if any(needle in str(_lookup(record, name) or "").casefold() for name in fields)
    ]


def _present_first(value):
    # None sorts below every real value
    return (value is not None, value)


def sort_records(
    records: Iterable[Record],
    sort: SortSpec,
    allowed_keys: Collection[str],
) -> list[Record]:
    """Sort by ``sort.key`` with ties broken deterministically.

    Ties on a computed score fall back to ``created_at`` (newest first); any
    remaining tie is broken by ``id`` descending.
    """
    if sort.key not in allowed_keys:
        raise InvalidOperation(f"Unsupported sort key: {sort.key}")
    if sort.direction not in VALID_SORT_ORDERS:
        raise InvalidOperation(f"Invalid sort order: {sort.direction}. Use 'asc' or 'desc'")

    ordered = sorted(records, key=lambda r: _present_first(r.get("id")), reverse=True)
    if sort.key in SCORE_FIELDS:
        ordered.sort(key=lambda r: _present_first(r.get("created_at")), reverse=True)
    ordered.sort(key=lambda r: _present_first(r.get(sort.key)), reverse=sort.direction == "desc")
    return ordered
