"""Join planner and executor.

A view declares the relations it needs as an ordered list of ``JoinSpec``.
Every join is a left outer join: a record whose related rows are missing
still comes out of the join, with the collapse default in place of the
related value. Collapse rules turn the one-to-many result of a join into a
single field:

- ``ONE``: at most one related row is expected; more is a pipeline bug.
- ``FIRST``: many rows are possible; ``order_by`` picks the one to keep.
- ``COUNT``: number of related rows.
- ``LIST``: the related rows themselves (filtered by ``where``).

``apply_join`` is the pure part and works on rows already in memory; the
executor loads related rows in one ``IN (...)`` query per join and feeds
them through ``apply_join``.
"""

import enum
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.exceptions import PipelineError
from vidtube.services.views.records import (
    Record,
    column,
    fetch_records,
    field_names,
)


class Collapse(str, enum.Enum):
    ONE = "one"
    FIRST = "first"
    COUNT = "count"
    LIST = "list"


@dataclass(frozen=True)
class JoinSpec:
    """One left outer join from ``source`` records to ``target`` rows.

    ``local_key`` may hold a scalar or a list of keys; a list keeps its
    stored order in the joined output (playlist members).
    """

    source: str
    local_key: str
    target: str
    foreign_key: str
    as_field: str
    collapse: Collapse = Collapse.ONE
    fields: tuple[str, ...] | None = None
    where: tuple[tuple[str, Any], ...] = ()
    order_by: tuple[str, str] | None = None
    nested: tuple["JoinSpec", ...] = ()

    @property
    def default(self) -> Any:
        if self.collapse is Collapse.COUNT:
            return 0
        if self.collapse is Collapse.LIST:
            return []
        return None

    def output_fields(self) -> tuple[str, ...]:
        """Field names of one joined row after projection and nested joins."""
        base = self.fields if self.fields is not None else field_names(self.target)
        return tuple(base) + tuple(n.as_field for n in self.nested)


def unwrap_single(items: Sequence[Any], default: Any = None) -> Any:
    """Return the only element of ``items`` or ``default`` when empty.

    More than one element means a ONE join matched several rows, which the
    data model rules out; that is reported instead of silently picking one.
    """
    if len(items) > 1:
        raise PipelineError(f"Expected at most one related record, got {len(items)}")
    return items[0] if items else default


@dataclass(frozen=True)
class JoinPlan:
    """Validated, ordered joins for one primary collection."""

    collection: str
    joins: tuple[JoinSpec, ...] = ()

    def __post_init__(self) -> None:
        _check_unique(
            self.collection,
            (*field_names(self.collection), *(j.as_field for j in self.joins)),
        )
        for spec in self.joins:
            _validate_spec(spec, self.collection, depth=0)

    def output_fields(self) -> tuple[str, ...]:
        return (
            *field_names(self.collection),
            *(j.as_field for j in self.joins),
        )


def _check_unique(where: str, names: Iterable[str]) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise PipelineError(f"Duplicate output field '{name}' in {where}")
        seen.add(name)


def _validate_spec(spec: JoinSpec, source: str, depth: int) -> None:
    if spec.source != source:
        raise PipelineError(f"Join '{spec.as_field}' reads from {spec.source}, expected {source}")
    if depth > 0 and spec.nested:
        raise PipelineError(f"Join '{spec.as_field}' nests more than one level")
    if spec.collapse is Collapse.FIRST and spec.order_by is None:
        raise PipelineError(f"Join '{spec.as_field}' takes the first row without an order")

    # Resolving the columns raises for unknown names
    column(spec.target, spec.foreign_key)
    for name, _ in spec.where:
        column(spec.target, name)
    if spec.order_by is not None:
        column(spec.target, spec.order_by[0])
    if spec.fields is not None:
        stored = set(field_names(spec.target))
        unknown = [name for name in spec.fields if name not in stored]
        if unknown:
            raise PipelineError(f"Join '{spec.as_field}' projects unknown fields {unknown}")

    _check_unique(f"join '{spec.as_field}'", spec.output_fields())
    for nested in spec.nested:
        _validate_spec(nested, spec.target, depth + 1)


def _matches_where(row: Record, where: tuple[tuple[str, Any], ...]) -> bool:
    return all(row.get(name) == value for name, value in where)


def _project(row: Record, names: tuple[str, ...]) -> Record:
    return {name: row.get(name) for name in names}


def apply_join(records: Sequence[Record], spec: JoinSpec, related: Iterable[Record]) -> list[Record]:
    """Attach ``spec.as_field`` to copies of ``records`` from ``related`` rows."""
    index: dict[Any, list[Record]] = defaultdict(list)
    for row in related:
        if _matches_where(row, spec.where):
            index[row.get(spec.foreign_key)].append(row)

    if spec.order_by is not None:
        order_field, direction = spec.order_by
        for rows in index.values():
            rows.sort(key=lambda r: (r.get("id") or 0), reverse=True)
            rows.sort(key=lambda r: r.get(order_field), reverse=direction == "desc")

    projection = spec.output_fields()
    joined = []
    for record in records:
        local = record.get(spec.local_key)
        if isinstance(local, list):
            matches = [row for key in local for row in index.get(key, ())]
        elif local is None:
            matches = []
        else:
            matches = index.get(local, [])

        out = dict(record)
        out[spec.as_field] = _collapse(spec, [_project(row, projection) for row in matches])
        joined.append(out)
    return joined


def _collapse(spec: JoinSpec, matches: list[Record]) -> Any:
    if spec.collapse is Collapse.COUNT:
        return len(matches)
    if spec.collapse is Collapse.LIST:
        return matches
    if spec.collapse is Collapse.FIRST:
        return matches[0] if matches else spec.default
    return unwrap_single(matches, spec.default)


def _local_keys(records: Sequence[Record], local_key: str) -> list[Any]:
    keys: set[Any] = set()
    for record in records:
        value = record.get(local_key)
        if isinstance(value, list):
            keys.update(value)
        elif value is not None:
            keys.add(value)
    return sorted(keys)


async def _run_join(db: AsyncSession, spec: JoinSpec, records: list[Record]) -> list[Record]:
    keys = _local_keys(records, spec.local_key)
    related: list[Record] = []
    if keys:
        criteria = [column(spec.target, spec.foreign_key).in_(keys)]
        criteria += [column(spec.target, name) == value for name, value in spec.where]
        related = await fetch_records(db, spec.target, criteria)
        for nested in spec.nested:
            related = await _run_join(db, nested, related)
    return apply_join(records, spec, related)


async def execute_plan(db: AsyncSession, plan: JoinPlan, records: list[Record]) -> list[Record]:
    """Run every join of ``plan`` over ``records`` in declaration order."""
    for spec in plan.joins:
        records = await _run_join(db, spec, records)
    return records
