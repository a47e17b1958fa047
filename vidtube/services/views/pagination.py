"""Offset pagination over an already ordered result."""

import math
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from vidtube.constants import MAX_PAGE_SIZE
from vidtube.exceptions import InvalidInput

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a list view plus the metadata to fetch its neighbours."""

    items: list[T]
    total_count: int
    total_pages: int
    page: int
    limit: int
    has_next: bool
    has_prev: bool


def _positive_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidInput(f"{name} must be a positive integer")
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"{name} must be a positive integer") from None
    if isinstance(value, float) and value != parsed:
        raise InvalidInput(f"{name} must be a positive integer")
    if parsed < 1:
        raise InvalidInput(f"{name} must be a positive integer")
    return parsed


def validate_page_params(page: Any, limit: Any, max_limit: int = MAX_PAGE_SIZE) -> tuple[int, int]:
    """Parse ``page``/``limit``; limits above ``max_limit`` are rejected, not clamped."""
    page = _positive_int(page, "page")
    limit = _positive_int(limit, "limit")
    if limit > max_limit:
        raise InvalidInput(f"limit cannot exceed {max_limit}")
    return page, limit


def paginate(ordered: Sequence[T], page: Any, limit: Any, max_limit: int = MAX_PAGE_SIZE) -> Page[T]:
    """Slice ``ordered`` into the requested page.

    ``total_count`` counts the whole ordered input. A page past the end is
    empty but still reports correct totals.
    """
    page, limit = validate_page_params(page, limit, max_limit)
    total = len(ordered)
    total_pages = math.ceil(total / limit)
    start = (page - 1) * limit
    return Page(
        items=list(ordered[start : start + limit]),
        total_count=total,
        total_pages=total_pages,
        page=page,
        limit=limit,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
