"""Request parameters shared by the API endpoints."""

from typing import Annotated, Any

from fastapi import Body, Query

from vidtube.services.views import VIEWS, SortSpec, ViewFilters, ViewKind

PageQuery = Annotated[int, Query(description="1-based page number")]
LimitQuery = Annotated[int, Query(description="Items per page")]
SortByQuery = Annotated[str | None, Query(description="Sort field")]
SortOrderQuery = Annotated[str | None, Query(description="asc or desc")]
SearchQuery = Annotated[str | None, Query(description="Case-insensitive text search")]


def resolve_sort(
    kind: ViewKind,
    filters: ViewFilters,
    sort_by: str | None,
    sort_order: str | None,
) -> SortSpec:
    """Sort requested by the client, falling back to the view's default."""
    return SortSpec.parse(sort_by, sort_order, VIEWS[kind].sort_for(filters))


# Update bodies are read raw so ownership is checked before the schema
RawBody = Annotated[Any, Body(description="JSON object with the fields to change")]
