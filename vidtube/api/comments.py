"""Comment API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.common import (
    LimitQuery,
    PageQuery,
    RawBody,
    SortByQuery,
    SortOrderQuery,
    resolve_sort,
)
from vidtube.auth import CurrentUser, OptionalUser
from vidtube.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from vidtube.db import get_db
from vidtube.db.crud import add_comment, delete_comment, get_video, update_comment
from vidtube.models.schemas import CommentRead, CommentWrite
from vidtube.services.views import CommentView, Page, ViewFilters, ViewKind, list_view

router = APIRouter()


@router.get("/video/{video_id}", response_model=Page[CommentView])
async def list_video_comments(
    video_id: int,
    user: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    sort_by: SortByQuery = None,
    sort_order: SortOrderQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """Comments on a video, newest first by default."""
    video = await get_video(db, video_id)
    filters = ViewFilters(video_id=video.id)
    return await list_view(
        db,
        ViewKind.COMMENTS,
        filters,
        resolve_sort(ViewKind.COMMENTS, filters, sort_by, sort_order),
        viewer_id=user.id if user else None,
        page=page,
        limit=limit,
    )


@router.post("/video/{video_id}", response_model=CommentRead, status_code=201)
async def add_comment_endpoint(
    video_id: int,
    data: CommentWrite,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CommentRead:
    comment = await add_comment(db, video_id, user.id, data)
    return CommentRead.model_validate(comment)


@router.patch("/{comment_id}", response_model=CommentRead)
async def update_comment_endpoint(
    comment_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    data: RawBody = None,
) -> CommentRead:
    comment = await update_comment(db, comment_id, user.id, data)
    return CommentRead.model_validate(comment)


@router.delete("/{comment_id}", status_code=204)
async def delete_comment_endpoint(
    comment_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await delete_comment(db, comment_id, user.id)
