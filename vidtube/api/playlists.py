"""Playlist API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.api.common import (
    LimitQuery,
    PageQuery,
    RawBody,
    SearchQuery,
    SortByQuery,
    SortOrderQuery,
    resolve_sort,
)
from vidtube.auth import CurrentUser
from vidtube.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE
from vidtube.db import get_db
from vidtube.db.crud import (
    add_video_to_playlist,
    create_playlist,
    delete_playlist,
    get_user,
    remove_video_from_playlist,
    to_playlist_read,
    update_playlist,
)
from vidtube.models.schemas import PlaylistCreate, PlaylistRead
from vidtube.services.views import Page, PlaylistView, ViewFilters, ViewKind, get_view, list_view

router = APIRouter()


async def _list_playlists(
    db: AsyncSession,
    filters: ViewFilters,
    sort_by: str | None,
    sort_order: str | None,
    page: int,
    limit: int,
):
    return await list_view(
        db,
        ViewKind.PLAYLISTS,
        filters,
        resolve_sort(ViewKind.PLAYLISTS, filters, sort_by, sort_order),
        page=page,
        limit=limit,
    )


@router.post("", response_model=PlaylistRead, status_code=201)
async def create_playlist_endpoint(
    data: PlaylistCreate,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PlaylistRead:
    playlist = await create_playlist(db, user.id, data)
    return await to_playlist_read(db, playlist)


@router.get("", response_model=Page[PlaylistView])
async def list_public_playlists(
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    sort_by: SortByQuery = None,
    sort_order: SortOrderQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    """Playlists with at least one published video, most viewed first by default."""
    return await _list_playlists(db, ViewFilters(query=query), sort_by, sort_order, page, limit)


@router.get("/mine", response_model=Page[PlaylistView])
async def list_my_playlists(
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    sort_by: SortByQuery = None,
    sort_order: SortOrderQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    return await _list_playlists(
        db, ViewFilters(query=query, owner_id=user.id), sort_by, sort_order, page, limit
    )


@router.get("/user/{user_id}", response_model=Page[PlaylistView])
async def list_user_playlists(
    user_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
    query: SearchQuery = None,
    sort_by: SortByQuery = None,
    sort_order: SortOrderQuery = None,
    page: PageQuery = DEFAULT_PAGE,
    limit: LimitQuery = DEFAULT_PAGE_SIZE,
):
    owner = await get_user(db, user_id)
    return await _list_playlists(
        db, ViewFilters(query=query, owner_id=owner.id), sort_by, sort_order, page, limit
    )


@router.get("/{playlist_id}", response_model=PlaylistView)
async def get_playlist_endpoint(
    playlist_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Playlist with its published videos in playlist order."""
    return await get_view(db, ViewKind.PLAYLIST_DETAIL, playlist_id)


@router.patch("/{playlist_id}", response_model=PlaylistRead)
async def update_playlist_endpoint(
    playlist_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
    data: RawBody = None,
) -> PlaylistRead:
    playlist = await update_playlist(db, playlist_id, user.id, data)
    return await to_playlist_read(db, playlist)


@router.delete("/{playlist_id}", status_code=204)
async def delete_playlist_endpoint(
    playlist_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await delete_playlist(db, playlist_id, user.id)


@router.post("/{playlist_id}/videos/{video_id}", response_model=PlaylistRead)
async def add_playlist_video(
    playlist_id: int,
    video_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PlaylistRead:
    playlist = await add_video_to_playlist(db, playlist_id, video_id, user.id)
    return await to_playlist_read(db, playlist)


@router.delete("/{playlist_id}/videos/{video_id}", response_model=PlaylistRead)
async def remove_playlist_video(
    playlist_id: int,
    video_id: int,
    user: CurrentUser,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> PlaylistRead:
    playlist = await remove_video_from_playlist(db, playlist_id, video_id, user.id)
    return await to_playlist_read(db, playlist)
