"""User and channel profile endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.auth import OptionalUser
from vidtube.db import get_db
from vidtube.db.crud import create_user
from vidtube.models.schemas import UserCreate, UserRead
from vidtube.services.views import ChannelProfile, ViewKind, get_view

router = APIRouter()


@router.post("", response_model=UserRead, status_code=201)
async def create_user_endpoint(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> UserRead:
    """Create the profile for an identity issued upstream."""
    user = await create_user(db, data)
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=ChannelProfile)
async def get_channel_profile(
    user_id: int,
    viewer: OptionalUser,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Channel page header: counts plus whether the viewer subscribes."""
    return await get_view(db, ViewKind.CHANNEL, user_id, viewer_id=viewer.id if viewer else None)
