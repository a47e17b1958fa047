"""CRUD operations for users."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from vidtube.db.crud.common import get_or_404
from vidtube.exceptions import Conflict
from vidtube.models.schemas import UserCreate
from vidtube.models.user import User


async def create_user(db: AsyncSession, data: UserCreate) -> User:
    """Create a user; usernames are unique after lowercasing."""
    existing = await db.scalar(select(User.id).where(User.username == data.username))
    if existing is not None:
        raise Conflict("Username is already taken")

    user = User(
        username=data.username,
        display_name=data.display_name or data.username,
        email=data.email,
        avatar_url=data.avatar_url,
        cover_url=data.cover_url,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def get_user(db: AsyncSession, user_id: int) -> User:
    return await get_or_404(db, User, user_id, "User")
