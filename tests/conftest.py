"""Pytest configuration and fixtures."""

import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("APP_SECRET_KEY", "test-secret-key-that-is-long-enough-for-settings")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from datetime import datetime, timedelta  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from vidtube.auth.dependencies import get_current_user, get_optional_user  # noqa: E402
from vidtube.db.database import get_db  # noqa: E402
from vidtube.main import app  # noqa: E402
from vidtube.models import Comment, Playlist, Tweet, User, Video, playlist_videos  # noqa: E402
from vidtube.models.base import Base, utcnow  # noqa: E402

# Test database URL (uses SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def session_maker() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Fresh in-memory database per test; every session shares its one connection."""
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(
    session_maker: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async with session_maker() as session:
        yield session


async def _create_user(db: AsyncSession, username: str) -> User:
    user = User(username=username, display_name=username.title(), email=f"{username}@example.com")
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def alice(db_session: AsyncSession) -> User:
    """The signed-in user in authenticated tests."""
    return await _create_user(db_session, "alice")


@pytest_asyncio.fixture
async def bob(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "bob")


@pytest_asyncio.fixture
async def carol(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "carol")


VideoFactory = Callable[..., Awaitable[Video]]


@pytest_asyncio.fixture
async def make_video(db_session: AsyncSession) -> VideoFactory:
    """Insert a video directly, with control over age, views and publication."""
    counter = 0

    async def factory(
        owner: User,
        title: str | None = None,
        *,
        views: int = 0,
        age: timedelta = timedelta(0),
        is_published: bool = True,
        description: str = "A video",
        duration_seconds: float = 60.0,
        created_at: datetime | None = None,
    ) -> Video:
        nonlocal counter
        counter += 1
        video = Video(
            owner_id=owner.id,
            title=title or f"Video {counter}",
            description=description,
            media_url=f"https://cdn.example.com/v{counter}.mp4",
            thumbnail_url=f"https://cdn.example.com/t{counter}.jpg",
            duration_seconds=duration_seconds,
            views=views,
            is_published=is_published,
            created_at=created_at or utcnow() - age,
        )
        db_session.add(video)
        await db_session.commit()
        await db_session.refresh(video)
        return video

    return factory


@pytest_asyncio.fixture
async def make_comment(db_session: AsyncSession):
    async def factory(owner: User, video: Video, content: str = "Nice video") -> Comment:
        comment = Comment(video_id=video.id, owner_id=owner.id, content=content)
        db_session.add(comment)
        await db_session.commit()
        await db_session.refresh(comment)
        return comment

    return factory


@pytest_asyncio.fixture
async def make_tweet(db_session: AsyncSession):
    async def factory(owner: User, content: str = "Hello world") -> Tweet:
        tweet = Tweet(owner_id=owner.id, content=content)
        db_session.add(tweet)
        await db_session.commit()
        await db_session.refresh(tweet)
        return tweet

    return factory


@pytest_asyncio.fixture
async def make_playlist(db_session: AsyncSession):
    async def factory(owner: User, videos: list[Video] = (), name: str = "Favourites") -> Playlist:
        playlist = Playlist(owner_id=owner.id, name=name, description="My picks")
        db_session.add(playlist)
        await db_session.flush()
        for position, video in enumerate(videos):
            await db_session.execute(
                playlist_videos.insert().values(
                    playlist_id=playlist.id, video_id=video.id, position=position
                )
            )
        await db_session.commit()
        await db_session.refresh(playlist)
        return playlist

    return factory


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create an unauthenticated test client."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def authenticated_client(
    db_session: AsyncSession, alice: User
) -> AsyncGenerator[AsyncClient, None]:
    """Create an authenticated test client signed in as ``alice``."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    def override_get_current_user() -> User:
        return alice

    def override_get_optional_user() -> User:
        return alice

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = override_get_current_user
    app.dependency_overrides[get_optional_user] = override_get_optional_user

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
