"""User model."""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from vidtube.constants import USERNAME_MAX_LENGTH
from vidtube.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from vidtube.models.playlist import Playlist
    from vidtube.models.tweet import Tweet
    from vidtube.models.video import Video


class User(Base, TimestampMixin):
    """Channel owner and the identity anchor for ownership and engagement."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    username: Mapped[str] = mapped_column(String(USERNAME_MAX_LENGTH), unique=True, index=True)
    display_name: Mapped[str] = mapped_column(String(255), default="")
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    cover_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)

    # Relationships
    # lazy="select": listings go through the view pipeline, never through these
    videos: Mapped[list["Video"]] = relationship(
        "Video",
        back_populates="owner",
        cascade="all, delete-orphan",
        lazy="select",
    )
    tweets: Mapped[list["Tweet"]] = relationship(
        "Tweet",
        back_populates="owner",
        cascade="all, delete-orphan",
        lazy="select",
    )
    playlists: Mapped[list["Playlist"]] = relationship(
        "Playlist",
        back_populates="owner",
        cascade="all, delete-orphan",
        lazy="select",
    )

    @validates("username")
    def normalize_username(self, key: str, value: str) -> str:
        return value.strip().lower()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
