"""Playlist model and its ordered video membership table."""

from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from vidtube.models.user import User


# Composite primary key forbids duplicate members; position keeps insertion order
playlist_videos = Table(
    "playlist_videos",
    Base.metadata,
    Column("playlist_id", Integer, ForeignKey("playlists.id", ondelete="CASCADE"), primary_key=True),
    Column("video_id", Integer, ForeignKey("videos.id", ondelete="CASCADE"), primary_key=True),
    Column("position", Integer, nullable=False),
)


class Playlist(Base, TimestampMixin):
    """User-curated ordered list of videos."""

    __tablename__ = "playlists"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")

    owner: Mapped["User"] = relationship("User", back_populates="playlists")

    def __repr__(self) -> str:
        return f"<Playlist(id={self.id}, name={self.name})>"
