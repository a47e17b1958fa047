"""Video model."""

from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from vidtube.models.comment import Comment
    from vidtube.models.user import User


class Video(Base, TimestampMixin):
    """A published (or draft) video owned by exactly one user."""

    __tablename__ = "videos"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="")
    media_url: Mapped[str] = mapped_column(String(2000), nullable=False)
    thumbnail_url: Mapped[str] = mapped_column(String(2000), nullable=False)
    duration_seconds: Mapped[float] = mapped_column(Float, default=0)

    # Incremented on every fetch-by-id; lost updates are tolerated
    views: Mapped[int] = mapped_column(Integer, default=0)
    is_published: Mapped[bool] = mapped_column(default=True)

    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="videos")
    comments: Mapped[list["Comment"]] = relationship(
        "Comment",
        back_populates="video",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (
        Index("ix_video_owner_created", "owner_id", "created_at"),
        Index("ix_video_published_created", "is_published", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, title={self.title})>"
