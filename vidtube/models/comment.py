"""Comment model."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from vidtube.models.video import Video


class Comment(Base, TimestampMixin):
    """A comment on a video."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(primary_key=True)
    video_id: Mapped[int] = mapped_column(ForeignKey("videos.id", ondelete="CASCADE"), index=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    video: Mapped["Video"] = relationship("Video", back_populates="comments")

    __table_args__ = (Index("ix_comment_video_created", "video_id", "created_at"),)

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, video_id={self.video_id})>"
