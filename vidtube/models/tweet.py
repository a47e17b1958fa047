"""Tweet model."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vidtube.constants import TWEET_MAX_LENGTH
from vidtube.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from vidtube.models.user import User


class Tweet(Base, TimestampMixin):
    """A short text post."""

    __tablename__ = "tweets"

    id: Mapped[int] = mapped_column(primary_key=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    content: Mapped[str] = mapped_column(String(TWEET_MAX_LENGTH), nullable=False)

    owner: Mapped["User"] = relationship("User", back_populates="tweets")

    def __repr__(self) -> str:
        return f"<Tweet(id={self.id}, owner_id={self.owner_id})>"
