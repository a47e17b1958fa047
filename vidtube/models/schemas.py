"""Pydantic schemas for API validation and serialization.

Read models for listings live in ``vidtube.services.views.view_models``;
the schemas here cover request bodies and single-record CRUD responses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vidtube.constants import TWEET_MAX_LENGTH, USERNAME_MAX_LENGTH


def _strip(value: str | None) -> str | None:
    return value.strip() if isinstance(value, str) else value


# User schemas
class UserCreate(BaseModel):
    """User creation schema (registration itself is handled upstream)."""

    username: str = Field(min_length=1, max_length=USERNAME_MAX_LENGTH)
    display_name: str = ""
    email: str | None = None
    avatar_url: str | None = None
    cover_url: str | None = None

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("username must not be blank")
        return v


class UserRead(BaseModel):
    """User read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    display_name: str
    avatar_url: str | None = None
    cover_url: str | None = None
    created_at: datetime


# Video schemas
class VideoCreate(BaseModel):
    """Video creation schema.

    Media files are uploaded by the upload service beforehand; the resulting
    URLs and duration are passed here.
    """

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    media_url: str = Field(min_length=1)
    thumbnail_url: str = Field(min_length=1)
    duration_seconds: float = Field(0, ge=0)

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return _strip(v)

    @model_validator(mode="after")
    def check_not_blank(self) -> "VideoCreate":
        if not self.title or not self.description:
            raise ValueError("title and description are required")
        return self


class VideoUpdate(BaseModel):
    """Video update schema. At least one field must be set."""

    title: str | None = Field(None, max_length=200)
    description: str | None = None
    thumbnail_url: str | None = None

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return _strip(v)

    @model_validator(mode="after")
    def check_any_field(self) -> "VideoUpdate":
        if not (self.title or self.description or self.thumbnail_url):
            raise ValueError("At least one field (title, description, or thumbnail_url) is required")
        return self


class VideoRead(BaseModel):
    """Stored video fields, as returned by create/update."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    title: str
    description: str
    media_url: str
    thumbnail_url: str
    duration_seconds: float
    views: int
    is_published: bool
    created_at: datetime
    updated_at: datetime


# Comment schemas
class CommentWrite(BaseModel):
    """Comment create/update schema."""

    content: str = Field(min_length=1)

    @field_validator("content")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment content is required")
        return v


class CommentRead(BaseModel):
    """Comment read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    video_id: int
    owner_id: int
    content: str
    created_at: datetime
    updated_at: datetime


# Tweet schemas
class TweetWrite(BaseModel):
    """Tweet create/update schema."""

    content: str

    @field_validator("content")
    @classmethod
    def check_length(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Tweet content is required")
        if len(v) > TWEET_MAX_LENGTH:
            raise ValueError(f"Tweet content cannot exceed {TWEET_MAX_LENGTH} characters")
        return v


class TweetRead(BaseModel):
    """Tweet read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    content: str
    created_at: datetime
    updated_at: datetime


# Playlist schemas
class PlaylistCreate(BaseModel):
    """Playlist creation schema."""

    name: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return _strip(v)

    @model_validator(mode="after")
    def check_not_blank(self) -> "PlaylistCreate":
        if not self.name or not self.description:
            raise ValueError("Playlist name and description are required")
        return self


class PlaylistUpdate(BaseModel):
    """Playlist update schema."""

    name: str | None = Field(None, max_length=200)
    description: str | None = None

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, v: str | None) -> str | None:
        return _strip(v)

    @model_validator(mode="after")
    def check_any_field(self) -> "PlaylistUpdate":
        if not (self.name or self.description):
            raise ValueError("At least one field (name or description) is required to update")
        return self


class PlaylistRead(BaseModel):
    """Playlist read schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    name: str
    description: str
    video_ids: list[int] = []
    created_at: datetime
    updated_at: datetime


# Engagement schemas
class ToggleResult(BaseModel):
    """Outcome of a like/subscription toggle."""

    active: bool


class LikeStats(BaseModel):
    """Likes given by one user, by target type."""

    total_likes: int = 0
    videos_liked: int = 0
    comments_liked: int = 0
    tweets_liked: int = 0
