"""Posts domain Pydantic V2 schemas."""

from __future__ import annotations

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ustbian.posts.mentions import extract_hashtags, extract_mentions
from ustbian.users.schemas import UserSummary

CONTENT_MAX_LENGTH = 500
MEDIA_URLS_MAX = 10

_EXCESS_NEWLINES = re.compile(r"(\r?\n){3,}")


def _check_content(value: str) -> str:
    if _EXCESS_NEWLINES.search(value):
        raise ValueError("Content cannot contain more than 2 consecutive line breaks.")
    return value


class CreatePostRequest(BaseModel):
    """Request body for POST /posts."""

    model_config = ConfigDict(extra="forbid")

    content: str = Field(
        ...,
        min_length=1,
        max_length=CONTENT_MAX_LENGTH,
        description="Post text. @username mentions notify the mentioned users.",
    )
    media_urls: list[str] | None = Field(
        default=None,
        max_length=MEDIA_URLS_MAX,
        description="Up to 10 media URLs. Item format is not validated.",
    )

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str) -> str:
        return _check_content(value)


class UpdatePostRequest(BaseModel):
    """Partial update. Omitted fields are left unchanged."""

    model_config = ConfigDict(extra="forbid")

    content: str | None = Field(default=None, min_length=1, max_length=CONTENT_MAX_LENGTH)
    media_urls: list[str] | None = Field(default=None, max_length=MEDIA_URLS_MAX)

    @field_validator("content")
    @classmethod
    def validate_content(cls, value: str | None) -> str | None:
        return _check_content(value) if value is not None else value


class PostResponse(BaseModel):
    """Full post representation.

    ``liked_by_me`` / ``saved_by_me`` are null for anonymous viewers.
    """

    model_config = ConfigDict(from_attributes=True)

    post_id: UUID
    author: UserSummary
    content: str
    media_urls: list[str] = Field(default_factory=list)
    hashtags: list[str] = Field(default_factory=list, description="Lowercase, derived from content.")
    mentions: list[str] = Field(default_factory=list, description="Usernames derived from content.")
    likes_count: int = 0
    comments_count: int = 0
    liked_by_me: bool | None = None
    saved_by_me: bool | None = None
    created_at: datetime
    updated_at: datetime

    @field_validator("media_urls", mode="before")
    @classmethod
    def default_media(cls, value):
        return value or []

    @model_validator(mode="after")
    def populate_tokens(self) -> "PostResponse":
        self.hashtags = extract_hashtags(self.content)
        self.mentions = extract_mentions(self.content)
        return self


class PostListResponse(BaseModel):
    items: list[PostResponse]
    total: int
