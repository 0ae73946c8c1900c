"""
User directory: Pydantic V2 request/response schemas.
"""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

USERNAME_PATTERN = r"^[A-Za-z0-9_]+$"


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class UserSummary(BaseModel):
    """Public author/actor card embedded in posts, comments and notifications."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    display_name: str
    avatar_url: str | None = None


class UserProfile(UserSummary):
    bio: str | None = None
    created_at: datetime


class MeResponse(UserProfile):
    email: str


class UpdateProfileRequest(_Base):
    display_name: str | None = Field(default=None, min_length=1, max_length=100)
    bio: str | None = Field(default=None, max_length=160)
    avatar_url: str | None = Field(default=None, max_length=500)


class UserListResponse(BaseModel):
    items: list[UserSummary]
    total: int
