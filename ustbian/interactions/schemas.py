"""Interactions domain Pydantic V2 schemas.

Covers likes, comments and saved posts.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ustbian.users.schemas import UserSummary


# ---------------------------------------------------------------------------
# Like schemas
# ---------------------------------------------------------------------------


class LikeStatusResponse(BaseModel):
    post_id: UUID
    liked: bool = Field(description="True if the current user has liked the post.")
    likes_count: int


class LikedPostIdsResponse(BaseModel):
    liked_post_ids: list[UUID] = Field(serialization_alias="likedPostIds")


# ---------------------------------------------------------------------------
# Comment schemas
# ---------------------------------------------------------------------------


class CreateCommentRequest(BaseModel):
    """Request body for creating a comment or reply."""

    model_config = ConfigDict(extra="forbid")

    content: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="Comment text (max 500 chars). Rate-limited: 5 per minute per user.",
    )
    parent_id: UUID | None = Field(
        default=None,
        description="ID of the parent comment for replies. Must belong to the same post.",
    )


class CommentResponse(BaseModel):
    """Full comment representation, also the payload of ``comment.added.{postId}``."""

    model_config = ConfigDict(from_attributes=True)

    comment_id: UUID
    post_id: UUID
    author: UserSummary
    parent_comment_id: UUID | None = Field(
        default=None, description="Set for replies; null for top-level comments."
    )
    content: str
    created_at: datetime
    updated_at: datetime


class CommentListResponse(BaseModel):
    """Offset-paginated comments, oldest first."""

    items: list[CommentResponse]
    total: int
    limit: int
    offset: int


def comment_payload(comment: Any) -> dict[str, Any]:
    return CommentResponse.model_validate(comment).model_dump(mode="json")


# ---------------------------------------------------------------------------
# Saved post schemas
# ---------------------------------------------------------------------------


class SavedStatusResponse(BaseModel):
    post_id: UUID
    saved: bool


class SavedPostIdsResponse(BaseModel):
    saved_post_ids: list[UUID] = Field(serialization_alias="savedPostIds")
