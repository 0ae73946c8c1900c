"""
Social graph domain: Pydantic V2 response schemas.
"""
from __future__ import annotations

from pydantic import BaseModel

from ustbian.users.schemas import UserSummary


class FollowListResponse(BaseModel):
    items: list[UserSummary]
    total: int


class FollowStatusResponse(BaseModel):
    following: bool
