from uuid import UUID

from pydantic import BaseModel, ConfigDict


class CurrentUser(BaseModel):
    """User context from JWT; resolved without a database round-trip."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: UUID
    email: str
