"""
Auth domain: Pydantic V2 request/response schemas.

  - *Request  models:  input from the client (strict extra="forbid")
  - *Response models:  output to the client (no write-only fields exposed)
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from ustbian.users.schemas import USERNAME_PATTERN


class _Base(BaseModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


class RegisterRequest(_Base):
    """Body for POST /auth/register."""

    email: EmailStr
    username: str = Field(min_length=3, max_length=50, pattern=USERNAME_PATTERN)
    display_name: str = Field(min_length=1, max_length=100)
    # bcrypt only looks at the first 72 bytes
    password: str = Field(min_length=8, max_length=72)
    bio: str | None = Field(default=None, max_length=160)


class LoginRequest(_Base):
    """Body for POST /auth/login."""

    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    """Returned on successful register / login."""

    model_config = ConfigDict(extra="forbid")

    access_token: str
    token_type: str = "bearer"
    expires_in: int
