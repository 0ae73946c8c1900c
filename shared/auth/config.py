from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_files() -> list[str]:
    """Load .env from the project root so JWT_* vars are always available."""
    base = Path(__file__).resolve().parents[2]  # shared/auth/ → project root
    return [str(base / ".env"), ".env"]


class AuthSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="JWT_",
        env_file=_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Required: the process refuses to start without a usable signing secret.
    secret: str = Field(min_length=16)
    algorithm: str = "HS256"
    issuer: str = "ustbian-api"
    audience: str = "ustbian-clients"
    expire_seconds: int = Field(default=604_800, gt=0)  # 7 days


@lru_cache
def get_auth_settings() -> AuthSettings:
    return AuthSettings()
