import pytest
from pydantic import ValidationError

from shared.auth.config import AuthSettings
from ustbian.config import Settings


def test_database_url_is_required(monkeypatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_malformed_database_url_rejected(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "definitely not a url")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db:5432/ustbian")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("CORS_ORIGINS", '["https://a.edu", "https://b.edu"]')
    settings = Settings(_env_file=None)
    assert settings.log_level == "DEBUG"
    assert settings.cors_origins_list == ["https://a.edu", "https://b.edu"]
    assert settings.redis_url is None


def test_unknown_log_level_rejected(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite://")
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_jwt_secret_required_and_long_enough(monkeypatch) -> None:
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(ValidationError):
        AuthSettings(_env_file=None)
    monkeypatch.setenv("JWT_SECRET", "short")
    with pytest.raises(ValidationError):
        AuthSettings(_env_file=None)
    monkeypatch.setenv("JWT_SECRET", "a-sufficiently-long-secret")
    assert AuthSettings(_env_file=None).expire_seconds == 604_800
