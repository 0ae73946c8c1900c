import os

# Settings are read when ustbian.main is imported; set them first.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.pop("REDIS_URL", None)

from collections.abc import AsyncGenerator, Awaitable, Callable  # noqa: E402
from dataclasses import dataclass  # noqa: E402
from typing import Any  # noqa: E402
from uuid import UUID  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from shared.database.postgres import Base, get_async_engine, get_session  # noqa: E402
from ustbian.database import get_db  # noqa: E402
from ustbian.dependencies import get_broadcaster  # noqa: E402
from ustbian.main import create_app  # noqa: E402
from ustbian.models.user import User  # noqa: E402
from ustbian.realtime.broadcaster import Broadcaster  # noqa: E402
from ustbian.users.service import create_user  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"
PASSWORD = "password123"


class RecordingBroadcaster(Broadcaster):
    """Captures every event instead of writing to sockets."""

    def __init__(self) -> None:
        super().__init__()
        self.events: list[tuple[str, Any]] = []

    async def broadcast(self, event: str, data: Any) -> None:
        self.events.append((event, data))

    def named(self, event: str) -> list[Any]:
        return [data for name, data in self.events if name == event]


@dataclass
class Account:
    id: UUID
    username: str
    display_name: str
    headers: dict[str, str]


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = get_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def broadcaster() -> RecordingBroadcaster:
    return RecordingBroadcaster()


@pytest.fixture
def make_user(db_session: AsyncSession) -> Callable[..., Awaitable[User]]:
    async def _make(username: str, display_name: str | None = None) -> User:
        return await create_user(
            db_session,
            email=f"{username.lower()}@ustb.edu.cn",
            username=username,
            display_name=display_name or username.title(),
            password=PASSWORD,
        )

    return _make


# ── HTTP ───────────────────────────────────────────────────────────────────────

@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession],
    broadcaster: RecordingBroadcaster,
) -> FastAPI:
    app = create_app()

    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async for session in get_session(session_factory):
            yield session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_broadcaster] = lambda: broadcaster
    return app


@pytest_asyncio.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def register(async_client: AsyncClient) -> Callable[..., Awaitable[Account]]:
    async def _register(username: str, display_name: str | None = None) -> Account:
        display_name = display_name or username.title()
        reg = await async_client.post(
            "/api/v1/auth/register",
            json={
                "email": f"{username.lower()}@ustb.edu.cn",
                "username": username,
                "display_name": display_name,
                "password": PASSWORD,
            },
        )
        assert reg.status_code == 201, reg.text
        headers = {"Authorization": f"Bearer {reg.json()['access_token']}"}
        me = await async_client.get("/api/v1/auth/me", headers=headers)
        assert me.status_code == 200, me.text
        return Account(
            id=UUID(me.json()["id"]),
            username=username,
            display_name=display_name,
            headers=headers,
        )

    return _register
