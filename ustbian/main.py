import logging
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.auth.config import get_auth_settings
from shared.middleware.error_handler import error_envelope_middleware, http_exception_handler
from shared.middleware.request_id import request_id_middleware
from ustbian.auth.router import router as auth_router
from ustbian.config import get_settings
from ustbian.database import create_all, dispose, init_db
from ustbian.interactions.router import router as interactions_router
from ustbian.notifications.router import router as notifications_router
from ustbian.posts.router import router as posts_router
from ustbian.rate_limit import limiter
from ustbian.realtime.broadcaster import Broadcaster
from ustbian.realtime.router import router as realtime_router
from ustbian.social_graph.router import router as social_graph_router
from ustbian.users.router import router as users_router

logger = logging.getLogger(__name__)

# Swagger tag groups displayed in the OpenAPI docs sidebar
_OPENAPI_TAGS = [
    {"name": "auth", "description": "Registration, login and bearer-token introspection."},
    {"name": "users", "description": "Profiles and user search by username or display name."},
    {"name": "social-graph", "description": "Follow / unfollow and follower lists. Follow: 50/hour."},
    {
        "name": "Posts",
        "description": (
            "Text posts with optional media URLs. @mentions notify the mentioned users; "
            "#hashtags are searchable."
        ),
    },
    {
        "name": "Interactions",
        "description": (
            "Likes, threaded comments and private saved posts. "
            "Likes and comments are pushed over the realtime socket."
        ),
    },
    {"name": "Notifications", "description": "LIKE / COMMENT / FOLLOW / MENTION notifications."},
    {"name": "Realtime", "description": "WebSocket at /ws broadcasting like, comment and notification events."},
    {"name": "Health", "description": "Liveness probe."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.database_url)
    if settings.auto_create_tables:
        await create_all()
        logger.info("Database tables ensured")

    app.state.redis = None
    if settings.redis_url:
        app.state.redis = aioredis.from_url(
            settings.redis_url, encoding="utf-8", decode_responses=True
        )

    yield

    await app.state.broadcaster.drain()
    if app.state.redis is not None:
        await app.state.redis.aclose()
    await dispose()


def create_app() -> FastAPI:
    # Both raise on missing / malformed environment, so a bad deploy stops at import.
    settings = get_settings()
    get_auth_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Ustbian API",
        description=(
            "University social network backend: posts, likes, comments, follows, "
            "saved posts and notifications, with a realtime WebSocket feed."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=_OPENAPI_TAGS,
        lifespan=lifespan,
    )
    app.state.broadcaster = Broadcaster()

    limiter.enabled = settings.rate_limit_enabled
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Middleware is applied in reverse-registration order (last added = outermost).
    # CORS must be outermost so ALL responses (including 429s) carry CORS headers.
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(auth_router, prefix="/api/v1")
    app.include_router(social_graph_router, prefix="/api/v1")
    app.include_router(users_router, prefix="/api/v1")
    app.include_router(posts_router, prefix="/api/v1")
    app.include_router(interactions_router, prefix="/api/v1")
    app.include_router(notifications_router, prefix="/api/v1")
    app.include_router(realtime_router)

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        """Lightweight liveness probe. Does not hit the database."""
        return {"status": "ok", "service": "ustbian"}

    return app


app = create_app()
