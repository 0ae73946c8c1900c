"""
Global slowapi rate limiter.

Imported by social_graph/router.py for per-endpoint limits. Mounted onto
app.state in main.py, where ``enabled`` is also set from RATE_LIMIT_ENABLED.

Storage: Redis when REDIS_URL is set, otherwise in-process memory (fine for
a single worker and for local dev).
"""
import os

from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri=os.getenv("REDIS_URL") or "memory://",
)
