"""Column types shared by all models.

Postgres gets its native JSONB; every other backend falls back to generic JSON
so the same metadata can be created on SQLite for local runs and tests.
"""
from datetime import datetime, timezone

import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

JSONType = sa.JSON().with_variant(JSONB(), "postgresql")
Timestamp = sa.DateTime(timezone=True)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
