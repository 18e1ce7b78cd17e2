"""
Database configuration and session management.
"""

import logging
from datetime import datetime, timezone
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from app.config import settings

logger = logging.getLogger("mealorder.database")

# Create SQLAlchemy Base
Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current time used for created_at/updated_at columns"""
    return datetime.now(timezone.utc)


def build_engine(url: str, echo: bool = False):
    """Create an engine for ``url``.

    SQLite connections are shared across threads (TestClient runs handlers in a
    worker thread); in-memory SQLite additionally needs a single static
    connection or every checkout would see an empty database.
    """
    kwargs = {"echo": echo, "future": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


# Create engine
engine = build_engine(settings.database_url, echo=settings.db_echo)

# Create session factory
SessionLocal = sessionmaker(bind=engine, future=True, expire_on_commit=False)


def init_database():
    """Initialize database schema"""
    # Import models so their tables are registered on Base.metadata
    from domain.models import meal, cart, order  # noqa: F401

    with engine.begin() as conn:
        Base.metadata.create_all(bind=conn)
        logger.info("Database tables created successfully")


def get_db_session():
    """Get database session (for FastAPI dependency injection)"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
