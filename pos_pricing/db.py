"""
Database connection management.

The pricing service only reads the menu catalog. Sessions are short-lived:
the SQL catalog opens one per lookup and closes it straight away.

Environment variables:
    - DATABASE_URL: SQLAlchemy connection URL (see config.py)
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from . import config
from .models import Base


def _connect_args(url: str) -> dict:
    # SQLite connections are shared across FastAPI worker threads
    if url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    config.DATABASE_URL,
    pool_pre_ping=True,
    echo=False,
    connect_args=_connect_args(config.DATABASE_URL),
)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def init_db() -> None:
    """Create catalog tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)
