"""
Database engine and session management
SQLite for development, PostgreSQL in production
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import NullPool

from sharesathi.config import settings


def get_sync_url(url: str) -> str:
    """Normalise the database URL to a sync driver URL"""
    url = url.replace("+aiosqlite", "").replace("+asyncpg", "")
    # Railway style postgres:// URLs
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://")
    return url


def is_postgres(url: str) -> bool:
    """Is this a PostgreSQL URL"""
    return "postgresql" in url or "postgres" in url


database_url = get_sync_url(settings.DATABASE_URL)

if is_postgres(database_url):
    engine = create_engine(
        database_url,
        echo=settings.DEBUG,
        poolclass=NullPool,
    )
else:
    engine = create_engine(
        database_url,
        echo=settings.DEBUG,
        connect_args={"check_same_thread": False},
    )

SessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)

# ORM Base
Base = declarative_base()


def init_db(bind=None):
    """Create all tables"""
    # Models must be imported so Base.metadata knows about them
    from sharesathi import models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
