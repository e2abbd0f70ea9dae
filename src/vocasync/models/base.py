"""Base model configuration."""
from datetime import UTC, datetime, timedelta
from typing import Generator

from sqlalchemy import Column, DateTime, create_engine, event
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from vocasync.config import settings

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)
# Largest timestamp a datetime can hold (9999-12-31T23:59:59.999Z)
MAX_MILLIS = (datetime.max.replace(tzinfo=UTC) - EPOCH) // _ONE_MS

_is_sqlite = settings.database.url.startswith("sqlite")

# Create SQLAlchemy engine
engine = create_engine(
    settings.database.url,
    echo=settings.database.echo,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
)

if _is_sqlite:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """Enforce foreign keys on SQLite connections."""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create declarative base class
Base = declarative_base()


class TimestampMixin:
    """Mixin to add timestamp columns to models."""
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )


def from_millis(value: int) -> datetime:
    """Convert a millisecond epoch timestamp to an aware UTC datetime."""
    return EPOCH + timedelta(milliseconds=value)


def to_millis(value: datetime) -> int:
    """Convert a datetime to a millisecond epoch timestamp.

    SQLite hands back naive datetimes; those are read as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return (value - EPOCH) // _ONE_MS


def now_millis() -> int:
    """Current server time as a millisecond epoch timestamp."""
    return to_millis(datetime.now(UTC))


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Initialize database."""
    # Import models so they are registered on Base.metadata
    from vocasync.models import models  # noqa: F401

    Base.metadata.create_all(bind=engine)  # Create tables if they don't exist
