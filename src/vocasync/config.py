"""Configuration settings for the sync service."""
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv


# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)

# Sync protocol settings
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100
INSERT_CHUNK_SIZE = 500  # rows per insert-if-absent statement
LOOKUP_CHUNK_SIZE = 500  # ids per IN (...) lookup
MAX_PAGE = 1_000_000  # keeps (page - 1) * limit well inside int64


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = field(default_factory=lambda: os.getenv("DATABASE_URL", "sqlite:///vocasync.db"))
    echo: bool = field(default_factory=lambda: os.getenv("DATABASE_ECHO", "false").lower() == "true")


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = field(default_factory=lambda: os.getenv("LOG_DIR", None))
    rotation: str = field(default_factory=lambda: os.getenv("LOG_ROTATION", "midnight"))
    interval: int = field(default_factory=lambda: int(os.getenv("LOG_INTERVAL", "1")))
    backup_count: int = field(default_factory=lambda: int(os.getenv("LOG_BACKUP_COUNT", "7")))


@dataclass
class SyncSettings:
    """Push/pull protocol settings."""
    default_page_size: int = field(
        default_factory=lambda: int(os.getenv("SYNC_DEFAULT_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)))
    )
    max_page_size: int = field(
        default_factory=lambda: int(os.getenv("SYNC_MAX_PAGE_SIZE", str(MAX_PAGE_SIZE)))
    )
    insert_chunk_size: int = field(
        default_factory=lambda: int(os.getenv("SYNC_INSERT_CHUNK_SIZE", str(INSERT_CHUNK_SIZE)))
    )
    lookup_chunk_size: int = field(
        default_factory=lambda: int(os.getenv("SYNC_LOOKUP_CHUNK_SIZE", str(LOOKUP_CHUNK_SIZE)))
    )


@dataclass
class ApiSettings:
    """HTTP server settings."""
    host: str = field(default_factory=lambda: os.getenv("API_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("API_PORT", "8000")))
    user_header: str = field(default_factory=lambda: os.getenv("API_USER_HEADER", "X-User-Id"))


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_sync_settings() -> SyncSettings:
    """Get sync settings."""
    return SyncSettings()


def get_api_settings() -> ApiSettings:
    """Get API settings."""
    return ApiSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    database: DatabaseSettings = field(default_factory=get_database_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    sync: SyncSettings = field(default_factory=get_sync_settings)
    api: ApiSettings = field(default_factory=get_api_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if not self.database.url:
            raise ValueError("DATABASE_URL is required")

        if self.sync.max_page_size < 1:
            raise ValueError("SYNC_MAX_PAGE_SIZE must be positive")

        if self.sync.default_page_size < 1 or \
           self.sync.default_page_size > self.sync.max_page_size:
            raise ValueError("SYNC_DEFAULT_PAGE_SIZE must be between 1 and SYNC_MAX_PAGE_SIZE")

        if self.sync.insert_chunk_size < 1:
            raise ValueError("SYNC_INSERT_CHUNK_SIZE must be positive")

        if self.sync.lookup_chunk_size < 1:
            raise ValueError("SYNC_LOOKUP_CHUNK_SIZE must be positive")

        if not self.api.user_header:
            raise ValueError("API_USER_HEADER cannot be empty")


# Create global settings instance
settings = Settings()
settings.validate()
