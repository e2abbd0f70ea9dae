"""Main entry point for the sync service."""
import logging

import uvicorn

from vocasync.app import create_app
from vocasync.config import settings
from vocasync.logging_config import setup_logging

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the HTTP server."""
    setup_logging("Starting vocasync ...")
    logger.info(f"Listening on {settings.api.host}:{settings.api.port}")
    try:
        uvicorn.run(
            create_app(),
            host=settings.api.host,
            port=settings.api.port,
            log_config=None,  # keep the handlers installed by setup_logging
        )
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")


if __name__ == "__main__":
    main()
