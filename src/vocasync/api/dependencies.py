"""FastAPI dependencies shared by the routers."""
import logging

from fastapi import HTTPException, Request, status

from vocasync.config import settings

logger = logging.getLogger(__name__)


def require_user(request: Request) -> str:
    """Return the user id asserted by the upstream authentication layer."""
    user_id = request.headers.get(settings.api.user_header, "").strip()
    if not user_id:
        logger.debug(f"Rejected request to {request.url.path}: missing {settings.api.user_header}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user_id
