"""Progress synchronization endpoints.

- POST /sync/push - Merge pending progress from a device
- GET /sync/pull - Page through progress changed since a cursor

Example:
    POST /sync/push
    {
        "wordProgresses": [
            {
                "wordId": "7f1c2a8e-3b9d-4c55-9f0e-1a2b3c4d5e6f",
                "reviewLevel": 2,
                "isIgnored": false,
                "lastReviewed": 1704067200000,
                "nextReview": 1704153600000,
                "correctCount": 5,
                "totalAttempts": 7
            }
        ]
    }
"""
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from vocasync.api.dependencies import require_user
from vocasync.api.schemas import (
    PullWordProgressResponse,
    PushWordProgressRequest,
    PushWordProgressResponse,
)
from vocasync.config import MAX_PAGE, settings
from vocasync.models.base import MAX_MILLIS, get_db
from vocasync.services.sync_service import SyncService, SyncStorageError

logger = logging.getLogger(__name__)

router = APIRouter()


def parse_cursor(raw: Optional[str]) -> Optional[int]:
    """Turn the ``lastSyncTime`` query value into a ms cursor.

    Absent, empty, ``null`` and ``0`` all mean a full sync.
    """
    if raw is None or raw.strip() in ("", "null", "0"):
        return None
    try:
        value = int(raw)
    except ValueError:
        raise HTTPException(
            status_code=422,
            detail="lastSyncTime must be an integer timestamp in milliseconds",
        )
    if value < 0 or value > MAX_MILLIS:
        raise HTTPException(
            status_code=422,
            detail=f"lastSyncTime must be between 0 and {MAX_MILLIS}",
        )
    return value or None


@router.post(
    "/push",
    response_model=PushWordProgressResponse,
    summary="Push pending progress from a device",
)
def push_word_progress(
    body: PushWordProgressRequest,
    user_id: Annotated[str, Depends(require_user)],
    db: Annotated[Session, Depends(get_db)],
) -> PushWordProgressResponse:
    """Merge a device's pending progress into the server store.

    Always succeeds for well-formed input; unknown words and stale reports
    only lower ``syncedCount``.
    """
    items = [entry.to_item() for entry in body.word_progresses]
    try:
        result = SyncService(db).push(user_id, items)
    except SyncStorageError:
        logger.exception(f"Push failed for user {user_id}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Progress could not be stored, retry the push",
        )
    return PushWordProgressResponse.from_result(result)


@router.get(
    "/pull",
    response_model=PullWordProgressResponse,
    summary="Pull progress changed since the last sync",
)
def pull_word_progress(
    user_id: Annotated[str, Depends(require_user)],
    db: Annotated[Session, Depends(get_db)],
    last_sync_time: Annotated[Optional[str], Query(alias="lastSyncTime")] = None,
    page: Annotated[int, Query(ge=1, le=MAX_PAGE)] = 1,
    limit: Annotated[int, Query(ge=1, le=settings.sync.max_page_size)] = settings.sync.default_page_size,
) -> PullWordProgressResponse:
    """Return one page of progress rows with content, oldest review first."""
    cursor = parse_cursor(last_sync_time)
    result = SyncService(db).pull(user_id, last_sync_time=cursor, page=page, limit=limit)
    return PullWordProgressResponse.from_page(result)
