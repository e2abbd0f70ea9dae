"""Push/pull synchronization of per-word progress between devices and the server."""
import logging
import time
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vocasync import monitoring
from vocasync.models.base import now_millis, to_millis
from vocasync.models.models import WordProgress
from vocasync.models.sync_models import ProgressItem, ProgressSnapshot, PullPage, PushResult
from vocasync.services.batch_committer import BatchCommitter, SyncStorageError
from vocasync.services.content_registry import ContentRegistry, chunked
from vocasync.services.merge_engine import MergeEngine
from vocasync.services.progress_exporter import ProgressExporter
from vocasync.services.progress_validator import ProgressValidator

logger = logging.getLogger(__name__)

__all__ = ["SyncService", "SyncStorageError"]


class SyncService:
    """Service for reconciling client progress with the server store."""

    def __init__(self, db: Session):
        """Initialize the service with a database session."""
        self.db = db
        self.registry = ContentRegistry(db)
        self.validator = ProgressValidator(self.registry)
        self.merge_engine = MergeEngine()
        self.committer = BatchCommitter(db)
        self.exporter = ProgressExporter(db, self.registry)

    def push(self, user_id: str, items: List[ProgressItem]) -> PushResult:
        """Merge a batch of client progress reports into the store.

        Unknown words and stale or regressing reports are skipped silently;
        ``synced_count`` only counts rows this call actually wrote, so a
        repeated push of the same batch reports zero.

        Raises:
            SyncStorageError: if the commit failed. No row was changed and the
                whole batch can be retried.
        """
        synced_at = now_millis()
        started = time.perf_counter()
        monitoring.sync_pushes.inc()
        monitoring.items_received.inc(len(items))

        try:
            valid = self.validator.filter_valid(user_id, items)
            if not valid:
                logger.info(f"Push for user {user_id}: none of {len(items)} item(s) reference known words")
                return PushResult(success=True, synced_count=0, synced_at=synced_at)

            existing = self._load_existing(user_id, [item.word_id for item in valid])
            plan = self.merge_engine.classify(valid, existing)
            result = self.committer.commit(user_id, plan)
        except SQLAlchemyError as e:
            self.db.rollback()
            monitoring.db_errors.labels(error_type=type(e).__name__).inc()
            logger.error(f"Failed to read progress for user {user_id}: {e}")
            raise SyncStorageError(f"Could not read progress for user {user_id}") from e
        finally:
            monitoring.push_duration.observe(time.perf_counter() - started)

        stale = len(valid) - result.count
        if stale:
            monitoring.items_dropped.labels(reason="stale").inc(stale)
        monitoring.items_written.labels(action="create").inc(result.created)
        monitoring.items_written.labels(action="update").inc(result.updated)

        logger.info(
            f"Push for user {user_id}: received={len(items)} valid={len(valid)} "
            f"created={result.created} updated={result.updated} discarded={plan.discarded}"
        )
        return PushResult(success=True, synced_count=result.count, synced_at=synced_at)

    def pull(
        self,
        user_id: str,
        last_sync_time: Optional[int] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> PullPage:
        """Return one page of the user's progress changed after ``last_sync_time``."""
        return self.exporter.export_page(user_id, last_sync_time=last_sync_time, page=page, limit=limit)

    def _load_existing(self, user_id: str, word_ids: List[str]) -> Dict[str, ProgressSnapshot]:
        """Fetch the guard fields of the user's rows for `word_ids`."""
        snapshots: Dict[str, ProgressSnapshot] = {}
        for chunk in chunked(sorted(set(word_ids)), self.registry.chunk_size):
            rows = (
                self.db.query(WordProgress.word_id, WordProgress.last_reviewed, WordProgress.review_level)
                .filter(WordProgress.user_id == user_id, WordProgress.word_id.in_(chunk))
                .all()
            )
            for row in rows:
                snapshots[row.word_id] = ProgressSnapshot(
                    word_id=row.word_id,
                    last_reviewed=to_millis(row.last_reviewed),
                    review_level=row.review_level,
                )
        return snapshots
