"""Atomic application of a merge plan to the progress store."""
import logging
from datetime import UTC, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import insert, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vocasync import monitoring
from vocasync.config import settings
from vocasync.models.base import from_millis
from vocasync.models.models import WordProgress
from vocasync.models.sync_models import CommitResult, MergePlan, ProgressItem

logger = logging.getLogger(__name__)

CONFLICT_COLUMNS = ["user_id", "word_id"]


class SyncStorageError(Exception):
    """Raised when a push could not be committed. Nothing was written."""


class BatchCommitter:
    """Writes creates and updates for one user in a single transaction."""

    def __init__(self, db: Session, chunk_size: Optional[int] = None):
        """Initialize the committer with a database session."""
        self.db = db
        self.chunk_size = chunk_size or settings.sync.insert_chunk_size

    def commit(self, user_id: str, plan: MergePlan) -> CommitResult:
        """Apply `plan` atomically and report how many rows changed.

        Raises:
            SyncStorageError: if the database rejected any statement. The
                transaction is rolled back before raising.
        """
        if not plan.creates and not plan.updates:
            return CommitResult()

        try:
            created = self._insert_missing(user_id, plan.creates)
            updated = self._apply_updates(user_id, plan.updates)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            monitoring.db_errors.labels(error_type=type(e).__name__).inc()
            logger.error(f"Failed to commit progress for user {user_id}: {e}")
            raise SyncStorageError(f"Could not store progress for user {user_id}") from e

        skipped_creates = len(plan.creates) - created
        skipped_updates = len(plan.updates) - updated
        if skipped_creates or skipped_updates:
            logger.info(
                f"Concurrent writes for user {user_id}: {skipped_creates} create(s) and "
                f"{skipped_updates} update(s) lost the race"
            )
        return CommitResult(created=created, updated=updated)

    def _insert_missing(self, user_id: str, items: List[ProgressItem]) -> int:
        """Insert rows that do not exist yet, ignoring key collisions."""
        if not items:
            return 0

        now = datetime.now(UTC)
        rows = [self._row(user_id, item, now) for item in items]
        inserted = 0
        for start in range(0, len(rows), self.chunk_size):
            stmt = self._insert_if_absent(rows[start:start + self.chunk_size])
            inserted += self.db.execute(stmt).rowcount
        return inserted

    def _insert_if_absent(self, rows: List[Dict[str, Any]]):
        """Build a multi-row insert that skips rows whose key already exists."""
        table = WordProgress.__table__
        dialect = self.db.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite_insert(table).values(rows).on_conflict_do_nothing(index_elements=CONFLICT_COLUMNS)
        if dialect == "postgresql":
            return postgresql_insert(table).values(rows).on_conflict_do_nothing(index_elements=CONFLICT_COLUMNS)
        if dialect in ("mysql", "mariadb"):
            return insert(table).values(rows).prefix_with("IGNORE")
        raise NotImplementedError(f"Insert-if-absent is not supported on {dialect}")

    def _apply_updates(self, user_id: str, items: List[ProgressItem]) -> int:
        """Update rows one by one, re-checking the merge guard in SQL."""
        updated = 0
        now = datetime.now(UTC)
        for item in items:
            last_reviewed = from_millis(item.last_reviewed)
            stmt = (
                update(WordProgress)
                .where(
                    WordProgress.user_id == user_id,
                    WordProgress.word_id == item.word_id,
                    WordProgress.last_reviewed < last_reviewed,
                    WordProgress.review_level <= item.review_level,
                )
                .values(
                    review_level=item.review_level,
                    is_ignored=item.is_ignored,
                    last_reviewed=last_reviewed,
                    next_review=from_millis(item.next_review),
                    correct_count=item.correct_count,
                    total_attempts=item.total_attempts,
                    version=WordProgress.version + 1,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            updated += self.db.execute(stmt).rowcount
        return updated

    @staticmethod
    def _row(user_id: str, item: ProgressItem, now: datetime) -> Dict[str, Any]:
        return {
            "user_id": user_id,
            "word_id": item.word_id,
            "review_level": item.review_level,
            "is_ignored": item.is_ignored,
            "last_reviewed": from_millis(item.last_reviewed),
            "next_review": from_millis(item.next_review),
            "correct_count": item.correct_count,
            "total_attempts": item.total_attempts,
            "version": 1,
            "created_at": now,
            "updated_at": now,
        }
