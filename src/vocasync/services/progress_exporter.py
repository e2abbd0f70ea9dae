"""Paginated export of a user's progress for the pull direction."""
import logging
import math
from typing import Optional

from sqlalchemy.orm import Session

from vocasync import monitoring
from vocasync.config import settings
from vocasync.models.base import MAX_MILLIS, from_millis, to_millis
from vocasync.models.models import WordProgress
from vocasync.models.sync_models import ProgressWithContent, PullPage
from vocasync.services.content_registry import ContentRegistry

logger = logging.getLogger(__name__)


class ProgressExporter:
    """Serves cursor-filtered pages of progress rows joined with word content.

    Rows are ordered by ``last_reviewed`` and then ``word_id``. Rows written
    while a client is paging carry newer timestamps and can only land after
    the rows it has already consumed.
    """

    def __init__(self, db: Session, registry: Optional[ContentRegistry] = None):
        """Initialize the exporter with a database session."""
        self.db = db
        self.registry = registry or ContentRegistry(db)

    def export_page(
        self,
        user_id: str,
        last_sync_time: Optional[int] = None,
        page: int = 1,
        limit: Optional[int] = None,
    ) -> PullPage:
        """Return one page of rows with ``last_reviewed`` after the cursor.

        A missing or zero cursor selects every row of the user (full sync).
        """
        if limit is None:
            limit = settings.sync.default_page_size
        if page < 1:
            raise ValueError("page must be at least 1")
        if limit < 1 or limit > settings.sync.max_page_size:
            raise ValueError(f"limit must be between 1 and {settings.sync.max_page_size}")
        if last_sync_time is not None and not 0 <= last_sync_time <= MAX_MILLIS:
            raise ValueError(f"last_sync_time must be between 0 and {MAX_MILLIS}")

        query = self.db.query(WordProgress).filter(WordProgress.user_id == user_id)
        if last_sync_time:
            query = query.filter(WordProgress.last_reviewed > from_millis(last_sync_time))

        total = query.count()
        offset = (page - 1) * limit
        rows = []
        if offset < total:
            rows = (
                query.order_by(WordProgress.last_reviewed.asc(), WordProgress.word_id.asc())
                .offset(offset)
                .limit(limit)
                .all()
            )

        contents = self.registry.get_contents(row.word_id for row in rows)
        data = []
        for row in rows:
            content = contents.get(row.word_id)
            if content is None:
                # Word removed from the registry after the progress row was read
                logger.warning(f"Skipping progress for user {user_id}: word {row.word_id} has no content")
                continue
            data.append(ProgressWithContent(
                user_id=row.user_id,
                word_id=row.word_id,
                review_level=row.review_level,
                is_ignored=row.is_ignored,
                last_reviewed=to_millis(row.last_reviewed),
                next_review=to_millis(row.next_review),
                correct_count=row.correct_count,
                total_attempts=row.total_attempts,
                version=row.version,
                content=content,
            ))

        total_pages = math.ceil(total / limit)
        mode = "incremental" if last_sync_time else "full"
        monitoring.sync_pulls.labels(mode=mode).inc()
        monitoring.rows_exported.inc(len(data))
        logger.info(f"Pull ({mode}) for user {user_id}: page {page}/{total_pages}, {len(data)} of {total} row(s)")

        return PullPage(
            data=data,
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_more=page < total_pages,
        )
