"""Filter pushed progress items down to those that reference real words."""
import logging
from typing import List

from vocasync import monitoring
from vocasync.models.sync_models import ProgressItem
from vocasync.services.content_registry import ContentRegistry

logger = logging.getLogger(__name__)


class ProgressValidator:
    """Drops items whose word is unknown to the content registry.

    Unknown words are not an error: a client with a stale content cache
    must still be able to sync its other items.
    """

    def __init__(self, registry: ContentRegistry):
        self.registry = registry

    def filter_valid(self, user_id: str, items: List[ProgressItem]) -> List[ProgressItem]:
        """Return the items whose word id exists, preserving submission order."""
        if not items:
            return []

        known = self.registry.existing_word_ids(item.word_id for item in items)
        valid = [item for item in items if item.word_id in known]

        dropped = len(items) - len(valid)
        if dropped:
            unknown = sorted({item.word_id for item in items if item.word_id not in known})
            logger.debug(f"Dropping {dropped} item(s) for user {user_id} with unknown words: {unknown}")
            monitoring.items_dropped.labels(reason="unknown_word").inc(dropped)

        return valid
