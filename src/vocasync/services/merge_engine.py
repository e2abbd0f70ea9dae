"""Classification of pushed progress items into creates, updates and discards."""
import logging
from typing import Dict, List, Tuple

from vocasync.models.sync_models import MergePlan, ProgressItem, ProgressSnapshot

logger = logging.getLogger(__name__)

CREATE = "create"
UPDATE = "update"


def supersedes(item: ProgressItem, current: ProgressSnapshot) -> bool:
    """Whether `item` may overwrite `current`.

    The report must be strictly newer and must not lower the review level.
    Timestamps alone are not trusted: a retried older review can arrive
    after a newer one.
    """
    return item.last_reviewed > current.last_reviewed and item.review_level >= current.review_level


class MergeEngine:
    """Last-write-wins merge with a review level guard. Performs no I/O."""

    def classify(
        self,
        items: List[ProgressItem],
        existing: Dict[str, ProgressSnapshot],
    ) -> MergePlan:
        """Build a plan holding at most one write per word.

        Items naming the same word are folded in submission order, each one
        checked against the state the previous ones would leave behind.
        """
        state: Dict[str, ProgressSnapshot] = dict(existing)
        pending: Dict[str, Tuple[str, ProgressItem]] = {}
        discarded = 0

        for item in items:
            current = state.get(item.word_id)
            if current is None:
                pending[item.word_id] = (CREATE, item)
            elif supersedes(item, current):
                if item.word_id in pending:
                    # replaces an earlier write from this batch
                    action = pending[item.word_id][0]
                    discarded += 1
                else:
                    action = UPDATE
                pending[item.word_id] = (action, item)
            else:
                discarded += 1
                continue

            state[item.word_id] = ProgressSnapshot(
                word_id=item.word_id,
                last_reviewed=item.last_reviewed,
                review_level=item.review_level,
            )

        plan = MergePlan(discarded=discarded)
        for action, item in pending.values():
            if action == CREATE:
                plan.creates.append(item)
            else:
                plan.updates.append(item)

        logger.debug(
            f"Merge plan: {len(plan.creates)} create(s), {len(plan.updates)} update(s), "
            f"{plan.discarded} discarded"
        )
        return plan
