"""Read-only access to the word content registry."""
import logging
from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Optional, Set

from sqlalchemy.orm import Session

from vocasync.config import settings
from vocasync.models.models import QuizItem, Word
from vocasync.models.sync_models import QuizSnapshot, WordContent

logger = logging.getLogger(__name__)


def chunked(values: List[str], size: int) -> Iterator[List[str]]:
    """Yield consecutive slices of at most `size` values."""
    for start in range(0, len(values), size):
        yield values[start:start + size]


class ContentRegistry:
    """Batched lookups over words and their quiz items."""

    def __init__(self, db: Session, chunk_size: Optional[int] = None):
        """Initialize the registry with a database session."""
        self.db = db
        self.chunk_size = chunk_size or settings.sync.lookup_chunk_size

    def existing_word_ids(self, word_ids: Iterable[str]) -> Set[str]:
        """Return the subset of `word_ids` that name known words."""
        distinct_ids = sorted(set(word_ids))
        found: Set[str] = set()
        for chunk in chunked(distinct_ids, self.chunk_size):
            rows = self.db.query(Word.id).filter(Word.id.in_(chunk)).all()
            found.update(row.id for row in rows)
        return found

    def get_contents(self, word_ids: Iterable[str]) -> Dict[str, WordContent]:
        """Return content snapshots, quiz items included, keyed by word id."""
        distinct_ids = sorted(set(word_ids))
        if not distinct_ids:
            return {}

        contents: Dict[str, WordContent] = {}
        quizzes: Dict[str, List[QuizSnapshot]] = defaultdict(list)
        for chunk in chunked(distinct_ids, self.chunk_size):
            for word in self.db.query(Word).filter(Word.id.in_(chunk)).all():
                contents[word.id] = WordContent(
                    word_id=word.id,
                    text=word.text,
                    translation=word.translation,
                    pronunciation=word.pronunciation,
                    hanja=word.hanja,
                    example=word.example,
                    example_translation=word.example_translation,
                )

            quiz_rows = (
                self.db.query(QuizItem)
                .filter(QuizItem.word_id.in_(chunk))
                .order_by(QuizItem.word_id, QuizItem.position, QuizItem.id)
                .all()
            )
            for item in quiz_rows:
                quizzes[item.word_id].append(
                    QuizSnapshot(
                        question=item.question,
                        question_translation=item.question_translation,
                        options=list(item.options or []),
                        correct_answer=item.correct_answer,
                        explanation=item.explanation,
                    )
                )

        for word_id, content in contents.items():
            content.quiz = quizzes.get(word_id, [])

        missing = len(distinct_ids) - len(contents)
        if missing:
            logger.warning(f"{missing} word(s) missing from the content registry")
        return contents
