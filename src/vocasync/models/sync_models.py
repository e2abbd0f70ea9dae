"""Plain data structures passed between the sync components."""
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class ProgressItem:
    """A progress report submitted by a client. Timestamps are ms epoch."""
    word_id: str
    review_level: int
    last_reviewed: int
    next_review: int
    is_ignored: bool = False
    correct_count: int = 0
    total_attempts: int = 0


@dataclass
class ProgressSnapshot:
    """The part of a stored row the merge guard looks at."""
    word_id: str
    last_reviewed: int
    review_level: int


@dataclass
class MergePlan:
    """Outcome of classifying a validated batch."""
    creates: List[ProgressItem] = field(default_factory=list)
    updates: List[ProgressItem] = field(default_factory=list)
    discarded: int = 0


@dataclass
class CommitResult:
    """Rows actually written by one commit."""
    created: int = 0
    updated: int = 0

    @property
    def count(self) -> int:
        return self.created + self.updated


@dataclass
class PushResult:
    success: bool
    synced_count: int
    synced_at: int


@dataclass
class QuizSnapshot:
    question: str
    options: List[str]
    correct_answer: str
    question_translation: Optional[str] = None
    explanation: Optional[str] = None


@dataclass
class WordContent:
    """Static content of a word, copied into pull responses."""
    word_id: str
    text: str
    translation: str
    pronunciation: str
    hanja: Optional[str] = None
    example: Optional[str] = None
    example_translation: Optional[str] = None
    quiz: List[QuizSnapshot] = field(default_factory=list)


@dataclass
class ProgressWithContent:
    user_id: str
    word_id: str
    review_level: int
    is_ignored: bool
    last_reviewed: int
    next_review: int
    correct_count: int
    total_attempts: int
    version: int
    content: WordContent


@dataclass
class PullPage:
    data: List[ProgressWithContent]
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool
