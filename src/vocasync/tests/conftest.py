"""Test configuration."""
import os
import tempfile
from pathlib import Path
from typing import Callable, Generator, List, Optional

import pytest
from dotenv import load_dotenv
from faker import Faker

# Set test environment before any imports
os.environ["ENV"] = "test"

# Load test environment variables
test_env_path = Path(__file__).parent.parent.parent.parent / ".env.test"
load_dotenv(test_env_path)

os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite:///{Path(tempfile.gettempdir()) / 'vocasync_test.db'}",
)

# Import after environment setup
from sqlalchemy.orm import Session  # noqa: E402

from vocasync.models.base import Base, SessionLocal, engine, init_db  # noqa: E402
from vocasync.models.models import QuizItem, Word  # noqa: E402
from vocasync.models.sync_models import ProgressItem  # noqa: E402

fake = Faker()

BASE_TIME = 1_704_067_200_000  # 2024-01-01T00:00:00Z in ms
DAY = 24 * 60 * 60 * 1000


@pytest.fixture(autouse=True)
def setup_database():
    """Drop and recreate every table before each test."""
    engine.dispose()
    Base.metadata.drop_all(bind=engine)
    init_db()

    yield

    engine.dispose()


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def user_id() -> str:
    return fake.uuid4()


@pytest.fixture
def make_word(db: Session) -> Callable[..., Word]:
    """Factory for words, optionally with quiz items."""

    def _make_word(quiz_count: int = 0, **kwargs) -> Word:
        word = Word(
            text=kwargs.pop("text", fake.word()),
            translation=kwargs.pop("translation", fake.word()),
            pronunciation=kwargs.pop("pronunciation", fake.lexify("??????")),
            example=kwargs.pop("example", fake.sentence()),
            example_translation=kwargs.pop("example_translation", fake.sentence()),
            **kwargs,
        )
        db.add(word)
        db.flush()
        for position in range(quiz_count):
            options = [fake.word() for _ in range(3)]
            db.add(
                QuizItem(
                    word_id=word.id,
                    position=position,
                    question=f"Question {position} about {word.text}?",
                    options=options,
                    correct_answer=options[0],
                )
            )
        db.commit()
        db.refresh(word)
        return word

    return _make_word


@pytest.fixture
def words(make_word) -> List[Word]:
    """Three words without quiz items."""
    return [make_word() for _ in range(3)]


def make_item(
    word_id: str,
    review_level: int = 1,
    last_reviewed: int = BASE_TIME,
    next_review: Optional[int] = None,
    **kwargs,
) -> ProgressItem:
    """Build a pushed progress item with sensible defaults."""
    return ProgressItem(
        word_id=word_id,
        review_level=review_level,
        last_reviewed=last_reviewed,
        next_review=next_review if next_review is not None else last_reviewed + DAY,
        **kwargs,
    )
