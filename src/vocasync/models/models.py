"""Database models for the sync service."""
import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from vocasync.models.base import Base, TimestampMixin


def _new_id() -> str:
    return str(uuid.uuid4())


class Word(Base, TimestampMixin):
    """Word model (content registry)."""

    __tablename__ = "words"

    id = Column(String(36), primary_key=True, default=_new_id)
    text = Column(String, nullable=False)
    translation = Column(String, nullable=False)
    pronunciation = Column(String, nullable=False, default="")
    hanja = Column(String, nullable=True)
    example = Column(String, nullable=True)
    example_translation = Column(String, nullable=True)

    # Relationships
    quiz_items = relationship(
        "QuizItem",
        back_populates="word",
        order_by=lambda: [QuizItem.position, QuizItem.id],
    )


class QuizItem(Base, TimestampMixin):
    """Quiz question attached to a word."""

    __tablename__ = "quiz_items"

    id = Column(String(36), primary_key=True, default=_new_id)
    word_id = Column(String(36), ForeignKey("words.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    question = Column(String, nullable=False)
    question_translation = Column(String, nullable=True)
    options = Column(JSON, nullable=False, default=list)  # list of answer strings
    correct_answer = Column(String, nullable=False)
    explanation = Column(String, nullable=True)

    # Relationships
    word = relationship("Word", back_populates="quiz_items")


class WordProgress(Base, TimestampMixin):
    """Per-user learning progress of a single word."""

    __tablename__ = "word_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "word_id", name="uq_word_progress_user_word"),
        Index("ix_word_progress_user_cursor", "user_id", "last_reviewed", "word_id"),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), nullable=False)
    word_id = Column(String(36), ForeignKey("words.id"), nullable=False)
    review_level = Column(Integer, nullable=False, default=0)  # 0-4
    is_ignored = Column(Boolean, nullable=False, default=False)
    last_reviewed = Column(DateTime(timezone=True), nullable=False)
    next_review = Column(DateTime(timezone=True), nullable=False)
    correct_count = Column(Integer, nullable=False, default=0)
    total_attempts = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=1)  # bumped on every accepted update

    # Relationships
    word = relationship("Word")
