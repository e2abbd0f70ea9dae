"""Request and response models for the sync endpoints.

Field names are snake_case in Python and camelCase on the wire.
"""
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from vocasync.models.base import MAX_MILLIS
from vocasync.models.sync_models import ProgressItem, ProgressWithContent, PullPage, PushResult


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class WordProgressSyncItem(CamelModel):
    """One progress report pushed by a client."""

    word_id: UUID
    review_level: int = Field(ge=0, le=4, description="Review level (0-4)")
    is_ignored: bool = False
    last_reviewed: int = Field(gt=0, le=MAX_MILLIS, description="Last review time, ms since epoch")
    next_review: int = Field(gt=0, le=MAX_MILLIS, description="Next scheduled review, ms since epoch")
    correct_count: int = Field(default=0, ge=0)
    total_attempts: int = Field(default=0, ge=0)

    def to_item(self) -> ProgressItem:
        return ProgressItem(
            word_id=str(self.word_id),
            review_level=self.review_level,
            is_ignored=self.is_ignored,
            last_reviewed=self.last_reviewed,
            next_review=self.next_review,
            correct_count=self.correct_count,
            total_attempts=self.total_attempts,
        )


class PushWordProgressRequest(CamelModel):
    word_progresses: List[WordProgressSyncItem] = Field(min_length=1)


class PushWordProgressResponse(CamelModel):
    success: bool
    synced_count: int
    synced_at: int

    @classmethod
    def from_result(cls, result: PushResult) -> "PushWordProgressResponse":
        return cls(success=result.success, synced_count=result.synced_count, synced_at=result.synced_at)


class QuizQuestionResponse(CamelModel):
    question: str
    question_translation: Optional[str] = None
    options: List[str]
    correct_answer: str
    explanation: Optional[str] = None


class WordProgressResponse(CamelModel):
    """A progress row together with the content needed to quiz offline."""

    user_id: str
    word_id: str
    review_level: int
    is_ignored: bool
    last_reviewed: int
    next_review: int
    correct_count: int
    total_attempts: int
    version: int

    text: str
    translation: str
    pronunciation: str
    hanja: Optional[str] = None
    example: Optional[str] = None
    example_translation: Optional[str] = None
    quiz: List[QuizQuestionResponse] = Field(default_factory=list)

    @classmethod
    def from_record(cls, record: ProgressWithContent) -> "WordProgressResponse":
        content = record.content
        return cls(
            user_id=record.user_id,
            word_id=record.word_id,
            review_level=record.review_level,
            is_ignored=record.is_ignored,
            last_reviewed=record.last_reviewed,
            next_review=record.next_review,
            correct_count=record.correct_count,
            total_attempts=record.total_attempts,
            version=record.version,
            text=content.text,
            translation=content.translation,
            pronunciation=content.pronunciation,
            hanja=content.hanja,
            example=content.example,
            example_translation=content.example_translation,
            quiz=[
                QuizQuestionResponse(
                    question=quiz.question,
                    question_translation=quiz.question_translation,
                    options=quiz.options,
                    correct_answer=quiz.correct_answer,
                    explanation=quiz.explanation,
                )
                for quiz in content.quiz
            ],
        )


class PullWordProgressResponse(CamelModel):
    data: List[WordProgressResponse]
    page: int
    limit: int
    total: int
    total_pages: int
    has_more: bool

    @classmethod
    def from_page(cls, page: PullPage) -> "PullWordProgressResponse":
        return cls(
            data=[WordProgressResponse.from_record(record) for record in page.data],
            page=page.page,
            limit=page.limit,
            total=page.total,
            total_pages=page.total_pages,
            has_more=page.has_more,
        )
