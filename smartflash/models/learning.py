"""
Learning API Models (Pydantic)

Request/response schemas for the study backend:
- Flashcards (manual creation and editing)
- Study modules and per-user module progress
- Study sessions (start, per-card performance, end, history)
- AI module generation and preview

API Contract:
    Request models use StrictRequest (extra="forbid") to reject unknown
    fields before they reach the wire. Response models use StrictResponse
    so new backend fields never break the client.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field, model_validator

from smartflash.enums.learning import (
    DifficultyLevel,
    EducationLevel,
    QuestionType,
    SessionType,
)
from smartflash.models.base import StrictRequest, StrictResponse


# ===========================================
# Flashcard Models
# ===========================================


class Flashcard(StrictResponse):
    """
    A flashcard as returned by the backend.

    Immutable from the study controller's point of view; cards are created
    and edited through FlashcardService.
    """

    id: str
    question: str
    answer: str
    subject: Optional[str] = None
    difficulty_level: Optional[DifficultyLevel] = None
    question_type: Optional[QuestionType] = None
    options: list[str] = Field(default_factory=list)

    @property
    def is_multiple_choice(self) -> bool:
        """
        Whether the card uses the multiple-choice protocol.

        A card typed multiple_choice without any options falls back to the
        flip protocol.
        """
        return self.question_type == QuestionType.MULTIPLE_CHOICE and len(self.options) > 0

    def is_correct_option(self, option: str) -> bool:
        return option == self.answer


class FlashcardCreate(StrictRequest):
    """
    Request to create a flashcard manually.

    For multiple-choice cards the answer must be one of the options.
    """

    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)
    subject: Optional[str] = None
    difficulty_level: Optional[DifficultyLevel] = DifficultyLevel.INTERMEDIATE
    education_level: Optional[EducationLevel] = None
    question_type: Optional[QuestionType] = None
    options: Optional[list[str]] = None

    @model_validator(mode="after")
    def _answer_in_options(self) -> FlashcardCreate:
        if self.question_type == QuestionType.MULTIPLE_CHOICE:
            if not self.options:
                raise ValueError("multiple_choice cards need at least one option")
            if self.answer not in self.options:
                raise ValueError("answer must be one of the options")
        return self


class FlashcardUpdate(StrictRequest):
    """Partial update of a flashcard; unset fields are not sent."""

    question: Optional[str] = None
    answer: Optional[str] = None
    subject: Optional[str] = None
    difficulty_level: Optional[DifficultyLevel] = None
    education_level: Optional[EducationLevel] = None


# ===========================================
# Study Module Models
# ===========================================


class ModuleProgress(StrictResponse):
    """
    Per-user progress through a study module.

    Owned by the backend. The controller reads it to resume a module and
    never computes it locally beyond the running tally of an active session.
    """

    current_card_index: int = 0
    cards_studied: int = 0
    total_correct: int = 0
    accuracy: float = 0
    progress_percent: float = 0
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    last_studied_at: Optional[datetime] = None


class StudyModule(StrictResponse):
    """A named, ordered collection of flashcards."""

    id: str
    title: str
    description: Optional[str] = None
    flashcard_count: int = 0
    subject: Optional[str] = None
    education_level: Optional[str] = None
    difficulty_level: Optional[str] = None
    estimated_hours: Optional[float] = None
    topics: list[str] = Field(default_factory=list)
    is_ai_generated: bool = Field(False, alias="isAIGenerated")
    created_at: Optional[datetime] = None
    progress: Optional[ModuleProgress] = None


class ModuleDetail(StrictResponse):
    """A study module together with its cards."""

    module: StudyModule
    flashcards: list[Flashcard] = Field(default_factory=list)


class ModuleGenerateRequest(StrictRequest):
    """
    Request to generate (or preview) a study module with AI.

    Defaults follow the generation form: intermediate difficulty, 20 cards.
    """

    topic: str = Field(..., min_length=1)
    subject: Optional[str] = None
    education_level: Optional[EducationLevel] = None
    difficulty_level: Optional[DifficultyLevel] = DifficultyLevel.INTERMEDIATE
    number_of_cards: int = Field(20, ge=1)
    estimated_hours: Optional[int] = Field(None, ge=1)


class ModuleGenerateResponse(StrictResponse):
    """Generated (or previewed) module, its cards and generation stats."""

    module: StudyModule
    flashcards: list[Flashcard] = Field(default_factory=list)
    stats: Optional[dict[str, Any]] = None


# ===========================================
# Study Session Models
# ===========================================


class SessionRef(StrictResponse):
    """Backend session handle; only the id matters to the client."""

    id: str


class StartSessionRequest(StrictRequest):
    session_type: SessionType = SessionType.REVIEW
    module_id: Optional[str] = None


class StartSessionResponse(StrictResponse):
    """
    Cards and resume point for a new session.

    start_index is None when the backend did not report one; 0 is a real
    index, not a synonym for "no progress".
    """

    session: SessionRef
    flashcards: list[Flashcard] = Field(default_factory=list)
    start_index: Optional[int] = None
    progress: Optional[ModuleProgress] = None


class PerformanceRequest(StrictRequest):
    """Outcome of a single card."""

    correct: bool
    response_time: Optional[int] = Field(None, ge=0, description="Milliseconds")


class EndSessionRequest(StrictRequest):
    """Final tallies pushed to the backend when a session ends."""

    cards_studied: int = Field(..., ge=0)
    correct_answers: int = Field(..., ge=0)
    session_duration: int = Field(..., ge=0, description="Seconds")
    module_id: Optional[str] = None
    current_card_index: Optional[int] = Field(None, ge=0)


class EndSessionResponse(StrictResponse):
    session: Optional[dict[str, Any]] = None
    progress: Optional[ModuleProgress] = None


class HistorySession(StrictResponse):
    id: str
    cards_studied: int = 0
    correct_answers: int = 0
    started_at: Optional[datetime] = None

    @property
    def accuracy(self) -> int:
        return accuracy_percent(self.correct_answers, self.cards_studied)


class HistoryResponse(StrictResponse):
    sessions: list[HistorySession] = Field(default_factory=list)


class SessionSummary(StrictResponse):
    """
    Locally computed result of a study session.

    Shown to the user whether or not the backend acknowledged the end
    request.
    """

    session_id: str
    module_id: Optional[str] = None
    cards_studied: int
    correct_answers: int
    accuracy: int
    duration_seconds: int
    final_index: int
    module_completed: bool = False
    submitted: bool = False


def accuracy_percent(correct: int, studied: int) -> int:
    """
    Percentage of correct answers, rounded half up.

    Returns 0 when nothing was studied.

    Example:
        >>> accuracy_percent(2, 3)
        67
        >>> accuracy_percent(0, 0)
        0
    """
    if studied <= 0:
        return 0
    # Integer arithmetic avoids banker's rounding of round()
    return (correct * 200 + studied) // (studied * 2)
