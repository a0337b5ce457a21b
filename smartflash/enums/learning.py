"""
Learning System Enums

Defines enums for flashcards, study modules and the study session
state machine.
"""

from enum import Enum


class SessionType(str, Enum):
    """
    Types of study sessions.

    The client only starts REVIEW sessions; the value is sent to the backend
    when a session is created.
    """

    REVIEW = "review"


class DifficultyLevel(str, Enum):
    """Flashcard and study module difficulty levels."""

    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class QuestionType(str, Enum):
    """
    How a flashcard is presented and graded.

    - STANDARD: flip card, graded by self-report
    - MULTIPLE_CHOICE: preset options, graded by option match
    """

    STANDARD = "standard"
    MULTIPLE_CHOICE = "multiple_choice"


class EducationLevel(str, Enum):
    """Learner education levels used for profiles and AI generation."""

    ELEMENTARY = "elementary"
    MIDDLE = "middle"
    HIGH_SCHOOL = "high_school"
    COLLEGE = "college"
    COMPETITIVE = "competitive"

    @property
    def label(self) -> str:
        """Human-readable label ("high_school" -> "High School")."""
        if self is EducationLevel.COMPETITIVE:
            return "Competitive Exams"
        return self.value.replace("_", " ").title()


class StudyPhase(str, Enum):
    """
    Study session controller states.

    State transitions:
    - MODULE_SELECTION → LOADING (module or "all cards" selected)
    - LOADING → PRESENTING (session started) or MODULE_SELECTION (failure)
    - PRESENTING → ENDING (last card answered, or session abandoned)
    - ENDING → COMPLETED (always, regardless of submission result)
    - any → MODULE_SELECTION (back to modules)
    """

    MODULE_SELECTION = "module_selection"
    LOADING = "loading"
    PRESENTING = "presenting"
    ENDING = "ending"
    COMPLETED = "completed"


class CardFace(str, Enum):
    """Per-card sub-state while a card is presented."""

    # Flip cards
    QUESTION_SHOWN = "question_shown"
    ANSWER_SHOWN = "answer_shown"

    # Multiple-choice cards
    UNANSWERED = "unanswered"
    ANSWERED = "answered"


class NavigationDirection(str, Enum):
    """Manual card navigation."""

    PREVIOUS = "previous"
    NEXT = "next"

    @property
    def step(self) -> int:
        return -1 if self is NavigationDirection.PREVIOUS else 1
