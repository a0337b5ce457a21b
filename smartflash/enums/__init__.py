"""
Centralized enum definitions for the client.

All enums are organized by domain:
- learning.py: Flashcard types, difficulty, study session states
- api.py: Storage backends, storage keys, notification types

Usage:
    from smartflash.enums import StudyPhase, QuestionType

    # Or import from specific module
    from smartflash.enums.learning import CardFace
"""

from smartflash.enums.learning import (
    CardFace,
    DifficultyLevel,
    EducationLevel,
    NavigationDirection,
    QuestionType,
    SessionType,
    StudyPhase,
)
from smartflash.enums.api import (
    StorageBackend,
    StorageKey,
    ToastType,
)

__all__ = [
    # Learning enums
    "CardFace",
    "DifficultyLevel",
    "EducationLevel",
    "NavigationDirection",
    "QuestionType",
    "SessionType",
    "StudyPhase",
    # API enums
    "StorageBackend",
    "StorageKey",
    "ToastType",
]
