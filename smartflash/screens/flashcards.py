"""Manual flashcard creation screen."""

import logging
from typing import Optional

from smartflash.enums.api import ToastType
from smartflash.enums.learning import DifficultyLevel
from smartflash.middleware.error_handling import ServiceError, user_message
from smartflash.models.learning import Flashcard, FlashcardCreate
from smartflash.services.api import Backend
from smartflash.services.notifications import Notifier

logger = logging.getLogger(__name__)


async def create_flashcard(
    backend: Backend,
    notifier: Notifier,
    question: str,
    answer: str,
    subject: Optional[str] = None,
    difficulty: DifficultyLevel = DifficultyLevel.INTERMEDIATE,
) -> Optional[Flashcard]:
    """
    Create a standard flashcard.

    Question and answer are required; an empty subject is omitted.
    """
    if not question.strip() or not answer.strip():
        notifier.show_toast(
            "Please fill in both question and answer fields.", ToastType.ERROR
        )
        return None

    request = FlashcardCreate(
        question=question,
        answer=answer,
        subject=(subject or "").strip() or None,
        difficulty_level=difficulty,
    )
    try:
        card = await backend.flashcards.create_flashcard(request)
    except ServiceError as e:
        logger.error(f"Error creating flashcard: {e}")
        notifier.show_toast(
            user_message(e, "Failed to create flashcard. Please try again."),
            ToastType.ERROR,
        )
        return None

    notifier.show_toast("Flashcard created successfully!", ToastType.SUCCESS)
    return card
