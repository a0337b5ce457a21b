"""
Study Module Screens

- AI module preview and generation form
- Module detail (cards, progress, difficulty)
- Module deletion

A 503 from the generator is titled "AI Service Unavailable"; the server's
message/error and help text are shown to the user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from smartflash.config import study_config
from smartflash.enums.api import ToastType
from smartflash.enums.learning import DifficultyLevel, EducationLevel
from smartflash.middleware.error_handling import (
    ServiceError,
    ServiceUnavailableError,
    user_message,
)
from smartflash.models.learning import (
    Flashcard,
    ModuleGenerateRequest,
    ModuleGenerateResponse,
    ModuleProgress,
    StudyModule,
)
from smartflash.services.api import Backend
from smartflash.services.notifications import Notifier

logger = logging.getLogger(__name__)

MIN_GENERATED_CARDS = 5
MAX_GENERATED_CARDS = 100


def validate_card_count(value: str) -> Optional[str]:
    """Inline error for the "number of cards" field, None when valid."""
    if value.strip() == "":
        return "Please enter a number."
    try:
        count = int(value)
    except ValueError:
        return f"Must be a number between {MIN_GENERATED_CARDS} and {MAX_GENERATED_CARDS}."
    if not MIN_GENERATED_CARDS <= count <= MAX_GENERATED_CARDS:
        return f"Must be a number between {MIN_GENERATED_CARDS} and {MAX_GENERATED_CARDS}."
    return None


def build_generate_request(
    topic: str,
    subject: Optional[str] = None,
    education_level: Optional[EducationLevel] = None,
    difficulty: Optional[DifficultyLevel] = None,
    number_of_cards: Optional[int] = None,
    estimated_hours: Optional[int] = None,
) -> ModuleGenerateRequest:
    return ModuleGenerateRequest(
        topic=topic,
        subject=(subject or "").strip() or None,
        education_level=education_level,
        difficulty_level=difficulty or DifficultyLevel(study_config.ai_default_difficulty),
        number_of_cards=number_of_cards or study_config.ai_default_cards,
        estimated_hours=estimated_hours or None,
    )


def _report_generation_error(
    notifier: Notifier, error: ServiceError, fallback: str
) -> None:
    title = (
        "AI Service Unavailable"
        if isinstance(error, ServiceUnavailableError)
        else "Error"
    )
    notifier.show_toast(user_message(error, fallback), ToastType.ERROR, title=title)


async def preview_module(
    backend: Backend, notifier: Notifier, topic: str, **options
) -> Optional[ModuleGenerateResponse]:
    """Generate a module without saving it."""
    if not topic.strip():
        notifier.show_toast("Please enter a topic for the study module.", ToastType.ERROR)
        return None

    try:
        return await backend.modules.preview(build_generate_request(topic, **options))
    except ServiceError as e:
        logger.error(f"Error generating preview: {e}")
        _report_generation_error(notifier, e, "Failed to generate preview. Please try again.")
        return None


async def generate_module(
    backend: Backend, notifier: Notifier, topic: str, **options
) -> Optional[ModuleGenerateResponse]:
    """Generate and save a module."""
    if not topic.strip():
        notifier.show_toast("Please enter a topic for the study module.", ToastType.ERROR)
        return None

    try:
        result = await backend.modules.generate(build_generate_request(topic, **options))
    except ServiceError as e:
        logger.error(f"Error generating study module: {e}")
        _report_generation_error(
            notifier, e, "Failed to generate study module. Please try again."
        )
        return None

    notifier.show_toast("Study module created successfully!", ToastType.SUCCESS)
    return result


async def delete_module(backend: Backend, notifier: Notifier, module_id: str) -> bool:
    try:
        await backend.modules.delete_module(module_id)
    except ServiceError as e:
        logger.error(f"Error deleting study module {module_id}: {e}")
        notifier.show_toast(
            user_message(e, "Failed to delete study module."), ToastType.ERROR
        )
        return False
    notifier.show_toast("Study module deleted", ToastType.SUCCESS)
    return True


@dataclass
class ModuleDetailView:
    """What the module detail screen shows."""

    module: StudyModule
    flashcards: list[Flashcard]
    sample_size: int = study_config.sample_cards

    @property
    def progress(self) -> Optional[ModuleProgress]:
        return self.module.progress

    @property
    def sample_cards(self) -> list[Flashcard]:
        return self.flashcards[: self.sample_size]

    @property
    def card_count(self) -> int:
        return len(self.flashcards) or self.module.flashcard_count

    @property
    def difficulty(self) -> str:
        return self.module.difficulty_level or DifficultyLevel.INTERMEDIATE.value

    @property
    def progress_label(self) -> str:
        progress = self.progress
        if progress is None or progress.cards_studied == 0:
            return "Not started"
        if progress.is_completed:
            return f"Completed ({progress.accuracy:.0f}% accuracy)"
        return (
            f"Card {progress.current_card_index + 1} of {self.card_count}, "
            f"{progress.progress_percent:.0f}% done, {progress.accuracy:.0f}% accuracy"
        )


async def module_detail(
    backend: Backend, notifier: Notifier, module_id: str
) -> Optional[ModuleDetailView]:
    try:
        detail = await backend.modules.get_module(module_id)
    except ServiceError as e:
        logger.error(f"Error loading module details: {e}")
        notifier.show_toast("Failed to load module details", ToastType.ERROR)
        return None
    return ModuleDetailView(module=detail.module, flashcards=detail.flashcards)
