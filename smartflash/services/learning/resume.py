"""
Resume Point Resolution

Decides where a new study session begins. The backend may report a
start index and the user's progress through the module; the decision is
an explicit tagged value so that index 0 is never confused with "no
progress reported".

Usage:
    point = resolve_resume_point(response.start_index, response.progress, len(cards))
    if isinstance(point, Resume):
        print(f"Resuming at card {point.index + 1}")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from smartflash.models.learning import ModuleProgress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FreshStart:
    """Begin at the first card with zero counters."""

    index: int = 0
    correct_count: int = 0
    total_studied: int = 0


@dataclass(frozen=True)
class Resume:
    """
    Continue a module where the user left off.

    Attributes:
        index: Card to present first
        correct_count: Correct answers carried over from earlier sessions
        total_studied: Cards already studied in earlier sessions
    """

    index: int
    correct_count: int
    total_studied: int


ResumePoint = Union[FreshStart, Resume]


def resolve_resume_point(
    start_index: Optional[int],
    progress: Optional[ModuleProgress],
    card_count: int,
) -> ResumePoint:
    """
    Choose between a fresh start and a resume.

    Resumes only when progress is reported and start_index points past the
    first card and inside the card sequence. Carried-over counters are
    clamped so that correct_count <= total_studied <= card_count.

    Args:
        start_index: Index reported by the backend (None = not reported)
        progress: Module progress reported by the backend
        card_count: Number of cards drawn for the session

    Returns:
        FreshStart or Resume
    """
    if progress is None or start_index is None or start_index <= 0:
        return FreshStart()

    if start_index >= card_count:
        logger.warning(
            f"Reported start index {start_index} is outside {card_count} cards, "
            "starting from the first card"
        )
        return FreshStart()

    total_studied = min(max(progress.cards_studied, 0), card_count)
    correct_count = min(max(progress.total_correct, 0), total_studied)
    if (total_studied, correct_count) != (progress.cards_studied, progress.total_correct):
        logger.warning(
            f"Clamped reported progress {progress.total_correct}/{progress.cards_studied} "
            f"to {correct_count}/{total_studied}"
        )

    return Resume(
        index=start_index,
        correct_count=correct_count,
        total_studied=total_studied,
    )
