"""
Study Session Services

Modules:
- session_controller: StudySessionController state machine
- resume: FreshStart / Resume decision from backend-reported progress

Usage:
    from smartflash.services.learning import StudySessionController

    controller = StudySessionController(backend.study, backend.modules)
"""

from smartflash.services.learning.resume import (
    FreshStart,
    Resume,
    ResumePoint,
    resolve_resume_point,
)
from smartflash.services.learning.session_controller import (
    ALL_CARDS_TITLE,
    AnswerFeedback,
    StudySessionController,
)

__all__ = [
    "ALL_CARDS_TITLE",
    "AnswerFeedback",
    "FreshStart",
    "Resume",
    "ResumePoint",
    "StudySessionController",
    "resolve_resume_point",
]
