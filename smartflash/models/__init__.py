"""
API models for the SmartFlash backend contract.

Usage:
    from smartflash.models import Flashcard, StudyModule, StartSessionResponse
"""

from smartflash.models.base import StrictRequest, StrictResponse
from smartflash.models.learning import (
    EndSessionRequest,
    EndSessionResponse,
    Flashcard,
    FlashcardCreate,
    FlashcardUpdate,
    HistoryResponse,
    HistorySession,
    ModuleDetail,
    ModuleGenerateRequest,
    ModuleGenerateResponse,
    ModuleProgress,
    PerformanceRequest,
    SessionRef,
    SessionSummary,
    StartSessionRequest,
    StartSessionResponse,
    StudyModule,
    accuracy_percent,
)
from smartflash.models.user import (
    AuthResponse,
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    UserProfile,
    UserStats,
)

__all__ = [
    # Base
    "StrictRequest",
    "StrictResponse",
    # Learning
    "EndSessionRequest",
    "EndSessionResponse",
    "Flashcard",
    "FlashcardCreate",
    "FlashcardUpdate",
    "HistoryResponse",
    "HistorySession",
    "ModuleDetail",
    "ModuleGenerateRequest",
    "ModuleGenerateResponse",
    "ModuleProgress",
    "PerformanceRequest",
    "SessionRef",
    "SessionSummary",
    "StartSessionRequest",
    "StartSessionResponse",
    "StudyModule",
    "accuracy_percent",
    # User
    "AuthResponse",
    "LoginRequest",
    "ProfileUpdate",
    "RegisterRequest",
    "UserProfile",
    "UserStats",
]
