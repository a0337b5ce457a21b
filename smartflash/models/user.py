"""
User and Authentication API Models (Pydantic)
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field

from smartflash.enums.learning import EducationLevel
from smartflash.models.base import StrictRequest, StrictResponse

MIN_PASSWORD_LENGTH: int = 6


class LoginRequest(StrictRequest):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RegisterRequest(StrictRequest):
    """New account; the email is normalized to lower case."""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    age: Optional[int] = Field(None, ge=0)
    education_level: EducationLevel = EducationLevel.HIGH_SCHOOL

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["email"] = payload["email"].lower()
        return payload


class UserProfile(StrictResponse):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = None
    education_level: Optional[str] = None


class AuthResponse(StrictResponse):
    """Login/registration result. token is absent on failed logins."""

    token: Optional[str] = None
    user: Optional[UserProfile] = None
    message: Optional[str] = None


class ProfileUpdate(StrictRequest):
    name: Optional[str] = None
    age: Optional[int] = Field(None, ge=0)
    education_level: Optional[EducationLevel] = None


class UserStats(StrictResponse):
    """Dashboard counters; missing values default to 0."""

    total_cards: int = 0
    studied_today: int = 0
    streak: int = 0
    accuracy: float = 0
