"""
Login, Signup and Logout Screens

Form validation happens locally before any request is sent; failures are
reported as error toasts and the screen returns None.
"""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from smartflash.enums.api import ToastType
from smartflash.enums.learning import EducationLevel
from smartflash.middleware.error_handling import ServiceError, user_message
from smartflash.models.user import (
    AuthResponse,
    LoginRequest,
    MIN_PASSWORD_LENGTH,
    RegisterRequest,
)
from smartflash.services.api import Backend
from smartflash.services.notifications import Notifier

logger = logging.getLogger(__name__)


async def login(
    backend: Backend, notifier: Notifier, email: str, password: str
) -> Optional[AuthResponse]:
    """Log in and persist the credentials."""
    if not email.strip() or not password.strip():
        notifier.show_toast("Please fill in all fields", ToastType.ERROR)
        return None

    try:
        result = await backend.auth.login(LoginRequest(email=email, password=password))
    except ServiceError as e:
        notifier.show_toast(
            user_message(e, "Invalid email or password. Please try again."),
            ToastType.ERROR,
        )
        return None

    if not result.token:
        notifier.show_toast(
            result.message or "Failed to save authentication. Please try again.",
            ToastType.ERROR,
        )
        return None

    notifier.show_toast("Login successful! Welcome back", ToastType.SUCCESS)
    return result


async def signup(
    backend: Backend,
    notifier: Notifier,
    name: str,
    email: str,
    password: str,
    confirm_password: str,
    age: Optional[int] = None,
    education_level: EducationLevel = EducationLevel.HIGH_SCHOOL,
) -> Optional[AuthResponse]:
    """
    Create an account and log in.

    Checks, in order: required fields, password length, password
    confirmation. The email is trimmed and lower-cased.
    """
    if not name.strip() or not email.strip() or not password.strip():
        notifier.show_toast("Please fill in all required fields", ToastType.ERROR)
        return None
    if len(password) < MIN_PASSWORD_LENGTH:
        notifier.show_toast(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
            ToastType.ERROR,
        )
        return None
    if password != confirm_password:
        notifier.show_toast("Passwords do not match", ToastType.ERROR)
        return None

    try:
        request = RegisterRequest(
            name=name,
            email=email.strip().lower(),
            password=password,
            age=age,
            education_level=education_level,
        )
    except PydanticValidationError as e:
        logger.debug(f"Rejected signup form: {e}")
        notifier.show_toast("Please check the signup details", ToastType.ERROR)
        return None

    try:
        result = await backend.auth.register(request)
    except ServiceError as e:
        notifier.show_toast(
            user_message(e, "Failed to create account. Please try again."),
            ToastType.ERROR,
        )
        return None

    notifier.show_toast(
        "Account created successfully! Welcome to SmartFlash", ToastType.SUCCESS
    )
    return result


async def logout(backend: Backend, notifier: Notifier) -> None:
    """Log out; local credentials are gone even when the server call fails."""
    try:
        await backend.auth.logout()
    except ServiceError as e:
        logger.warning(f"Server logout failed, local credentials cleared: {e}")
    notifier.show_toast("Logged out", ToastType.INFO)
