"""
Middleware Package

Client-side request middleware:
- Request decoration (bearer token, x-user-id) and 401 session invalidation
- Error translation from httpx failures to typed ServiceErrors

Usage:
    from smartflash.middleware import SessionContext, ServiceError
"""

from smartflash.middleware.auth import AuthDecorator, SessionContext
from smartflash.middleware.error_handling import (
    AuthenticationError,
    AuthorizationError,
    InvalidStateError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServiceError,
    ServiceUnavailableError,
    ValidationError,
    user_message,
)

__all__ = [
    "AuthDecorator",
    "SessionContext",
    "AuthenticationError",
    "AuthorizationError",
    "InvalidStateError",
    "NetworkError",
    "NotFoundError",
    "RateLimitError",
    "ServiceError",
    "ServiceUnavailableError",
    "ValidationError",
    "user_message",
]
