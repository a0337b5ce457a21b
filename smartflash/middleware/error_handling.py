"""
Client Error Handling

Provides a consistent exception hierarchy for everything that can go wrong
between a user action and the backend.

Features:
- Typed exceptions per failure category (network, auth, not found, ...)
- Translation of httpx transport errors and non-2xx responses
- Correlation IDs for log tracking
- Server-provided messages ({error, message, help}) preserved for display

Usage:
    from smartflash.middleware.error_handling import ServiceError, NetworkError

    try:
        await study_service.start_session(module_id="m1")
    except NetworkError as e:
        # Transient, the user may retry
        notifier.error(e.message)
    except ServiceError as e:
        notifier.error(e.message)

Error taxonomy:
    - NetworkError: timeout or connectivity failure. Retryable; the client
      never retries on its own, the user re-triggers the operation.
    - AuthenticationError (401): credentials were cleared by the request
      decoration layer before this is raised.
    - ValidationError (400/422): bad request, or local form validation.
    - ServiceUnavailableError (503): typically the AI generation service.
    - InvalidStateError: a controller operation invoked in the wrong state.
"""

import logging
from typing import Any, Optional
from uuid import uuid4

import httpx

logger = logging.getLogger(__name__)


# =============================================================================
# Custom Exceptions
# =============================================================================


class ServiceError(Exception):
    """
    Base exception for client errors.

    Provides consistent error handling with:
    - HTTP status code (0 when no response was received)
    - Error code for categorization
    - Optional details for debugging

    Example:
        raise ServiceError("Failed to load modules", status_code=500)
    """

    status_code: int = 500
    error_code: str = "service_error"
    retryable: bool = False

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details or {}
        self.error_id = str(uuid4())[:8]

    @property
    def help(self) -> Optional[str]:
        """Optional remediation hint sent by the server."""
        return self.details.get("help")

    def __str__(self) -> str:
        return f"{self.error_code}: {self.message}"


class NetworkError(ServiceError):
    """
    Transport failure (timeout, refused connection, DNS).

    Raised when no HTTP response was received.
    """

    status_code = 0
    error_code = "network_error"
    retryable = True


class AuthenticationError(ServiceError):
    """
    Authentication error.

    Raised on 401; stored credentials are already cleared.
    """

    status_code = 401
    error_code = "unauthorized"


class AuthorizationError(ServiceError):
    """
    Authorization error.

    Raised when user lacks permission.
    """

    status_code = 403
    error_code = "forbidden"


class NotFoundError(ServiceError):
    """
    Resource not found error.

    Raised when a requested resource doesn't exist.
    """

    status_code = 404
    error_code = "not_found"


class ValidationError(ServiceError):
    """
    Data validation error.

    Raised when input data fails validation, locally or on the server.
    """

    status_code = 422
    error_code = "validation_error"


class RateLimitError(ServiceError):
    """
    Rate limit exceeded error.
    """

    status_code = 429
    error_code = "rate_limit_exceeded"
    retryable = True


class ServiceUnavailableError(ServiceError):
    """
    Backend dependency unavailable (503), usually the AI generator.
    """

    status_code = 503
    error_code = "service_unavailable"
    retryable = True


class InvalidStateError(ServiceError):
    """
    Operation not valid in the current study controller state.
    """

    status_code = 409
    error_code = "invalid_state"


_STATUS_ERRORS: dict[int, type[ServiceError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    422: ValidationError,
    429: RateLimitError,
    503: ServiceUnavailableError,
}


# =============================================================================
# Translation
# =============================================================================


def _response_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def error_from_response(response: httpx.Response) -> ServiceError:
    """
    Build a typed exception from a non-2xx response.

    The server body may carry {"error": ..., "message": ..., "help": ...};
    message is preferred over error for display.

    Args:
        response: The failed httpx response

    Returns:
        ServiceError subclass matching the status code
    """
    body = _response_body(response)
    message = (
        body.get("message")
        or body.get("error")
        or f"Request failed with status {response.status_code}"
    )
    error_cls = _STATUS_ERRORS.get(response.status_code, ServiceError)
    details = {k: v for k, v in body.items() if k in ("error", "help")}
    try:
        details["path"] = response.request.url.path
    except RuntimeError:
        # Response built without a request (e.g. in tests)
        pass

    return error_cls(str(message), status_code=response.status_code, details=details)


def error_from_transport(exc: httpx.RequestError) -> NetworkError:
    """
    Build a NetworkError from an httpx transport failure.

    Logs a hint, since the usual cause during development is a backend that
    is not running.
    """
    try:
        url: Optional[str] = str(exc.request.url)
    except RuntimeError:
        url = None
    error = NetworkError(
        "Cannot connect to the server. Check your connection and try again.",
        details={"url": url, "reason": type(exc).__name__},
    )
    logger.error(
        f"[{error.error_id}] Network error: {type(exc).__name__} for {url}. "
        "Make sure the backend server is running and reachable.",
    )
    return error


def user_message(exc: Exception, fallback: str) -> str:
    """
    Text to show the user for a failed operation.

    Service errors carry a message from the server (or a network hint);
    anything else falls back to the screen's generic message.
    """
    if isinstance(exc, ServiceError) and exc.message:
        if exc.help:
            return f"{exc.message}\n\n{exc.help}"
        return exc.message
    return fallback
