"""
SmartFlash REST Client

Thin async HTTP client for the SmartFlash backend. Resource services
(auth, flashcards, study, users, modules) are built on top of it.

Features:
- Base URL and timeout from settings (AI generation needs a long timeout)
- Request decoration through a SessionContext (bearer token, x-user-id)
- 401 clears stored credentials
- httpx failures translated to typed ServiceErrors
- No automatic retries; callers surface retryable errors to the user

Usage:
    from smartflash.services.api import ApiClient

    async with ApiClient(context=context) as client:
        data = await client.get("/api/study-modules")
"""

import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from smartflash.config import settings
from smartflash.middleware.auth import AuthDecorator, SessionContext
from smartflash.middleware.error_handling import (
    error_from_response,
    error_from_transport,
    ServiceError,
)

logger = logging.getLogger(__name__)


class ApiClient:
    """
    Async JSON client with auth decoration and error translation.

    Every method returns the decoded JSON object of a 2xx response (an empty
    dict for empty bodies) or raises a ServiceError subclass.
    """

    def __init__(
        self,
        context: Optional[SessionContext] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            context: Auth state used to decorate requests (default: empty,
                in-memory context)
            base_url: Backend base URL (default: settings.API_BASE_URL)
            timeout: Request timeout in seconds (default:
                settings.API_TIMEOUT_SECONDS)
            transport: Custom httpx transport, e.g. httpx.MockTransport in tests
        """
        self.context: SessionContext = context or SessionContext()
        self.base_url: str = base_url or settings.API_BASE_URL
        self.timeout: float = (
            timeout if timeout is not None else settings.API_TIMEOUT_SECONDS
        )
        self._decorator = AuthDecorator(self.context)
        self.client: httpx.AsyncClient = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers={"Content-Type": "application/json"},
            event_hooks=self._decorator.event_hooks(),
            transport=transport,
        )
        logger.debug(f"API base URL: {self.base_url}")

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Send a request and decode the JSON response.

        Args:
            method: HTTP method
            path: Path relative to the base URL
            json: Optional JSON body
            params: Optional query parameters

        Returns:
            Decoded JSON object ({} for empty bodies)

        Raises:
            NetworkError: No response was received
            ServiceError: Non-2xx response (subclass chosen by status code)
        """
        try:
            response = await self.client.request(method, path, json=json, params=params)
        except httpx.RequestError as e:
            raise error_from_transport(e) from e

        if response.is_error:
            error = error_from_response(response)
            logger.warning(
                f"[{error.error_id}] {method} {path} failed: "
                f"{response.status_code} {error.message}"
            )
            raise error

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            logger.warning(f"{method} {path} returned a non-JSON body")
            return {}
        return data if isinstance(data, dict) else {"data": data}

    async def get(self, path: str, params: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> dict[str, Any]:
        return await self.request("DELETE", path)


ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_response(model_cls: type[ModelT], data: Any) -> ModelT:
    """
    Validate backend data against a response model.

    Raises:
        ServiceError: The backend sent data that does not match the contract
    """
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as e:
        logger.error(f"Unexpected {model_cls.__name__} payload: {e}")
        raise ServiceError(
            "Unexpected response from server",
            status_code=502,
            error_code="bad_response",
            details={"model": model_cls.__name__},
        ) from e
