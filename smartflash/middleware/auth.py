"""
Request Decoration and Session Context

Every API request carries:
- Authorization: Bearer <token>  (only when logged in)
- x-user-id: <user id>           (DEFAULT_USER_ID until a user id is stored)

A 401 response invalidates the session globally: token and user id are
cleared from the context and its store before the error propagates.

The auth state is an explicit SessionContext object handed to ApiClient,
not ambient global storage, so tests can build one in memory.

Usage:
    context = SessionContext(store=get_token_store())
    await context.load()

    async with ApiClient(context=context) as client:
        ...
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

import httpx

from smartflash.config import settings
from smartflash.enums.api import StorageKey
from smartflash.services.storage import MemoryStore, TokenStore

logger = logging.getLogger(__name__)

USER_ID_HEADER = "x-user-id"


@dataclass
class SessionContext:
    """
    Current authentication state.

    Attributes:
        store: Backing credential store
        token: Bearer token, None when logged out
        user_id: Authenticated user id, None when logged out
        default_user_id: Sent as x-user-id when no user id is known
    """

    store: TokenStore = field(default_factory=MemoryStore)
    token: Optional[str] = None
    user_id: Optional[str] = None
    default_user_id: str = settings.DEFAULT_USER_ID

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    async def load(self) -> "SessionContext":
        """Populate token and user id from the store."""
        self.token = await self.store.get_item(StorageKey.AUTH_TOKEN.value)
        self.user_id = await self.store.get_item(StorageKey.USER_ID.value)
        return self

    async def save(self, token: str, user_id: Optional[str] = None) -> None:
        """Persist credentials after a successful login or registration."""
        self.token = token
        await self.store.set_item(StorageKey.AUTH_TOKEN.value, token)
        if user_id:
            self.user_id = user_id
            await self.store.set_item(StorageKey.USER_ID.value, user_id)

    async def clear(self) -> None:
        """Forget credentials in memory and in the store."""
        self.token = None
        self.user_id = None
        await self.store.remove_item(StorageKey.AUTH_TOKEN.value)
        await self.store.remove_item(StorageKey.USER_ID.value)

    def headers(self) -> dict[str, str]:
        headers = {USER_ID_HEADER: self.user_id or self.default_user_id}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


class AuthDecorator:
    """
    httpx event hooks binding a SessionContext to a client.

    Usage:
        decorator = AuthDecorator(context)
        httpx.AsyncClient(event_hooks=decorator.event_hooks())
    """

    def __init__(self, context: SessionContext) -> None:
        self.context = context

    async def on_request(self, request: httpx.Request) -> None:
        request.headers.update(self.context.headers())

    async def on_response(self, response: httpx.Response) -> None:
        if response.status_code == 401:
            logger.warning(
                f"401 from {response.request.method} {response.request.url.path}; "
                "clearing stored credentials"
            )
            try:
                await self.context.clear()
            except (OSError, ValueError) as e:
                # In-memory credentials are already gone; the 401 still surfaces
                logger.error(f"Could not remove stored credentials: {e}")

    def event_hooks(self) -> dict[str, list]:
        return {"request": [self.on_request], "response": [self.on_response]}
