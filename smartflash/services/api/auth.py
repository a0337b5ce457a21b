"""
Authentication API

Endpoints:
- POST /api/auth/register
- POST /api/auth/login
- POST /api/auth/logout
- GET  /api/auth/profile

Successful login/registration stores the token (and user id, when the
backend returns the user) in the client's SessionContext.
"""

import logging

from smartflash.models.user import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserProfile,
)
from smartflash.services.api.client import ApiClient, parse_response

logger = logging.getLogger(__name__)


class AuthService:
    """Login, registration, logout and the auth profile."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def _remember(self, result: AuthResponse) -> None:
        if result.token:
            user_id = result.user.id if result.user else None
            await self.client.context.save(result.token, user_id)

    async def register(self, request: RegisterRequest) -> AuthResponse:
        data = await self.client.post("/api/auth/register", json=request.to_payload())
        result = parse_response(AuthResponse, data)
        await self._remember(result)
        logger.info(f"Registered account for {request.email.lower()}")
        return result

    async def login(self, request: LoginRequest) -> AuthResponse:
        data = await self.client.post("/api/auth/login", json=request.to_payload())
        result = parse_response(AuthResponse, data)
        await self._remember(result)
        return result

    async def logout(self) -> None:
        """
        Log out locally, then tell the server.

        Local credentials are cleared first, so a failing server call never
        leaves the user logged in; the server error still propagates.
        """
        await self.client.context.clear()
        await self.client.post("/api/auth/logout")

    async def get_profile(self) -> UserProfile:
        data = await self.client.get("/api/auth/profile")
        return parse_response(UserProfile, data.get("user", data))
