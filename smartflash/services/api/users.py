"""
User API

Endpoints:
- GET /api/user/profile
- PUT /api/user/profile
- GET /api/user/stats
"""

from smartflash.models.user import ProfileUpdate, UserProfile, UserStats
from smartflash.services.api.client import ApiClient, parse_response


class UserService:
    """Profile and statistics of the logged-in user."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def get_profile(self) -> UserProfile:
        data = await self.client.get("/api/user/profile")
        return parse_response(UserProfile, data.get("user"))

    async def update_profile(self, update: ProfileUpdate) -> UserProfile:
        data = await self.client.put("/api/user/profile", json=update.to_payload())
        return parse_response(UserProfile, data.get("user"))

    async def get_stats(self) -> UserStats:
        data = await self.client.get("/api/user/stats")
        # null counters become 0
        return parse_response(UserStats, {k: v for k, v in data.items() if v is not None})
