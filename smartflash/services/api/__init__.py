"""
REST API Services

Thin typed wrappers over the SmartFlash backend.

Modules:
- client: ApiClient (transport, request decoration, error translation)
- auth: AuthService (register, login, logout, profile)
- flashcards: FlashcardService (CRUD)
- study: StudyService (session start/performance/end, history)
- users: UserService (profile, stats)
- modules: ModuleService (list, detail, AI generate/preview, delete)

Usage:
    from smartflash.services.api import ApiClient, Backend

    async with ApiClient(context=context) as client:
        backend = Backend(client)
        modules = await backend.modules.list_modules()
"""

from smartflash.services.api.auth import AuthService
from smartflash.services.api.client import ApiClient, parse_response
from smartflash.services.api.flashcards import FlashcardService
from smartflash.services.api.modules import ModuleService
from smartflash.services.api.study import StudyService
from smartflash.services.api.users import UserService


class Backend:
    """All resource services sharing one ApiClient."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client
        self.auth = AuthService(client)
        self.flashcards = FlashcardService(client)
        self.study = StudyService(client)
        self.users = UserService(client)
        self.modules = ModuleService(client)


__all__ = [
    "ApiClient",
    "AuthService",
    "Backend",
    "FlashcardService",
    "ModuleService",
    "StudyService",
    "UserService",
    "parse_response",
]
