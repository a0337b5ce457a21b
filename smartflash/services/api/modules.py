"""
Study Module API

Endpoints:
- GET    /api/study-modules
- GET    /api/study-modules/{id}
- POST   /api/study-modules/ai/generate
- POST   /api/study-modules/ai/preview
- DELETE /api/study-modules/{id}

AI generation can take well over a minute; the client timeout is sized
for it (settings.API_TIMEOUT_SECONDS). A 503 means the AI service is not
available and surfaces as ServiceUnavailableError.
"""

import logging
from typing import Any

from smartflash.models.learning import (
    ModuleDetail,
    ModuleGenerateRequest,
    ModuleGenerateResponse,
    StudyModule,
)
from smartflash.services.api.client import ApiClient, parse_response

logger = logging.getLogger(__name__)


class ModuleService:
    """Listing, describing, generating and deleting study modules."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list_modules(self) -> list[StudyModule]:
        data = await self.client.get("/api/study-modules")
        return [parse_response(StudyModule, m) for m in data.get("modules") or []]

    async def get_module(self, module_id: str) -> ModuleDetail:
        data = await self.client.get(f"/api/study-modules/{module_id}")
        data["flashcards"] = data.get("flashcards") or []
        return parse_response(ModuleDetail, data)

    async def _generate(self, path: str, request: ModuleGenerateRequest) -> ModuleGenerateResponse:
        data = await self.client.post(path, json=request.to_payload())
        data["flashcards"] = data.get("flashcards") or []
        return parse_response(ModuleGenerateResponse, data)

    async def generate(self, request: ModuleGenerateRequest) -> ModuleGenerateResponse:
        """Generate and save a module."""
        result = await self._generate("/api/study-modules/ai/generate", request)
        logger.info(
            f"Generated module {result.module.id} '{result.module.title}' "
            f"with {len(result.flashcards)} cards"
        )
        return result

    async def preview(self, request: ModuleGenerateRequest) -> ModuleGenerateResponse:
        """Generate a module without saving it."""
        return await self._generate("/api/study-modules/ai/preview", request)

    async def delete_module(self, module_id: str) -> dict[str, Any]:
        result = await self.client.delete(f"/api/study-modules/{module_id}")
        logger.info(f"Deleted module {module_id}")
        return result
