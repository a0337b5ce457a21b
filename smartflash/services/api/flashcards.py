"""
Flashcard API

Endpoints:
- GET    /api/flashcards
- GET    /api/flashcards/{id}
- POST   /api/flashcards
- PUT    /api/flashcards/{id}
- DELETE /api/flashcards/{id}
"""

import logging
from typing import Any

from smartflash.models.learning import Flashcard, FlashcardCreate, FlashcardUpdate
from smartflash.services.api.client import ApiClient, parse_response

logger = logging.getLogger(__name__)


class FlashcardService:
    """CRUD access to the user's flashcards."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def list_flashcards(self) -> list[Flashcard]:
        data = await self.client.get("/api/flashcards")
        return [parse_response(Flashcard, card) for card in data.get("flashcards") or []]

    async def get_flashcard(self, flashcard_id: str) -> Flashcard:
        data = await self.client.get(f"/api/flashcards/{flashcard_id}")
        return parse_response(Flashcard, data.get("flashcard"))

    async def create_flashcard(self, request: FlashcardCreate) -> Flashcard:
        data = await self.client.post("/api/flashcards", json=request.to_payload())
        card = parse_response(Flashcard, data.get("flashcard"))
        logger.info(f"Created flashcard {card.id}")
        return card

    async def update_flashcard(
        self, flashcard_id: str, request: FlashcardUpdate
    ) -> Flashcard:
        data = await self.client.put(
            f"/api/flashcards/{flashcard_id}", json=request.to_payload()
        )
        return parse_response(Flashcard, data.get("flashcard"))

    async def delete_flashcard(self, flashcard_id: str) -> dict[str, Any]:
        result = await self.client.delete(f"/api/flashcards/{flashcard_id}")
        logger.info(f"Deleted flashcard {flashcard_id}")
        return result
