"""
Study Session API

Endpoints:
- POST /api/study/session                 start a session
- POST /api/study/performance/{card_id}   record one card's outcome
- PUT  /api/study/session/{session_id}    end a session with final tallies
- GET  /api/study/history                 past sessions (dashboard)

Usage:
    study = StudyService(client)
    started = await study.start_session(module_id="m1")
    await study.record_performance(card.id, PerformanceRequest(correct=True, response_time=1800))
    await study.end_session(started.session.id, EndSessionRequest(...))
"""

import logging
from typing import Optional

from smartflash.enums.learning import SessionType
from smartflash.models.learning import (
    EndSessionRequest,
    EndSessionResponse,
    HistoryResponse,
    PerformanceRequest,
    StartSessionRequest,
    StartSessionResponse,
)
from smartflash.services.api.client import ApiClient, parse_response

logger = logging.getLogger(__name__)


class StudyService:
    """Study session lifecycle and score persistence."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def start_session(
        self,
        module_id: Optional[str] = None,
        session_type: SessionType = SessionType.REVIEW,
    ) -> StartSessionResponse:
        """
        Start a session and fetch its cards and resume point.

        Args:
            module_id: Module to study (None = all cards)
            session_type: Session type sent to the backend

        Returns:
            Session handle, ordered cards, optional start index and progress
        """
        request = StartSessionRequest(session_type=session_type, module_id=module_id)
        data = await self.client.post("/api/study/session", json=request.to_payload())
        data["flashcards"] = data.get("flashcards") or []
        result = parse_response(StartSessionResponse, data)
        logger.info(
            f"Started session {result.session.id} "
            f"(module={module_id or 'all'}, cards={len(result.flashcards)}, "
            f"start_index={result.start_index})"
        )
        return result

    async def record_performance(
        self, card_id: str, performance: PerformanceRequest
    ) -> Optional[dict]:
        """Record one card's outcome; the returned record is informational."""
        data = await self.client.post(
            f"/api/study/performance/{card_id}", json=performance.to_payload()
        )
        return data.get("performance")

    async def end_session(
        self, session_id: str, stats: EndSessionRequest
    ) -> EndSessionResponse:
        data = await self.client.put(
            f"/api/study/session/{session_id}", json=stats.to_payload()
        )
        result = parse_response(EndSessionResponse, data)
        logger.info(
            f"Ended session {session_id}: {stats.correct_answers}/{stats.cards_studied} "
            f"correct in {stats.session_duration}s"
        )
        return result

    async def get_history(self) -> HistoryResponse:
        data = await self.client.get("/api/study/history")
        data["sessions"] = data.get("sessions") or []
        return parse_response(HistoryResponse, data)
