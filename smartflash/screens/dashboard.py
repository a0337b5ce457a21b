"""
Dashboard Screen

User stats, the most recent study sessions and the latest modules. The
three parts load concurrently and fail independently; a failed part is
logged and shown empty.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from smartflash.config import study_config
from smartflash.middleware.error_handling import ServiceError
from smartflash.models.learning import HistorySession, StudyModule
from smartflash.models.user import UserStats
from smartflash.services.api import Backend

logger = logging.getLogger(__name__)


@dataclass
class DashboardView:
    stats: UserStats = field(default_factory=UserStats)
    recent_sessions: list[HistorySession] = field(default_factory=list)
    modules: list[StudyModule] = field(default_factory=list)


def _failed(part: str, result: object) -> bool:
    if isinstance(result, ServiceError):
        logger.error(f"Error loading {part}: {result}")
        return True
    if isinstance(result, BaseException):
        raise result
    return False


async def dashboard(backend: Backend) -> DashboardView:
    stats, history, modules = await asyncio.gather(
        backend.users.get_stats(),
        backend.study.get_history(),
        backend.modules.list_modules(),
        return_exceptions=True,
    )

    view = DashboardView()
    if not _failed("stats", stats):
        view.stats = stats
    if not _failed("study history", history):
        view.recent_sessions = history.sessions[: study_config.recent_sessions_limit]
    if not _failed("study modules", modules):
        view.modules = modules[: study_config.latest_modules_limit]
    return view
