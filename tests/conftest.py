"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the unit tests.
"""

import os
from typing import Callable, Generator, Optional

import httpx
import pytest

TEST_BASE_URL = "http://smartflash.test"

# Set BEFORE importing smartflash: settings are read once at import time
_original_env = os.environ.copy()
os.environ["SMARTFLASH_STORAGE_BACKEND"] = "memory"
os.environ["SMARTFLASH_API_BASE_URL"] = TEST_BASE_URL

from smartflash.middleware.auth import SessionContext  # noqa: E402
from smartflash.services.api import ApiClient, Backend  # noqa: E402
from smartflash.services.notifications import RecordingNotifier  # noqa: E402
from smartflash.services.storage import MemoryStore  # noqa: E402


# ============================================================================
# Environment Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """
    Keep tests away from the user's real credential file and backend.

    The variables are already set at import time; this restores the
    original environment when the session ends.
    """
    yield

    # Keep pytest's own bookkeeping variable, which it pops after teardown
    current_test = os.environ.get("PYTEST_CURRENT_TEST")
    os.environ.clear()
    os.environ.update(_original_env)
    if current_test is not None:
        os.environ["PYTEST_CURRENT_TEST"] = current_test


# ============================================================================
# Test Doubles
# ============================================================================


class FakeClock:
    """Manually advanced seconds source for duration and response-time tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def session_context(memory_store: MemoryStore) -> SessionContext:
    return SessionContext(store=memory_store, default_user_id="default-user-id")


# ============================================================================
# HTTP Fixtures
# ============================================================================


Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def make_client(session_context: SessionContext) -> Callable[..., ApiClient]:
    """
    Factory for ApiClients backed by httpx.MockTransport.

    Usage:
        client = make_client(lambda request: httpx.Response(200, json={}))
    """

    def _make(handler: Handler, context: Optional[SessionContext] = None) -> ApiClient:
        return ApiClient(
            context=context or session_context,
            base_url=TEST_BASE_URL,
            timeout=5.0,
            transport=httpx.MockTransport(handler),
        )

    return _make


@pytest.fixture
def make_backend(make_client: Callable[..., ApiClient]) -> Callable[..., Backend]:
    def _make(handler: Handler, context: Optional[SessionContext] = None) -> Backend:
        return Backend(make_client(handler, context))

    return _make
