"""
Shared test fixtures.

Everything the simulator touches is in memory, so no infrastructure needs
replacing. The fixtures here only provide:
- a fixed window start (a Monday at midnight) so timestamps are predictable
- Settings with a pinned seed and the default 5-minute tick
- an HTTP client that talks to the FastAPI app in-process
  (httpx.AsyncClient with ASGI transport, no network)
"""

from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from api.main import create_app
from api.dependencies import get_settings
from config.settings import Settings


@pytest.fixture
def window_start() -> datetime:
    """Monday 2024-01-01 00:00, on every cron boundary that matters."""
    return datetime(2024, 1, 1, 0, 0)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(RANDOM_SEED=1234, TICK_MINUTES=5, SAMPLE_INTERVAL_MINUTES=30)


@pytest_asyncio.fixture
async def client(test_settings):
    """
    Create a test HTTP client that talks directly to the FastAPI app.

    dependency_overrides swaps the process-wide settings for test_settings,
    so every simulation in the API tests uses a pinned seed.
    """
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: test_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
