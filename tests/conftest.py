"""Shared fixtures: temporary SQLite storage and a mocked X API."""

from __future__ import annotations

import httpx
import pytest
import pytest_asyncio

from helpers import Handler, RecordingHandler
from x_research_mcp.config import UpstreamConfig
from x_research_mcp.services.x_api import XApiService
from x_research_mcp.storage.database import Database
from x_research_mcp.storage.interaction_log import InteractionLogger
from x_research_mcp.storage.session_repo import SessionRepository


@pytest.fixture
def upstream_config() -> UpstreamConfig:
    return UpstreamConfig(page_delay=0)


@pytest_asyncio.fixture
async def make_x_api(upstream_config: UpstreamConfig):
    """Factory for an XApiService backed by a RecordingHandler."""
    services: list[XApiService] = []

    async def _make(
        routes: dict[str, Handler | list[httpx.Response]],
    ) -> tuple[XApiService, RecordingHandler]:
        handler = RecordingHandler(routes)
        service = XApiService(upstream_config, transport=httpx.MockTransport(handler))
        await service.start()
        services.append(service)
        return service, handler

    yield _make

    for service in services:
        await service.stop()


@pytest_asyncio.fixture
async def db(tmp_path):
    database = Database(str(tmp_path / "test.db"))
    await database.initialize()
    yield database
    await database.close()


@pytest.fixture
def session_repo(db: Database) -> SessionRepository:
    return SessionRepository(db)


@pytest.fixture
def interaction_logger(db: Database) -> InteractionLogger:
    return InteractionLogger(db)
