"""Application orchestrator - wires all components and manages lifecycle."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

import aiosqlite
import httpx
from starlette.applications import Starlette

from x_research_mcp.config import AppConfig
from x_research_mcp.core.connection_registry import ConnectionRegistry
from x_research_mcp.core.session import ConnectionContext, SessionResolver
from x_research_mcp.log import get_logger
from x_research_mcp.server.dispatcher import ToolDispatcher
from x_research_mcp.server.routes import build_routes
from x_research_mcp.services.x_api import XApiService
from x_research_mcp.storage.database import Database
from x_research_mcp.storage.interaction_log import InteractionLogger
from x_research_mcp.storage.session_repo import SessionRepository

logger = get_logger(__name__)


class XResearchApp:
    """Top-level application orchestrator."""

    def __init__(self, config: AppConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self.db = Database(config.storage.db_path)
        self.session_repo = SessionRepository(self.db)
        self.interaction_logger = InteractionLogger(self.db)
        self.x_api = XApiService(config.upstream, transport=transport)
        self.resolver = SessionResolver(self.session_repo)
        self.connections = ConnectionRegistry()

    async def start(self) -> None:
        """Initialize and start all components."""
        # 1. Database: a failure here only disables sessions and logging
        try:
            await self.db.initialize()
        except (aiosqlite.Error, OSError) as e:
            logger.warning(
                "database_unavailable",
                path=self.config.storage.db_path,
                error=str(e),
                hint="Sessions cannot be stored and interactions won't be logged",
            )

        # 2. Upstream client
        await self.x_api.start()

        logger.info(
            "x_research_mcp_started",
            public_url=self.config.public_url or None,
            connect_url=f"{self.config.public_url}/sse",
        )

    async def stop(self) -> None:
        """Gracefully shut down all components."""
        await self.interaction_logger.drain()
        await self.x_api.stop()
        await self.db.close()
        logger.info("x_research_mcp_stopped")

    def create_dispatcher(self, context: ConnectionContext) -> ToolDispatcher:
        """One dispatcher per connection, bound to its resolved credential."""
        return ToolDispatcher(
            context=context,
            x_api=self.x_api,
            session_repo=self.session_repo,
            interaction_logger=self.interaction_logger,
            public_url=self.config.public_url,
        )

    def create_asgi_app(self) -> Starlette:
        @asynccontextmanager
        async def lifespan(_app: Starlette) -> AsyncIterator[None]:
            await self.start()
            try:
                yield
            finally:
                await self.stop()

        return Starlette(routes=build_routes(self), lifespan=lifespan)
