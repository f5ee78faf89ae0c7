"""Per-connection tool registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

from x_research_mcp.log import get_logger
from x_research_mcp.tools.base import Tool

if TYPE_CHECKING:
    from x_research_mcp.core.session import ConnectionContext
    from x_research_mcp.services.x_api import XApiService
    from x_research_mcp.storage.session_repo import SessionRepository

logger = get_logger(__name__)

# Tools that need a bearer token bound to the connection
X_TOOL_NAMES = ("search_x", "get_profile", "get_thread", "get_tweet")


class ToolRegistry:
    """Tools available on one connection."""

    def __init__(self, x_api: XApiService, session_repo: SessionRepository, public_url: str = ""):
        self._tools: dict[str, Tool] = {}
        self._x_api = x_api
        self._session_repo = session_repo
        self._public_url = public_url

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def all_tools(self) -> list[Tool]:
        return list(self._tools.values())

    def names(self) -> list[str]:
        return list(self._tools.keys())

    def discover_and_register(self, context: ConnectionContext) -> None:
        """Register setup_session, plus the X tools when the connection has a token."""
        from x_research_mcp.tools.profile import ProfileTool
        from x_research_mcp.tools.search import SearchTool
        from x_research_mcp.tools.setup_session import SetupSessionTool
        from x_research_mcp.tools.thread import ThreadTool
        from x_research_mcp.tools.tweet import TweetTool

        self.register(SetupSessionTool(self._session_repo, self._public_url))
        if context.authenticated:
            for tool_cls in (SearchTool, ProfileTool, ThreadTool, TweetTool):
                self.register(tool_cls(self._x_api, context.bearer_token))
        logger.debug(
            "tools_registered",
            connection_id=context.connection_id,
            tools=self.names(),
        )
