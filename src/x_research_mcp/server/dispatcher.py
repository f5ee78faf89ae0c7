"""Per-connection tool dispatcher: validation, execution, envelopes and logging."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mcp import types

from x_research_mcp.errors import InvalidArgument, ToolError, Unauthenticated
from x_research_mcp.log import get_logger
from x_research_mcp.tools.base import Tool
from x_research_mcp.tools.registry import X_TOOL_NAMES, ToolRegistry

if TYPE_CHECKING:
    from x_research_mcp.core.session import ConnectionContext
    from x_research_mcp.services.x_api import XApiService
    from x_research_mcp.storage.interaction_log import InteractionLogger
    from x_research_mcp.storage.session_repo import SessionRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class ToolResult:
    """Uniform result envelope for every tool call."""

    payload: dict[str, Any]
    is_error: bool = False

    def to_text(self) -> str:
        return json.dumps(self.payload, indent=2, default=str)

    def to_mcp(self) -> types.CallToolResult:
        return types.CallToolResult(
            content=[types.TextContent(type="text", text=self.to_text())],
            isError=self.is_error,
        )


class ToolDispatcher:
    """Executes tool calls for one connection.

    Built once per connection from its resolved context, so the bearer token
    never leaves the connection that supplied it.
    """

    def __init__(
        self,
        context: ConnectionContext,
        x_api: XApiService,
        session_repo: SessionRepository,
        interaction_logger: InteractionLogger,
        public_url: str = "",
    ):
        self.context = context
        self._interaction_logger = interaction_logger
        self._registry = ToolRegistry(x_api, session_repo, public_url)
        self._registry.discover_and_register(context)

    def list_tools(self) -> list[Tool]:
        return self._registry.all_tools()

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> ToolResult:
        """Run a tool and return its envelope. Never raises."""
        arguments = arguments or {}
        try:
            tool = self._resolve(name)
            result = ToolResult(await tool.execute(**arguments))
        except ToolError as e:
            logger.info("tool_call_failed", tool_name=name, code=e.code, error=e.message)
            result = ToolResult(e.to_payload(), is_error=True)
        except Exception as e:
            logger.error("tool_execution_error", tool_name=name, error=str(e), exc_info=True)
            result = ToolResult(
                {"error": f"Error executing {name}: {e}", "code": "internal_error"},
                is_error=True,
            )

        self._interaction_logger.log(
            tool_name=name,
            request={"tool": name, "arguments": arguments},
            response=result.payload,
            session_id=self.context.session_id,
        )
        return result

    def _resolve(self, name: str) -> Tool:
        tool = self._registry.get(name)
        if tool is not None:
            return tool
        if name in X_TOOL_NAMES:
            raise Unauthenticated(
                "No bearer token for this session. "
                "Please call setup_session({bearer_token: 'YOUR_TOKEN'}) first."
            )
        raise InvalidArgument(f"Unknown tool: {name}")
