"""MCP server instance bound to one connection's dispatcher."""

from __future__ import annotations

from typing import Any

from mcp import types
from mcp.server.lowlevel import Server

from x_research_mcp.server.dispatcher import ToolDispatcher

SERVER_NAME = "x-research-mcp"
SERVER_VERSION = "1.1.0"


def create_mcp_server(dispatcher: ToolDispatcher) -> Server:
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [tool.to_mcp_tool() for tool in dispatcher.list_tools()]

    # Arguments are validated by the tools so failures reach the interaction log
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        result = await dispatcher.call_tool(name, arguments)
        return result.to_mcp()

    return server
