"""Bearer token registration tool, available on every connection."""

from __future__ import annotations

from typing import Any

from x_research_mcp.errors import InvalidArgument
from x_research_mcp.storage.session_repo import SessionRepository
from x_research_mcp.tools.base import Tool


def session_url(public_url: str, session_id: str) -> str:
    """Reconnection address for a stored session."""
    return f"{public_url}/sse?session_id={session_id}"


class SetupSessionTool(Tool):
    """Stores a bearer token and hands back a permanent session URL."""

    def __init__(self, session_repo: SessionRepository, public_url: str = ""):
        self._session_repo = session_repo
        self._public_url = public_url.rstrip("/")

    @property
    def name(self) -> str:
        return "setup_session"

    @property
    def description(self) -> str:
        return (
            "Register your X API bearer token with this MCP server. "
            "Call this once - you will receive a permanent session URL. "
            "Save that URL as your MCP server address in Claude.ai so you never "
            "need to enter your token again."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "bearer_token": {
                    "type": "string",
                    "description": (
                        "Your X API bearer token (starts with 'AAAA...'). "
                        "Find it at https://developer.twitter.com/en/portal/dashboard"
                    ),
                },
            },
            "required": ["bearer_token"],
        }

    async def execute(self, **kwargs: Any) -> dict[str, Any]:
        token = kwargs.get("bearer_token")
        if not isinstance(token, str) or not token.strip():
            raise InvalidArgument("bearer_token is required")

        session_id = await self._session_repo.create(token.strip())
        return {
            "success": True,
            "session_id": session_id,
            "mcp_url": session_url(self._public_url, session_id),
            "message": (
                "Your session is ready! Copy the mcp_url and use it as your MCP server "
                "address in Claude.ai (Settings > Integrations > MCP Servers). "
                "You will never need to enter your bearer token again."
            ),
            "instructions": [
                "1. Copy the mcp_url shown above",
                "2. In Claude.ai > Settings > Integrations > MCP Servers > Add server",
                "3. Paste the mcp_url as the server URL",
                "4. Disconnect from this session and reconnect using the new URL",
            ],
        }
