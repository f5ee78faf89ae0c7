"""Registry of open MCP connections."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from x_research_mcp.core.session import ConnectionContext


class ConnectionRegistry:
    """Tracks the context of every open connection by connection token."""

    def __init__(self) -> None:
        self._connections: dict[str, ConnectionContext] = {}

    def register(self, context: ConnectionContext) -> None:
        self._connections[context.connection_id] = context

    def unregister(self, connection_id: str) -> None:
        self._connections.pop(connection_id, None)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._connections

    def __len__(self) -> int:
        return len(self._connections)
