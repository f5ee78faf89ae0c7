"""Append-only log of every tool call, written in the background."""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import aiosqlite

from x_research_mcp.errors import StorageUnavailable
from x_research_mcp.log import get_logger
from x_research_mcp.storage.database import Database
from x_research_mcp.storage.models import InteractionRecord

logger = get_logger(__name__)

SECRET_KEYS = frozenset({"bearer_token", "x_bearer_token"})
REDACTED = "***"


def redact(value: Any) -> Any:
    """Copy of *value* with credential fields masked at any depth."""
    if isinstance(value, dict):
        return {k: REDACTED if k in SECRET_KEYS else redact(v) for k, v in value.items()}
    if isinstance(value, list):
        return [redact(v) for v in value]
    return value


class InteractionLogger:
    """Fire-and-forget writer for ``mcp_interactions``.

    ``log`` never raises and never waits on the database: the insert runs as
    a background task and failures are only reported to the operator log.
    """

    def __init__(self, db: Database):
        self._db = db
        self._pending: set[asyncio.Task] = set()

    def log(
        self,
        tool_name: str,
        request: dict[str, Any],
        response: Any,
        session_id: Optional[str] = None,
    ) -> None:
        record = InteractionRecord(
            tool_name=tool_name,
            request=redact(request),
            response=redact(response),
            user_identifier=session_id,
        )
        task = asyncio.create_task(self._write(record))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, record: InteractionRecord) -> None:
        try:
            await self.save(record)
        except Exception as e:
            logger.error("interaction_log_failed", tool_name=record.tool_name, error=str(e))

    async def save(self, record: InteractionRecord) -> int:
        """Insert one record and return its id."""
        try:
            cursor = await self._db.conn.execute(
                """INSERT INTO mcp_interactions (user_identifier, tool_name, request, response)
                   VALUES (?, ?, ?, ?)""",
                (
                    record.user_identifier,
                    record.tool_name,
                    json.dumps(record.request, default=str),
                    json.dumps(record.response, default=str),
                ),
            )
            await self._db.conn.commit()
        except aiosqlite.Error as e:
            raise StorageUnavailable(f"Could not write interaction log: {e}") from e
        return cursor.lastrowid  # type: ignore[return-value]

    async def drain(self) -> None:
        """Wait for all in-flight writes."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
