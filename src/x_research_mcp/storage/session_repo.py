"""Stored sessions: an opaque session id mapped to a user's bearer token."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

import aiosqlite

from x_research_mcp.errors import StorageUnavailable
from x_research_mcp.log import get_logger
from x_research_mcp.storage.database import Database
from x_research_mcp.storage.models import SessionRecord

logger = get_logger(__name__)


class SessionRepository:
    """Create / lookup / touch / revoke over the ``mcp_sessions`` table."""

    def __init__(self, db: Database):
        self._db = db

    async def create(self, bearer_token: str) -> str:
        """Store a bearer token under a new session id and return the id."""
        session_id = str(uuid.uuid4())
        try:
            await self._db.conn.execute(
                "INSERT INTO mcp_sessions (session_id, bearer_token) VALUES (?, ?)",
                (session_id, bearer_token),
            )
            await self._db.conn.commit()
        except aiosqlite.Error as e:
            raise StorageUnavailable(f"Could not create session: {e}") from e
        logger.info("session_created", session_id=session_id)
        return session_id

    async def lookup(self, session_id: str) -> Optional[str]:
        """Return the bearer token for a session, or None if it does not exist."""
        record = await self.get(session_id)
        return record.bearer_token if record else None

    async def get(self, session_id: str) -> Optional[SessionRecord]:
        try:
            cursor = await self._db.conn.execute(
                "SELECT * FROM mcp_sessions WHERE session_id = ?",
                (session_id,),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StorageUnavailable(f"Could not read session: {e}") from e
        if row is None:
            return None
        return SessionRecord(
            session_id=row["session_id"],
            bearer_token=row["bearer_token"],
            created_at=datetime.fromisoformat(row["created_at"]),
            last_used_at=datetime.fromisoformat(row["last_used_at"]),
        )

    async def touch(self, session_id: str) -> None:
        """Update last_used_at (keep-alive)."""
        try:
            await self._db.conn.execute(
                """UPDATE mcp_sessions
                   SET last_used_at = strftime('%Y-%m-%dT%H:%M:%f','now')
                   WHERE session_id = ?""",
                (session_id,),
            )
            await self._db.conn.commit()
        except aiosqlite.Error as e:
            raise StorageUnavailable(f"Could not update session: {e}") from e

    async def revoke(self, session_id: str) -> bool:
        """Delete a session. Returns False if it did not exist."""
        try:
            cursor = await self._db.conn.execute(
                "DELETE FROM mcp_sessions WHERE session_id = ?",
                (session_id,),
            )
            await self._db.conn.commit()
        except aiosqlite.Error as e:
            raise StorageUnavailable(f"Could not revoke session: {e}") from e
        if cursor.rowcount:
            logger.info("session_revoked", session_id=session_id)
        return cursor.rowcount > 0

    async def count(self) -> int:
        try:
            cursor = await self._db.conn.execute("SELECT COUNT(*) FROM mcp_sessions")
            row = await cursor.fetchone()
        except aiosqlite.Error as e:
            raise StorageUnavailable(f"Could not count sessions: {e}") from e
        return row[0]
