"""Resolve an inbound connection's query parameters to a bound credential."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Optional

from x_research_mcp.core.types import ResolutionMode
from x_research_mcp.errors import SessionNotFound, StorageUnavailable
from x_research_mcp.log import get_logger
from x_research_mcp.storage.session_repo import SessionRepository

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConnectionContext:
    """Per-connection state; decides which tools are exposed."""

    bearer_token: Optional[str] = field(default=None, repr=False)
    session_id: Optional[str] = None
    mode: ResolutionMode = ResolutionMode.ANONYMOUS
    connection_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def authenticated(self) -> bool:
        return self.bearer_token is not None


class SessionResolver:
    """Maps ``session_id`` / ``x_bearer_token`` connection parameters to a context.

    Precedence: a stored ``session_id`` wins over a raw token; with neither
    the connection is anonymous and can only register a token.
    Raises SessionNotFound for an unknown session id and lets
    StorageUnavailable from lookup or create propagate.
    """

    def __init__(self, session_repo: SessionRepository):
        self._repo = session_repo

    async def resolve(
        self,
        session_id: Optional[str] = None,
        bearer_token: Optional[str] = None,
    ) -> ConnectionContext:
        if session_id:
            token = await self._repo.lookup(session_id)
            if not token:
                logger.info("session_not_found", session_id=session_id)
                raise SessionNotFound("Session not found or expired.")
            try:
                await self._repo.touch(session_id)
            except StorageUnavailable as e:
                logger.warning("session_touch_failed", session_id=session_id, error=e.message)
            logger.info("session_reconnected", session_id=session_id)
            return ConnectionContext(
                bearer_token=token, session_id=session_id, mode=ResolutionMode.STORED
            )

        if bearer_token and bearer_token.strip():
            token = bearer_token.strip()
            new_session_id = await self._repo.create(token)
            logger.info("direct_token_connection", session_id=new_session_id)
            return ConnectionContext(
                bearer_token=token, session_id=new_session_id, mode=ResolutionMode.DIRECT
            )

        logger.info("anonymous_connection")
        return ConnectionContext()
