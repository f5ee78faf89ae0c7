"""Data models for storage layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass
class SessionRecord:
    session_id: str
    bearer_token: str
    created_at: datetime
    last_used_at: datetime


@dataclass
class InteractionRecord:
    tool_name: str
    request: dict[str, Any]
    response: Any
    user_identifier: Optional[str] = None
    created_at: Optional[datetime] = None
    id: Optional[int] = None
