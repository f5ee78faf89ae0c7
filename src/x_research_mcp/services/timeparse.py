"""Parsing of the ``since`` time filter accepted by search."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

_RELATIVE_PATTERN = re.compile(r"^(\d+)(m|h|d)$")
_UNITS = {"m": "minutes", "h": "hours", "d": "days"}


def parse_since(since: str, now: datetime | None = None) -> datetime | None:
    """Resolve a since value to an absolute UTC datetime.

    Accepts a relative shorthand such as ``30m``, ``3h`` or ``7d`` (counted back
    from *now*) or an absolute ISO-8601 timestamp. Anything else returns
    ``None``, meaning no time filter is applied.
    """
    since = since.strip()
    match = _RELATIVE_PATTERN.match(since)
    if match:
        now = now or datetime.now(timezone.utc)
        return now - timedelta(**{_UNITS[match.group(2)]: int(match.group(1))})

    if "T" in since or "-" in since:
        try:
            parsed = datetime.fromisoformat(since.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    return None


def format_start_time(moment: datetime) -> str:
    """Format a datetime the way the X API expects ``start_time``."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
