"""User profile tool."""

from __future__ import annotations

import re
from typing import Any

from x_research_mcp.errors import InvalidArgument
from x_research_mcp.tools.base import XTool, bool_arg, int_arg, string_arg

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_]{1,15}$")


class ProfileTool(XTool):
    @property
    def name(self) -> str:
        return "get_profile"

    @property
    def description(self) -> str:
        return "Get recent tweets from a specific X/Twitter user."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "username": {
                    "type": "string",
                    "description": "X username without the @ symbol",
                },
                "count": {
                    "type": "number",
                    "description": "Number of tweets to fetch (default: 20, max: 100)",
                },
                "include_replies": {
                    "type": "boolean",
                    "description": "Include the user's replies (default: false)",
                },
            },
            "required": ["username"],
        }

    async def execute(self, **kwargs: Any) -> dict[str, Any]:
        username = string_arg(kwargs, "username", required=True).lstrip("@")
        if not _USERNAME_PATTERN.match(username):
            raise InvalidArgument(f"Invalid X username: {username!r}")
        count = min(int_arg(kwargs, "count", 20, minimum=1), 100)
        include_replies = bool_arg(kwargs, "include_replies")

        user, tweets = await self._x_api.profile(
            self._bearer_token,
            username,
            count=count,
            include_replies=include_replies,
        )
        return {"user": user, "tweets": [t.to_dict() for t in tweets]}
