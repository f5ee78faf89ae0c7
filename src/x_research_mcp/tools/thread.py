"""Conversation thread tool."""

from __future__ import annotations

from typing import Any

from x_research_mcp.tools.base import XTool, tweet_id_arg

THREAD_PAGES = 2


class ThreadTool(XTool):
    @property
    def name(self) -> str:
        return "get_thread"

    @property
    def description(self) -> str:
        return "Fetch a full conversation thread by root tweet ID."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "tweet_id": {
                    "type": "string",
                    "description": "The root tweet ID of the conversation",
                },
            },
            "required": ["tweet_id"],
        }

    async def execute(self, **kwargs: Any) -> dict[str, Any]:
        tweet_id = tweet_id_arg(kwargs)
        tweets = await self._x_api.thread(self._bearer_token, tweet_id, pages=THREAD_PAGES)
        return {"tweets": [t.to_dict() for t in tweets], "count": len(tweets)}
