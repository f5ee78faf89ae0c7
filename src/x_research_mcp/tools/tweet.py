"""Single tweet lookup tool."""

from __future__ import annotations

from typing import Any

from x_research_mcp.tools.base import XTool, tweet_id_arg


class TweetTool(XTool):
    @property
    def name(self) -> str:
        return "get_tweet"

    @property
    def description(self) -> str:
        return "Fetch a single tweet by its ID."

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "tweet_id": {
                    "type": "string",
                    "description": "Tweet ID",
                },
            },
            "required": ["tweet_id"],
        }

    async def execute(self, **kwargs: Any) -> dict[str, Any]:
        tweet = await self._x_api.get_tweet(self._bearer_token, tweet_id_arg(kwargs))
        return {"tweet": tweet.to_dict() if tweet else None}
