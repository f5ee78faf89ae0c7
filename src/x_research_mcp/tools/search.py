"""Recent search tool with client-side filtering, ranking and truncation."""

from __future__ import annotations

from typing import Any

from x_research_mcp.core.types import SearchSort
from x_research_mcp.errors import InvalidArgument
from x_research_mcp.services.processing import dedupe, filter_engagement, sort_by
from x_research_mcp.tools.base import XTool, int_arg, string_arg

MAX_PAGES = 5
DEFAULT_LIMIT = 15


class SearchTool(XTool):
    """Search the last 7 days of tweets."""

    @property
    def name(self) -> str:
        return "search_x"

    @property
    def description(self) -> str:
        return (
            "Search recent tweets on X/Twitter (last 7 days). Supports X search operators "
            'like from:user, #hashtag, "exact phrase", -is:retweet, etc.'
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query. Supports X operators (from:, #, -is:retweet, etc.)",
                },
                "sort": {
                    "type": "string",
                    "enum": [s.value for s in SearchSort],
                    "description": "Sort order (default: likes)",
                },
                "pages": {
                    "type": "number",
                    "description": "Pages to fetch, 1-5 (default: 1, ~100 tweets/page)",
                },
                "limit": {
                    "type": "number",
                    "description": f"Max results to return (default: {DEFAULT_LIMIT})",
                },
                "since": {
                    "type": "string",
                    "description": "Time filter: 1h, 3h, 12h, 1d, 7d or an ISO timestamp (default: last 7 days)",
                },
                "min_likes": {
                    "type": "number",
                    "description": "Filter: minimum likes threshold",
                },
            },
            "required": ["query"],
        }

    async def execute(self, **kwargs: Any) -> dict[str, Any]:
        query = string_arg(kwargs, "query", required=True)
        sort_value = string_arg(kwargs, "sort") or SearchSort.LIKES.value
        try:
            sort = SearchSort(sort_value)
        except ValueError:
            raise InvalidArgument(
                f"sort must be one of: {', '.join(s.value for s in SearchSort)}"
            ) from None
        pages = min(max(int_arg(kwargs, "pages", 1), 1), MAX_PAGES)
        limit = int_arg(kwargs, "limit", DEFAULT_LIMIT, minimum=1)
        since = string_arg(kwargs, "since")
        min_likes = int_arg(kwargs, "min_likes", minimum=0)

        # Everything is fetched before ranking so truncation sees all pages
        tweets = await self._x_api.search(
            self._bearer_token,
            query,
            pages=pages,
            sort_order="recency" if sort is SearchSort.RECENT else "relevancy",
            since=since,
        )
        if min_likes:
            tweets = filter_engagement(tweets, min_likes=min_likes)
        if sort is not SearchSort.RECENT:
            tweets = sort_by(tweets, sort.value)
        tweets = dedupe(tweets)[:limit]

        return {"tweets": [t.to_dict() for t in tweets], "count": len(tweets)}
