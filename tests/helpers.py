"""Builders for X API payloads, a routing mock transport handler and log readers."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Callable

import httpx

from x_research_mcp.services.models import Tweet, TweetMetrics
from x_research_mcp.storage.database import Database
from x_research_mcp.storage.models import InteractionRecord

Handler = Callable[[httpx.Request], httpx.Response]


def raw_tweet(
    tweet_id: str,
    likes: int = 0,
    author_id: str = "u1",
    text: str | None = None,
    impressions: int = 0,
    retweets: int = 0,
    conversation_id: str | None = None,
) -> dict[str, Any]:
    return {
        "id": tweet_id,
        "text": text or f"tweet {tweet_id}",
        "author_id": author_id,
        "created_at": "2026-10-16T12:00:00.000Z",
        "conversation_id": conversation_id or tweet_id,
        "public_metrics": {
            "like_count": likes,
            "retweet_count": retweets,
            "reply_count": 0,
            "quote_count": 0,
            "impression_count": impressions,
            "bookmark_count": 0,
        },
    }


def raw_page(tweets: list[dict[str, Any]], next_token: str | None = None) -> dict[str, Any]:
    meta: dict[str, Any] = {"result_count": len(tweets)}
    if next_token:
        meta["next_token"] = next_token
    return {
        "data": tweets,
        "includes": {"users": [{"id": "u1", "username": "alice", "name": "Alice"}]},
        "meta": meta,
    }


def make_tweet(tweet_id: str, likes: int = 0, impressions: int = 0, retweets: int = 0) -> Tweet:
    return Tweet(
        id=tweet_id,
        text=f"tweet {tweet_id}",
        author_id="u1",
        username="alice",
        name="Alice",
        created_at="2026-10-16T12:00:00.000Z",
        conversation_id=tweet_id,
        metrics=TweetMetrics(likes=likes, impressions=impressions, retweets=retweets),
        tweet_url=f"https://x.com/alice/status/{tweet_id}",
    )


def json_response(payload: dict[str, Any], status_code: int = 200, **kwargs: Any) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode(), **kwargs)


class RecordingHandler:
    """Routes mocked X API requests by path and records every request.

    A route is either a callable or a list of responses served in order.
    """

    def __init__(self, routes: dict[str, Handler | list[httpx.Response]]):
        self._routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/2")
        route = self._routes.get(path)
        if route is None:
            return httpx.Response(404, text=f"no route for {path}")
        if isinstance(route, list):
            return route.pop(0)
        return route(request)

    def paths(self) -> list[str]:
        return [r.url.path.removeprefix("/2") for r in self.requests]


async def logged_interactions(db: Database, user_identifier: str | None = None) -> list[InteractionRecord]:
    """Rows of ``mcp_interactions``, newest first."""
    if user_identifier:
        cursor = await db.conn.execute(
            "SELECT * FROM mcp_interactions WHERE user_identifier = ? ORDER BY id DESC",
            (user_identifier,),
        )
    else:
        cursor = await db.conn.execute("SELECT * FROM mcp_interactions ORDER BY id DESC")
    return [
        InteractionRecord(
            id=row["id"],
            user_identifier=row["user_identifier"],
            tool_name=row["tool_name"],
            request=json.loads(row["request"]),
            response=json.loads(row["response"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
        for row in await cursor.fetchall()
    ]
