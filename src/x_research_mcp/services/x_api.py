"""X API v2 client service.

The bearer token is passed on every call instead of being bound to the
client, so one pooled HTTP client serves every connected user.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx

from x_research_mcp.config import UpstreamConfig
from x_research_mcp.errors import NotFound, RateLimited, UpstreamError
from x_research_mcp.log import get_logger
from x_research_mcp.services.base import Service
from x_research_mcp.services.models import Tweet, parse_tweets
from x_research_mcp.services.timeparse import format_start_time, parse_since

logger = get_logger(__name__)

TWEET_FIELDS = {
    "tweet.fields": "created_at,public_metrics,author_id,conversation_id,entities",
    "expansions": "author_id",
    "user.fields": "username,name,public_metrics",
}
USER_FIELDS = {"user.fields": "public_metrics,description,created_at"}

DEFAULT_RETRY_AFTER = 60


def retry_after_seconds(reset_header: str | None, now: float | None = None) -> int:
    """Seconds until the rate-limit window resets, at least 1."""
    if reset_header is None:
        return DEFAULT_RETRY_AFTER
    try:
        reset_at = int(reset_header)
    except ValueError:
        return DEFAULT_RETRY_AFTER
    now = time.time() if now is None else now
    return max(reset_at - int(now), 1)


class XApiService(Service):
    """Read-only access to the recent search, tweet lookup and user lookup endpoints."""

    def __init__(self, config: UpstreamConfig, transport: httpx.AsyncBaseTransport | None = None):
        self._config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def service_name(self) -> str:
        return "x_api"

    async def start(self) -> None:
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=httpx.Timeout(self._config.timeout),
            transport=self._transport,
        )
        logger.info("x_api_started", base_url=self._config.base_url, timeout=self._config.timeout)

    async def stop(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("x_api_stopped")

    async def health_check(self) -> bool:
        return self._client is not None and not self._client.is_closed

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("X API service not started. Call start() first.")
        return self._client

    # ── requests ────────────────────────────────────────────────

    async def _get(self, bearer_token: str, path: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            response = await self.client.get(
                path,
                params=params,
                headers={"Authorization": f"Bearer {bearer_token}"},
            )
        except httpx.HTTPError as e:
            logger.warning("x_api_transport_error", path=path, error=str(e))
            raise UpstreamError(0, str(e) or type(e).__name__) from e

        if response.status_code == 429:
            wait = retry_after_seconds(response.headers.get("x-rate-limit-reset"))
            logger.warning("x_api_rate_limited", path=path, retry_after=wait)
            raise RateLimited(wait)
        if not response.is_success:
            logger.warning("x_api_error", path=path, status=response.status_code)
            raise UpstreamError(response.status_code, response.text)
        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(response.status_code, f"Invalid JSON response: {response.text}") from e
        if not isinstance(payload, dict):
            raise UpstreamError(response.status_code, f"Unexpected response: {response.text}")
        return payload

    async def search(
        self,
        bearer_token: str,
        query: str,
        *,
        max_results: int = 100,
        pages: int = 1,
        sort_order: str = "relevancy",
        since: str | None = None,
    ) -> list[Tweet]:
        """Run a recent search, following pagination tokens for up to *pages* pages.

        Tweets come back in upstream order; no dedupe or sorting happens here.
        """
        params: dict[str, Any] = {
            "query": query,
            "max_results": max(min(max_results, 100), 10),
            "sort_order": sort_order,
            **TWEET_FIELDS,
        }
        if since:
            start_time = parse_since(since)
            if start_time:
                params["start_time"] = format_start_time(start_time)
            else:
                logger.debug("since_ignored", since=since)

        pages = max(pages, 1)
        tweets: list[Tweet] = []
        next_token: str | None = None

        for page in range(pages):
            page_params = dict(params)
            if next_token:
                page_params["pagination_token"] = next_token
            raw = await self._get(bearer_token, "/tweets/search/recent", page_params)
            tweets.extend(parse_tweets(raw))
            logger.debug("search_page_fetched", page=page + 1, total=len(tweets))

            next_token = (raw.get("meta") or {}).get("next_token")
            if not next_token:
                break
            if page < pages - 1:
                await asyncio.sleep(self._config.page_delay)

        return tweets

    async def thread(self, bearer_token: str, conversation_id: str, *, pages: int = 2) -> list[Tweet]:
        """Replies in a conversation with the root tweet prepended when it can be fetched."""
        tweets = await self.search(
            bearer_token,
            f"conversation_id:{conversation_id}",
            pages=pages,
            sort_order="recency",
        )
        try:
            root = await self.get_tweet(bearer_token, conversation_id)
        except (RateLimited, UpstreamError) as e:
            # Root tweet may be deleted or protected; the replies are still useful
            logger.debug("thread_root_unavailable", conversation_id=conversation_id, error=e.message)
            root = None
        if root is not None:
            tweets.insert(0, root)
        return tweets

    async def profile(
        self,
        bearer_token: str,
        username: str,
        *,
        count: int = 20,
        include_replies: bool = False,
    ) -> tuple[dict[str, Any], list[Tweet]]:
        """Resolve a user and fetch their recent original tweets."""
        raw = await self._get(bearer_token, f"/users/by/username/{username}", USER_FIELDS)
        user = raw.get("data")
        if not user:
            raise NotFound(f"User @{username} not found")

        await asyncio.sleep(self._config.page_delay)
        query = f"from:{username} -is:retweet"
        if not include_replies:
            query += " -is:reply"
        tweets = await self.search(
            bearer_token,
            query,
            max_results=min(count, 100),
            sort_order="recency",
        )
        return user, tweets

    async def get_tweet(self, bearer_token: str, tweet_id: str) -> Tweet | None:
        raw = await self._get(bearer_token, f"/tweets/{tweet_id}", TWEET_FIELDS)
        if not isinstance(raw.get("data"), dict):
            return None
        parsed = parse_tweets(raw)
        return parsed[0] if parsed else None
