"""Domain records built from X API v2 payloads."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class TweetMetrics:
    likes: int = 0
    retweets: int = 0
    replies: int = 0
    quotes: int = 0
    impressions: int = 0
    bookmarks: int = 0


@dataclass(frozen=True, slots=True)
class Tweet:
    id: str
    text: str
    author_id: str
    username: str
    name: str
    created_at: str
    conversation_id: str
    metrics: TweetMetrics = field(default_factory=TweetMetrics)
    urls: tuple[str, ...] = ()
    mentions: tuple[str, ...] = ()
    hashtags: tuple[str, ...] = ()
    tweet_url: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("urls", "mentions", "hashtags"):
            data[key] = list(data[key])
        return data


def parse_tweets(raw: dict[str, Any]) -> list[Tweet]:
    """Join tweets in ``data`` with their authors from ``includes.users``."""
    items = raw.get("data")
    if not items:
        return []
    if isinstance(items, dict):
        items = [items]

    users = {u.get("id"): u for u in (raw.get("includes") or {}).get("users") or []}
    return [_parse_tweet(t, users.get(t.get("author_id")) or {}) for t in items]


def _parse_tweet(t: dict[str, Any], user: dict[str, Any]) -> Tweet:
    m = t.get("public_metrics") or {}
    entities = t.get("entities") or {}
    username = user.get("username") or "?"
    return Tweet(
        id=t.get("id", ""),
        text=t.get("text", ""),
        author_id=t.get("author_id", ""),
        username=username,
        name=user.get("name") or "?",
        created_at=t.get("created_at", ""),
        conversation_id=t.get("conversation_id", ""),
        metrics=TweetMetrics(
            likes=m.get("like_count") or 0,
            retweets=m.get("retweet_count") or 0,
            replies=m.get("reply_count") or 0,
            quotes=m.get("quote_count") or 0,
            impressions=m.get("impression_count") or 0,
            bookmarks=m.get("bookmark_count") or 0,
        ),
        urls=_entity_values(entities, "urls", "expanded_url"),
        mentions=_entity_values(entities, "mentions", "username"),
        hashtags=_entity_values(entities, "hashtags", "tag"),
        tweet_url=f"https://x.com/{username}/status/{t.get('id', '')}",
    )


def _entity_values(entities: dict[str, Any], kind: str, key: str) -> tuple[str, ...]:
    return tuple(e[key] for e in entities.get(kind) or [] if e.get(key))
