"""Post-processing helpers for tweet result sets. No network access."""

from __future__ import annotations

from typing import Iterable

from x_research_mcp.services.models import Tweet

SORT_METRICS = ("likes", "impressions", "retweets", "replies")


def sort_by(tweets: Iterable[Tweet], metric: str = "likes") -> list[Tweet]:
    """Stable sort, highest value of *metric* first."""
    if metric not in SORT_METRICS:
        raise ValueError(f"Unknown sort metric: {metric}")
    return sorted(tweets, key=lambda t: getattr(t.metrics, metric), reverse=True)


def filter_engagement(
    tweets: Iterable[Tweet],
    min_likes: int | None = None,
    min_impressions: int | None = None,
) -> list[Tweet]:
    """Keep tweets meeting every threshold that was supplied."""
    return [
        t
        for t in tweets
        if (min_likes is None or t.metrics.likes >= min_likes)
        and (min_impressions is None or t.metrics.impressions >= min_impressions)
    ]


def dedupe(tweets: Iterable[Tweet]) -> list[Tweet]:
    """Drop repeated ids, keeping the first occurrence."""
    seen: set[str] = set()
    result: list[Tweet] = []
    for tweet in tweets:
        if tweet.id in seen:
            continue
        seen.add(tweet.id)
        result.append(tweet)
    return result
