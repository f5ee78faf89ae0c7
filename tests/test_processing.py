"""Tests for sort_by, filter_engagement and dedupe."""

from __future__ import annotations

import pytest

from helpers import make_tweet
from x_research_mcp.services.processing import dedupe, filter_engagement, sort_by


class TestDedupe:
    def test_keeps_first_occurrence_in_order(self):
        tweets = [make_tweet("1", likes=1), make_tweet("2"), make_tweet("1", likes=99), make_tweet("3")]
        result = dedupe(tweets)
        assert [t.id for t in result] == ["1", "2", "3"]
        assert result[0].metrics.likes == 1

    def test_idempotent(self):
        tweets = [make_tweet(i) for i in ("5", "4", "5", "3", "4")]
        once = dedupe(tweets)
        assert dedupe(once) == once

    def test_empty(self):
        assert dedupe([]) == []


class TestSortBy:
    def test_descending_by_metric(self):
        tweets = [make_tweet("a", likes=10), make_tweet("b", likes=900), make_tweet("c", likes=600)]
        assert [t.id for t in sort_by(tweets, "likes")] == ["b", "c", "a"]

    def test_stable_for_equal_values(self):
        tweets = [make_tweet("a", impressions=5), make_tweet("b", impressions=7), make_tweet("c", impressions=5)]
        assert [t.id for t in sort_by(tweets, "impressions")] == ["b", "a", "c"]

    def test_retweets_metric(self):
        tweets = [make_tweet("a", retweets=1), make_tweet("b", retweets=3)]
        assert [t.id for t in sort_by(tweets, "retweets")] == ["b", "a"]

    def test_does_not_mutate_input(self):
        tweets = [make_tweet("a", likes=1), make_tweet("b", likes=2)]
        sort_by(tweets)
        assert [t.id for t in tweets] == ["a", "b"]

    def test_unknown_metric(self):
        with pytest.raises(ValueError):
            sort_by([make_tweet("a")], "followers")


class TestFilterEngagement:
    def test_min_likes(self):
        tweets = [make_tweet("a", likes=10), make_tweet("b", likes=600), make_tweet("c", likes=500)]
        assert [t.id for t in filter_engagement(tweets, min_likes=500)] == ["b", "c"]

    def test_all_thresholds_must_hold(self):
        tweets = [
            make_tweet("a", likes=100, impressions=10),
            make_tweet("b", likes=100, impressions=1000),
            make_tweet("c", likes=1, impressions=1000),
        ]
        result = filter_engagement(tweets, min_likes=50, min_impressions=500)
        assert [t.id for t in result] == ["b"]

    def test_no_thresholds_is_identity(self):
        tweets = [make_tweet("a"), make_tweet("b", likes=3)]
        assert filter_engagement(tweets) == tweets
