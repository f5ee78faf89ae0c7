"""Shared types and enumerations."""

from __future__ import annotations

from enum import StrEnum


class ResolutionMode(StrEnum):
    STORED = "stored"  # reconnect with a saved session_id
    DIRECT = "direct"  # raw bearer token in the connection URL
    ANONYMOUS = "anonymous"  # setup-only


class SearchSort(StrEnum):
    LIKES = "likes"
    IMPRESSIONS = "impressions"
    RETWEETS = "retweets"
    RECENT = "recent"
