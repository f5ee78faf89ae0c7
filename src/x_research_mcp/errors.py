"""Error taxonomy shared by the upstream client, storage and tool dispatcher."""

from __future__ import annotations

from typing import Any


class ToolError(Exception):
    """Base class for errors that are reported back to the caller as a tool result."""

    code = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message, "code": self.code}


class InvalidArgument(ToolError):
    code = "invalid_argument"


class Unauthenticated(ToolError):
    code = "unauthenticated"


class NotFound(ToolError):
    code = "not_found"


class SessionNotFound(NotFound):
    """A stored session id supplied at connect time does not exist."""


class RateLimited(ToolError):
    code = "rate_limited"

    def __init__(self, retry_after: int):
        super().__init__(f"Rate limited. Resets in {retry_after}s")
        self.retry_after = retry_after

    def to_payload(self) -> dict[str, Any]:
        payload = super().to_payload()
        payload["retry_after"] = self.retry_after
        return payload


class UpstreamError(ToolError):
    code = "upstream_error"

    def __init__(self, status: int, body: str = ""):
        excerpt = body[:200]
        if status:
            message = f"X API {status}: {excerpt}"
        else:
            message = f"X API request failed: {excerpt}"
        super().__init__(message)
        self.status = status
        self.body = excerpt


class StorageUnavailable(ToolError):
    code = "storage_unavailable"
