"""Abstract tool interface and argument helpers for MCP tools."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from mcp import types

from x_research_mcp.errors import InvalidArgument, Unauthenticated

if TYPE_CHECKING:
    from x_research_mcp.services.x_api import XApiService


class Tool(ABC):
    """Base class for all MCP-callable tools."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name exposed to the MCP client."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description for the assistant."""
        ...

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema dict describing accepted parameters."""
        ...

    @abstractmethod
    async def execute(self, **kwargs: Any) -> dict[str, Any]:
        """Run the tool and return a JSON-serialisable payload.

        Failures are raised as ToolError subclasses.
        """
        ...

    def to_mcp_tool(self) -> types.Tool:
        """Serialize to the MCP tool definition."""
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


class XTool(Tool):
    """A tool that calls the X API with the connection's bearer token."""

    def __init__(self, x_api: XApiService, bearer_token: str):
        if not bearer_token:
            raise Unauthenticated("A bearer token is required for X tools")
        self._x_api = x_api
        self._bearer_token = bearer_token


# ── argument helpers ────────────────────────────────────────────


def string_arg(kwargs: dict[str, Any], name: str, *, required: bool = False) -> str | None:
    value = kwargs.get(name)
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise InvalidArgument(f"{name} is required")
        return None
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise InvalidArgument(f"{name} must be a string")
    return str(value).strip()


def int_arg(
    kwargs: dict[str, Any],
    name: str,
    default: int | None = None,
    *,
    minimum: int | None = None,
) -> int | None:
    value = kwargs.get(name)
    if value is None:
        return default
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidArgument(f"{name} must be an integer")
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise InvalidArgument(f"{name} must be an integer") from None
    elif not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer")
    if minimum is not None and value < minimum:
        raise InvalidArgument(f"{name} must be at least {minimum}")
    return value


def bool_arg(kwargs: dict[str, Any], name: str, default: bool = False) -> bool:
    value = kwargs.get(name)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise InvalidArgument(f"{name} must be a boolean")
    return value


def tweet_id_arg(kwargs: dict[str, Any], name: str = "tweet_id") -> str:
    tweet_id = string_arg(kwargs, name, required=True)
    if not (tweet_id.isascii() and tweet_id.isdigit()):
        raise InvalidArgument(f"{name} must be a numeric tweet ID")
    return tweet_id
