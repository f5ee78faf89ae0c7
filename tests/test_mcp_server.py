"""Tests for the MCP protocol binding, driven through an in-memory client session."""

from __future__ import annotations

import json

import pytest
import pytest_asyncio
from mcp.shared.memory import create_connected_server_and_client_session

from helpers import json_response, raw_tweet
from x_research_mcp.core.session import ConnectionContext
from x_research_mcp.server.dispatcher import ToolDispatcher
from x_research_mcp.server.mcp_server import SERVER_NAME, create_mcp_server
from x_research_mcp.tools.registry import X_TOOL_NAMES

PUBLIC_URL = "https://mcp.example.com"


@pytest_asyncio.fixture
async def make_server(make_x_api, session_repo, interaction_logger):
    async def _make(context: ConnectionContext, routes=None):
        x_api, _ = await make_x_api(routes or {})
        dispatcher = ToolDispatcher(
            context=context,
            x_api=x_api,
            session_repo=session_repo,
            interaction_logger=interaction_logger,
            public_url=PUBLIC_URL,
        )
        return create_mcp_server(dispatcher)

    yield _make

    await interaction_logger.drain()


class TestAnonymousConnection:
    @pytest.mark.asyncio
    async def test_lists_only_setup_session(self, make_server):
        server = await make_server(ConnectionContext())

        async with create_connected_server_and_client_session(server) as client:
            listed = await client.list_tools()

        assert server.name == SERVER_NAME
        assert [t.name for t in listed.tools] == ["setup_session"]

    @pytest.mark.asyncio
    async def test_data_tool_is_an_error_result(self, make_server):
        server = await make_server(ConnectionContext())

        async with create_connected_server_and_client_session(server) as client:
            result = await client.call_tool("search_x", {"query": "$BTC"})

        assert result.isError is True
        assert json.loads(result.content[0].text)["code"] == "unauthenticated"

    @pytest.mark.asyncio
    async def test_setup_session_returns_mcp_url(self, make_server, session_repo):
        server = await make_server(ConnectionContext())

        async with create_connected_server_and_client_session(server) as client:
            result = await client.call_tool("setup_session", {"bearer_token": "AAAA"})

        assert not result.isError
        payload = json.loads(result.content[0].text)
        assert payload["mcp_url"] == f"{PUBLIC_URL}/sse?session_id={payload['session_id']}"
        assert await session_repo.lookup(payload["session_id"]) == "AAAA"


class TestAuthenticatedConnection:
    @pytest.mark.asyncio
    async def test_lists_every_tool(self, make_server):
        server = await make_server(ConnectionContext(bearer_token="tok", session_id="sess-1"))

        async with create_connected_server_and_client_session(server) as client:
            listed = await client.list_tools()

        assert [t.name for t in listed.tools] == ["setup_session", *X_TOOL_NAMES]

    @pytest.mark.asyncio
    async def test_invalid_arguments_reach_the_tool(self, make_server):
        server = await make_server(ConnectionContext(bearer_token="tok", session_id="sess-1"))

        async with create_connected_server_and_client_session(server) as client:
            result = await client.call_tool("search_x", {"query": "ai", "limit": "lots"})

        assert result.isError is True
        assert json.loads(result.content[0].text)["code"] == "invalid_argument"

    @pytest.mark.asyncio
    async def test_get_tweet(self, make_server):
        server = await make_server(
            ConnectionContext(bearer_token="tok", session_id="sess-1"),
            {"/tweets/42": [json_response({"data": raw_tweet("42")})]},
        )

        async with create_connected_server_and_client_session(server) as client:
            result = await client.call_tool("get_tweet", {"tweet_id": "42"})

        assert not result.isError
        assert json.loads(result.content[0].text)["tweet"]["id"] == "42"
