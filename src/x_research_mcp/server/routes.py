"""HTTP routes: SSE connect, message POST, health and quickstart."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.sse import SseServerTransport
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from x_research_mcp.errors import SessionNotFound, StorageUnavailable
from x_research_mcp.log import get_logger
from x_research_mcp.server.mcp_server import SERVER_NAME, SERVER_VERSION, create_mcp_server
from x_research_mcp.tools.registry import X_TOOL_NAMES

if TYPE_CHECKING:
    from x_research_mcp.app import XResearchApp

logger = get_logger(__name__)

MESSAGES_PATH = "/messages/"


def build_routes(app: XResearchApp) -> list[Route | Mount]:
    sse = SseServerTransport(MESSAGES_PATH)
    public_url = app.config.public_url

    async def handle_sse(request: Request) -> Response:
        try:
            context = await app.resolver.resolve(
                session_id=request.query_params.get("session_id"),
                bearer_token=request.query_params.get("x_bearer_token"),
            )
        except SessionNotFound as e:
            return JSONResponse(
                {
                    "error": e.message,
                    "help": "Connect without parameters and call setup_session to create a new session.",
                },
                status_code=401,
            )
        except StorageUnavailable as e:
            logger.error("session_resolution_failed", error=e.message)
            return JSONResponse(
                {"error": "Session storage is unavailable. Please try again later."},
                status_code=503,
            )

        server = create_mcp_server(app.create_dispatcher(context))
        app.connections.register(context)
        logger.info(
            "sse_connection_opened",
            connection_id=context.connection_id,
            mode=context.mode,
            active=len(app.connections),
        )
        try:
            async with sse.connect_sse(request.scope, request.receive, request._send) as streams:
                await server.run(streams[0], streams[1], server.create_initialization_options())
        finally:
            app.connections.unregister(context.connection_id)
            logger.info(
                "sse_connection_closed",
                connection_id=context.connection_id,
                active=len(app.connections),
            )
        return Response()

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "status": "ok",
                "active_sessions": len(app.connections),
                "server": SERVER_NAME,
                "version": SERVER_VERSION,
            }
        )

    async def index(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "name": "X Research MCP Server",
                "version": SERVER_VERSION,
                "description": "Query X/Twitter data from Claude.ai using your X API bearer token.",
                "quickstart": [
                    "1. In Claude.ai > Settings > Integrations > MCP Servers",
                    f"2. Add server URL: {public_url or 'https://YOUR_SERVER_URL'}/sse",
                    "3. Call the setup_session tool with your X API bearer token",
                    "4. Copy the returned mcp_url and update your Claude.ai MCP server address",
                    "5. Done - your token is saved. You'll never need to enter it again.",
                ],
                "tools": ["setup_session", *X_TOOL_NAMES],
            }
        )

    return [
        Route("/", index, methods=["GET"]),
        Route("/health", health, methods=["GET"]),
        Route("/sse", handle_sse, methods=["GET"]),
        Mount(MESSAGES_PATH, app=sse.handle_post_message),
    ]
