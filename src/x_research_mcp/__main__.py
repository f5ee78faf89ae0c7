"""CLI entry point for x-research-mcp."""

from __future__ import annotations

import argparse
import asyncio
import sys

import aiosqlite

from x_research_mcp.app import XResearchApp
from x_research_mcp.config import AppConfig, load_config
from x_research_mcp.errors import StorageUnavailable
from x_research_mcp.log import setup_logging
from x_research_mcp.storage.database import Database
from x_research_mcp.storage.session_repo import SessionRepository


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="x-research-mcp",
        description="Multi-tenant MCP server for X/Twitter research",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    start_parser = subparsers.add_parser("start", help="Start the server")
    check_parser = subparsers.add_parser("config-check", help="Validate configuration")
    revoke_parser = subparsers.add_parser("revoke-session", help="Delete a stored session")
    revoke_parser.add_argument("session_id", help="Session ID to revoke")

    for sub in (start_parser, check_parser, revoke_parser):
        sub.add_argument("-c", "--config", default="config.yaml", help="Path to config file")
        sub.add_argument("-e", "--env", default=".env", help="Path to .env file")

    args = parser.parse_args()

    if args.command is None:
        # Default to start
        args.command = "start"
        args.config = "config.yaml"
        args.env = ".env"

    if args.command == "config-check":
        _check_config(args.config, args.env)
    elif args.command == "revoke-session":
        _revoke_session(args.config, args.env, args.session_id)
    elif args.command == "start":
        _run(args.config, args.env)


def _load_or_exit(config_path: str, env_path: str) -> AppConfig:
    try:
        return load_config(config_path, env_path)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Copy config.example.yaml to config.yaml first")
        sys.exit(1)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


def _check_config(config_path: str, env_path: str) -> None:
    """Validate configuration and print summary."""
    config = _load_or_exit(config_path, env_path)
    print(f"Configuration valid: {config_path}")
    print(f"  Listen     : {config.server.host}:{config.server.port}")
    print(f"  Public URL : {config.public_url or '(not set - session URLs will be relative)'}")
    print(f"  Storage    : {config.storage.db_path}")
    print(f"  Upstream   : {config.upstream.base_url}")
    print(f"  Page delay : {config.upstream.page_delay}s")
    print(f"  Timeout    : {config.upstream.timeout}s")


def _revoke_session(config_path: str, env_path: str, session_id: str) -> None:
    """Delete a stored session so its URL stops working."""
    config = _load_or_exit(config_path, env_path)
    setup_logging(config.log_level)

    async def _revoke() -> tuple[bool, int]:
        db = Database(config.storage.db_path)
        await db.initialize()
        try:
            repo = SessionRepository(db)
            return await repo.revoke(session_id), await repo.count()
        finally:
            await db.close()

    try:
        removed, remaining = asyncio.run(_revoke())
    except StorageUnavailable as e:
        print(f"Storage error: {e.message}", file=sys.stderr)
        sys.exit(1)
    except (aiosqlite.Error, OSError) as e:
        print(f"Storage error: {e}", file=sys.stderr)
        sys.exit(1)

    if removed:
        print(f"Session {session_id} revoked. {remaining} stored session(s) remain.")
    else:
        print(f"Session {session_id} not found.", file=sys.stderr)
        sys.exit(1)


def _run(config_path: str, env_path: str) -> None:
    """Load config and start the HTTP server."""
    import uvicorn

    config = _load_or_exit(config_path, env_path)
    setup_logging(config.log_level)

    app = XResearchApp(config)
    # uvicorn handles SIGINT/SIGTERM and runs the lifespan shutdown
    uvicorn.run(
        app.create_asgi_app(),
        host=config.server.host,
        port=config.server.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
