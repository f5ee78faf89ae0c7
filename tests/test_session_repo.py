"""Tests for SessionRepository."""

from __future__ import annotations

import re

import pytest

from x_research_mcp.errors import StorageUnavailable
from x_research_mcp.storage.database import Database
from x_research_mcp.storage.session_repo import SessionRepository

UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


@pytest.mark.asyncio
async def test_create_then_lookup(session_repo):
    session_id = await session_repo.create("AAAA-token")
    assert UUID_PATTERN.match(session_id)
    assert await session_repo.lookup(session_id) == "AAAA-token"


@pytest.mark.asyncio
async def test_lookup_unknown_returns_none(session_repo):
    assert await session_repo.lookup("nonexistent-id") is None


@pytest.mark.asyncio
async def test_each_create_is_a_new_session(session_repo):
    first = await session_repo.create("same-token")
    second = await session_repo.create("same-token")
    assert first != second
    assert await session_repo.count() == 2


@pytest.mark.asyncio
async def test_touch_updates_last_used(session_repo):
    session_id = await session_repo.create("tok")
    before = await session_repo.get(session_id)
    await session_repo.touch(session_id)
    after = await session_repo.get(session_id)
    assert after.last_used_at >= before.last_used_at
    assert after.created_at == before.created_at


@pytest.mark.asyncio
async def test_touch_unknown_session_is_harmless(session_repo):
    await session_repo.touch("nonexistent-id")


@pytest.mark.asyncio
async def test_revoke(session_repo):
    session_id = await session_repo.create("tok")
    assert await session_repo.revoke(session_id) is True
    assert await session_repo.lookup(session_id) is None
    assert await session_repo.revoke(session_id) is False


@pytest.mark.asyncio
async def test_uninitialized_database_raises_storage_unavailable(tmp_path):
    repo = SessionRepository(Database(str(tmp_path / "never-opened.db")))
    with pytest.raises(StorageUnavailable):
        await repo.lookup("anything")


@pytest.mark.asyncio
async def test_schema_init_is_idempotent(tmp_path):
    path = str(tmp_path / "twice.db")
    first = Database(path)
    await first.initialize()
    session_id = await SessionRepository(first).create("tok")
    await first.close()

    second = Database(path)
    await second.initialize()
    assert await SessionRepository(second).lookup(session_id) == "tok"
    await second.close()
