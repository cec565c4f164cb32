"""Unit tests for the in-memory gateway (wellness/db/gateway.py)"""
import asyncio
import pytest

from wellness.db.gateway import InMemoryGateway, PersistenceGateway
from wellness.exceptions import QueryError, StorageError


# ============================================================================
# CRUD Tests
# ============================================================================

@pytest.mark.asyncio
async def test_insert_assigns_ids(gateway):
    row = await gateway.insert("user_rewards", {"user_id": "u", "claimed": False})

    assert row["id"]
    assert gateway.rows("user_rewards") == [row]


@pytest.mark.asyncio
async def test_progress_rows_keyed_by_user(gateway):
    row = await gateway.insert("user_progress", {"user_id": "u", "level": 1})

    assert "id" not in row


@pytest.mark.asyncio
async def test_get_and_select_filter_on_all_columns(gateway):
    await gateway.insert("user_rewards", {"user_id": "u", "claimed": False})
    await gateway.insert("user_rewards", {"user_id": "u", "claimed": True})
    await gateway.insert("user_rewards", {"user_id": "other", "claimed": False})

    rows = await gateway.select("user_rewards", {"user_id": "u", "claimed": False})
    missing = await gateway.get("user_rewards", {"user_id": "nobody"})

    assert len(rows) == 1
    assert missing is None


@pytest.mark.asyncio
async def test_select_keeps_insertion_order(gateway):
    for badge_id in ("first_task", "streak_starter", "level_up"):
        await gateway.insert("user_badges", {"user_id": "u", "badge_id": badge_id})

    rows = await gateway.select("user_badges", {"user_id": "u"})

    assert [r["badge_id"] for r in rows] == ["first_task", "streak_starter", "level_up"]


@pytest.mark.asyncio
async def test_update_is_partial(gateway):
    await gateway.insert("user_progress", {"user_id": "u", "level": 1, "experience_points": 0})

    await gateway.update("user_progress", {"user_id": "u"}, {"experience_points": 40})

    assert gateway.rows("user_progress") == [{"user_id": "u", "level": 1, "experience_points": 40}]


@pytest.mark.asyncio
async def test_rows_are_copies(gateway):
    """Test callers cannot mutate stored state through returned rows"""
    await gateway.insert("user_rewards", {"user_id": "u", "reward_data": {"amount": 10}})

    row = await gateway.get("user_rewards", {"user_id": "u"})
    row["reward_data"]["amount"] = 999

    assert gateway.rows("user_rewards")[0]["reward_data"]["amount"] == 10


# ============================================================================
# Constraint & Failure Tests
# ============================================================================

@pytest.mark.asyncio
async def test_duplicate_badge_rejected(gateway):
    await gateway.insert("user_badges", {"user_id": "u", "badge_id": "first_task"})

    with pytest.raises(QueryError):
        await gateway.insert("user_badges", {"user_id": "u", "badge_id": "first_task"})

    await gateway.insert("user_badges", {"user_id": "other", "badge_id": "first_task"})
    assert len(gateway.rows("user_badges")) == 2


@pytest.mark.asyncio
async def test_duplicate_progress_rejected(gateway):
    await gateway.insert("user_progress", {"user_id": "u"})

    with pytest.raises(QueryError):
        await gateway.insert("user_progress", {"user_id": "u"})


@pytest.mark.asyncio
async def test_fail_next_fires_once(gateway):
    gateway.fail_next("select", "user_badges")

    with pytest.raises(StorageError) as exc_info:
        await gateway.select("user_badges", {"user_id": "u"})

    assert exc_info.value.table == "user_badges"
    assert await gateway.select("user_badges", {"user_id": "u"}) == []


@pytest.mark.asyncio
async def test_fail_next_custom_error(gateway):
    error = QueryError("permission denied", table="user_rewards")
    gateway.fail_next("insert", "user_rewards", error)

    with pytest.raises(QueryError) as exc_info:
        await gateway.insert("user_rewards", {"user_id": "u"})

    assert exc_info.value is error
    assert gateway.rows("user_rewards") == []


@pytest.mark.asyncio
async def test_calls_recorded(gateway):
    await gateway.get("user_progress", {"user_id": "u"})
    await gateway.insert("user_progress", {"user_id": "u"})

    assert gateway.calls == [("get", "user_progress"), ("insert", "user_progress")]

    gateway.clear()

    assert gateway.calls == []
    assert gateway.rows("user_progress") == []


@pytest.mark.asyncio
async def test_calls_yield_to_event_loop(gateway):
    """Test concurrent callers interleave between gateway calls"""
    order = []

    async def reader(name):
        order.append(f"{name}-start")
        await gateway.get("user_progress", {"user_id": "u"})
        order.append(f"{name}-end")

    await asyncio.gather(reader("a"), reader("b"))

    assert order == ["a-start", "b-start", "a-end", "b-end"]


def test_is_a_persistence_gateway():
    assert isinstance(InMemoryGateway(), PersistenceGateway)
