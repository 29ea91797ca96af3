# tests/test_cache.py

import asyncio

from tasksync.services.cache import ResponseCache, sweep_periodically


def test_miss_then_hit(cache):
    assert cache.get("alice") is None

    cache.set("alice", [{"id": 1}])

    assert cache.get("alice") == [{"id": 1}]


def test_entry_expires_once_age_reaches_ttl(cache, clock):
    cache.set("alice", ["tasks"])

    clock.advance(59.9)
    assert cache.get("alice") == ["tasks"]

    clock.advance(0.1)
    assert cache.get("alice") is None
    assert "alice" not in cache


def test_invalidate_only_touches_that_user(cache):
    cache.set("alice", ["a"])
    cache.set("bob", ["b"])

    cache.invalidate("alice")
    cache.invalidate(None)

    assert cache.get("alice") is None
    assert cache.get("bob") == ["b"]


def test_set_refreshes_timestamp(cache, clock):
    cache.set("alice", ["old"])
    clock.advance(50)
    cache.set("alice", ["new"])
    clock.advance(50)

    assert cache.get("alice") == ["new"]


def test_sweep_removes_only_expired_entries(cache, clock):
    cache.set("alice", ["a"])
    clock.advance(30)
    cache.set("bob", ["b"])
    clock.advance(31)

    removed = cache.sweep()

    assert removed == 1
    assert "alice" not in cache
    assert "bob" in cache
    assert len(cache) == 1


def test_background_sweep_evicts_expired_entries(clock):
    cache = ResponseCache(ttl_seconds=10, clock=clock)
    cache.set("alice", ["a"])
    clock.advance(11)

    async def run():
        sweeper = asyncio.create_task(sweep_periodically(cache, 0.01))
        await asyncio.sleep(0.1)
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass

    asyncio.run(run())

    # raw membership, not get(), so only the sweeper could have removed it
    assert "alice" not in cache
