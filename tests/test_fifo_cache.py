"""Tests for the FIFO cache."""

import pytest

from orae.utils.fifo_cache import FifoCache


def test_evicts_oldest_inserted_first():
    cache = FifoCache(3)
    for key in "abc":
        cache.put(key, key.upper())
    cache.put("d", "D")

    assert cache.keys() == ["b", "c", "d"]
    assert "a" not in cache
    assert len(cache) == 3


def test_reads_do_not_refresh_position():
    cache = FifoCache(2)
    cache.put("a", 1)
    cache.put("b", 2)
    assert cache.get("a") == 1
    assert cache.get_or_create("a", lambda: 99) == 1
    cache.put("c", 3)

    assert cache.keys() == ["b", "c"]


def test_get_or_create_builds_once():
    calls = []
    cache = FifoCache(2)

    def factory():
        calls.append(1)
        return object()

    first = cache.get_or_create("k", factory)
    second = cache.get_or_create("k", factory)

    assert first is second
    assert len(calls) == 1


def test_failing_factory_stores_nothing():
    cache = FifoCache(2)

    def factory():
        raise ValueError("boom")

    with pytest.raises(ValueError):
        cache.get_or_create("k", factory)
    assert len(cache) == 0


def test_replacing_existing_key_keeps_size():
    cache = FifoCache(2)
    cache.put("a", 1)
    cache.put("b", 2)
    cache.put("a", 3)

    assert cache.keys() == ["a", "b"]
    assert cache.get("a") == 3


def test_invalid_capacity():
    with pytest.raises(ValueError):
        FifoCache(0)


def test_clear():
    cache = FifoCache(2)
    cache.put("a", 1)
    cache.clear()
    assert len(cache) == 0
    assert cache.get("a") is None
