# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the most-recently-used library cache."""

import pytest

from eslint_overlay.cache import MruCache


def test_mru_cache_evicts_least_recently_used() -> None:
    cache: MruCache[str, int] = MruCache(2)
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.get("a") == 1
    cache.set("c", 3)

    assert list(cache) == ["a", "c"]
    assert "b" not in cache
    assert cache.get("b") is None


def test_mru_cache_has_does_not_refresh_recency() -> None:
    cache: MruCache[str, int] = MruCache(2)
    cache.set("a", 1)
    cache.set("b", 2)

    assert cache.has("a")
    cache.set("c", 3)

    assert not cache.has("a")
    assert len(cache) == 2


def test_mru_cache_overwrite_marks_entry_recent() -> None:
    cache: MruCache[str, int] = MruCache(2)
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("a", 10)
    cache.set("c", 3)

    assert cache.get("a") == 10
    assert not cache.has("b")


def test_mru_cache_never_exceeds_capacity() -> None:
    cache: MruCache[int, int] = MruCache()
    for key in range(250):
        cache.set(key, key)

    assert len(cache) == 100
    assert list(cache)[0] == 150


def test_mru_cache_rejects_non_positive_capacity() -> None:
    with pytest.raises(ValueError):
        MruCache(0)
