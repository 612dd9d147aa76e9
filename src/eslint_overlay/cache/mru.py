# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Bounded most-recently-used cache.

Entries are kept in access order; reading or writing a key marks it as the
most recently used one and inserting past capacity evicts the least recently
used entry.
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Hashable, Iterator
from typing import Generic, TypeVar

from ..constants import LIBRARY_CACHE_SIZE

KeyT = TypeVar("KeyT", bound=Hashable)
ValueT = TypeVar("ValueT")


class MruCache(Generic[KeyT, ValueT]):
    """Map keys to values, holding at most ``maxsize`` entries."""

    def __init__(self, maxsize: int = LIBRARY_CACHE_SIZE) -> None:
        """Initialise an empty cache.

        Args:
            maxsize: Maximum number of entries retained before eviction.

        Raises:
            ValueError: If ``maxsize`` is not positive.
        """

        if maxsize <= 0:
            raise ValueError("maxsize must be a positive integer")
        self._maxsize = maxsize
        self._store: OrderedDict[KeyT, ValueT] = OrderedDict()

    def has(self, key: KeyT) -> bool:
        """Return ``True`` when ``key`` is cached, without touching its recency."""

        return key in self._store

    def get(self, key: KeyT) -> ValueT | None:
        """Return the value cached for ``key`` and mark it most recently used.

        Args:
            key: Cache key to look up.

        Returns:
            ValueT | None: Cached value, or ``None`` when ``key`` is absent.
        """

        if key not in self._store:
            return None
        self._store.move_to_end(key)
        return self._store[key]

    def set(self, key: KeyT, value: ValueT) -> None:
        """Store ``value`` under ``key``, evicting the oldest entry on overflow."""

        self._store[key] = value
        self._store.move_to_end(key)
        if len(self._store) > self._maxsize:
            self._store.popitem(last=False)

    def __contains__(self, key: object) -> bool:
        return key in self._store

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[KeyT]:
        return iter(self._store)


__all__ = ["MruCache"]
