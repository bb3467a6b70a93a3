"""Bounded insertion-ordered (FIFO) cache."""

from collections import OrderedDict
from typing import Callable, Generic, Hashable, List, Optional, TypeVar

from orae.services.logging_service import LoggingService


K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class FifoCache(Generic[K, V]):
    """Cache that evicts the oldest-inserted entry once capacity is reached.

    Reads never refresh an entry's position, so eviction order is insertion
    order and not access recency. Insert and evict happen inside a single
    call with no callbacks in between, so a re-entrant caller can never
    observe a half-updated cache.
    """

    def __init__(self, capacity: int, name: str = "cache") -> None:
        """Initialize the cache.

        Args:
            capacity: Maximum number of live entries (must be >= 1).
            name: Name used in log messages.
        """
        if capacity < 1:
            raise ValueError(f"Cache capacity must be at least 1, got {capacity}")
        self._capacity = capacity
        self._name = name
        self._entries: "OrderedDict[K, V]" = OrderedDict()

    @property
    def capacity(self) -> int:
        """Maximum number of live entries."""
        return self._capacity

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def keys(self) -> List[K]:
        """Get the cached keys, oldest first.

        Returns:
            List of keys in insertion order.
        """
        return list(self._entries.keys())

    def get(self, key: K) -> Optional[V]:
        """Get a cached value without touching its eviction position.

        Args:
            key: Cache key.

        Returns:
            Cached value, or None on a miss.
        """
        return self._entries.get(key)

    def put(self, key: K, value: V) -> None:
        """Store a value, evicting the oldest entry first if the cache is full.

        Re-storing an existing key replaces its value and keeps its position.

        Args:
            key: Cache key.
            value: Value to store.
        """
        if key not in self._entries and len(self._entries) >= self._capacity:
            evicted_key, _ = self._entries.popitem(last=False)
            LoggingService.get_instance().debug(f"{self._name}: evicted {evicted_key!r}")
        self._entries[key] = value

    def get_or_create(self, key: K, factory: Callable[[], V]) -> V:
        """Get a cached value, building and storing it on a miss.

        If the factory raises, nothing is stored and the exception propagates.

        Args:
            key: Cache key.
            factory: Zero-argument callable producing the value.

        Returns:
            The cached or newly built value.
        """
        if key in self._entries:
            LoggingService.get_instance().debug(f"{self._name}: hit {key!r}")
            return self._entries[key]

        LoggingService.get_instance().debug(f"{self._name}: miss {key!r}")
        value = factory()
        self.put(key, value)
        return value

    def clear(self) -> None:
        """Remove every entry."""
        self._entries.clear()
