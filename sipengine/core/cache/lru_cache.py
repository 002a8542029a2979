"""
Bounded LRU cache.

OrderedDict хранит порядок последнего обращения: get/set переносят ключ
в конец, при переполнении вытесняется первый (least recently touched).
"""

from collections import OrderedDict
from typing import Generic, NamedTuple, Optional, TypeVar

from sipengine.core.math.numerical_safeguards import safe_divide

K = TypeVar("K")
V = TypeVar("V")


class CacheStats(NamedTuple):
    """Снимок счётчиков кэша."""

    size: int
    capacity: int
    hits: int
    misses: int
    evictions: int

    @property
    def hit_rate(self) -> float:
        return safe_divide(float(self.hits), float(self.hits + self.misses))


class LRUCache(Generic[K, V]):
    """
    LRU cache фиксированной ёмкости.

    Args:
        capacity: Максимальное число записей (>= 1)

    Raises:
        ValueError: если capacity < 1

    Examples:
        >>> cache = LRUCache(2)
        >>> cache.set("a", 1)
        >>> cache.set("b", 2)
        >>> cache.get("a")
        1
        >>> cache.set("c", 3)  # вытесняет "b"
        >>> "b" in cache
        False
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._entries: OrderedDict[K, V] = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: K) -> Optional[V]:
        if key not in self._entries:
            self._misses += 1
            return None
        self._entries.move_to_end(key)
        self._hits += 1
        return self._entries[key]

    def set(self, key: K, value: V) -> None:
        if key in self._entries:
            self._entries.move_to_end(key)
        elif len(self._entries) >= self._capacity:
            self._entries.popitem(last=False)
            self._evictions += 1
        self._entries[key] = value

    def clear(self) -> None:
        self._entries.clear()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def stats(self) -> CacheStats:
        return CacheStats(
            size=len(self._entries),
            capacity=self._capacity,
            hits=self._hits,
            misses=self._misses,
            evictions=self._evictions,
        )

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
