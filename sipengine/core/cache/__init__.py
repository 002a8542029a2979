"""
Bounded memoization layer owned by the engine.
"""

from sipengine.core.cache.lru_cache import CacheStats, LRUCache
from sipengine.core.cache.memo import (
    BINARY_EXPONENTIATION_THRESHOLD,
    MAX_GROWTH_TICKS,
    CacheConfig,
    MemoCache,
    binary_pow,
    compound_growth,
    make_key,
    memoized,
    memoized_pow,
    sanitize_ticks,
)

__all__ = [
    # LRU
    "CacheStats",
    "LRUCache",
    # Memoization
    "BINARY_EXPONENTIATION_THRESHOLD",
    "MAX_GROWTH_TICKS",
    "CacheConfig",
    "MemoCache",
    "binary_pow",
    "compound_growth",
    "make_key",
    "memoized",
    "memoized_pow",
    "sanitize_ticks",
]
