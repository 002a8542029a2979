"""
Memoization Layer — кэшированные степени и compound growth.

MemoCache — набор именованных LRU кэшей (pow, growth, economy, format),
время жизни которого привязано к владельцу (EconomyEngine). Глобального
кэша на уровне модуля нет.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Кэш никогда не меняет результат: memoized(f) == f()
2. Любой сбой кэша → WARNING и прямое вычисление
3. compound_growth: ticks <= порога → прямая (мемоизированная) степень,
   выше → binary exponentiation, математически тот же результат
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Final, Optional, TypeVar

from sipengine.core.cache.lru_cache import CacheStats, LRUCache
from sipengine.core.math.numerical_safeguards import clamp_exponent
from sipengine.core.numbers.conversion import from_any
from sipengine.core.numbers.numeric_value import NumericValue
from sipengine.errors import CacheError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

POW_CACHE_CAPACITY: Final[int] = 200
GROWTH_CACHE_CAPACITY: Final[int] = 500
ECONOMY_CACHE_CAPACITY: Final[int] = 500
FORMAT_CACHE_CAPACITY: Final[int] = 300

# Выше порога compound_growth переключается на binary exponentiation
BINARY_EXPONENTIATION_THRESHOLD: Final[int] = 1000

# Верхняя граница числа тиков одного вызова compound_growth
MAX_GROWTH_TICKS: Final[int] = 1_000_000


@dataclass(frozen=True)
class CacheConfig:
    """Конфигурация слоя мемоизации."""

    pow_capacity: int = POW_CACHE_CAPACITY
    growth_capacity: int = GROWTH_CACHE_CAPACITY
    economy_capacity: int = ECONOMY_CACHE_CAPACITY
    format_capacity: int = FORMAT_CACHE_CAPACITY
    binary_exponentiation_threshold: int = BINARY_EXPONENTIATION_THRESHOLD
    max_growth_ticks: int = MAX_GROWTH_TICKS


class MemoCache:
    """
    Набор LRU кэшей движка.

    Attributes:
        pow: memoized_pow, ключ "base:exponent"
        growth: compound_growth
        economy: экономические формулы
        format: строки отображения
    """

    def __init__(self, config: Optional[CacheConfig] = None) -> None:
        self.config = config or CacheConfig()
        self.pow: LRUCache[str, NumericValue] = LRUCache(self.config.pow_capacity)
        self.growth: LRUCache[str, NumericValue] = LRUCache(self.config.growth_capacity)
        self.economy: LRUCache[str, Any] = LRUCache(self.config.economy_capacity)
        self.format: LRUCache[str, str] = LRUCache(self.config.format_capacity)

    def caches(self) -> dict[str, LRUCache]:
        return {
            "pow": self.pow,
            "growth": self.growth,
            "economy": self.economy,
            "format": self.format,
        }

    def clear(self) -> None:
        for cache in self.caches().values():
            cache.clear()

    def stats(self) -> dict[str, CacheStats]:
        return {name: cache.stats() for name, cache in self.caches().items()}


# =============================================================================
# MEMOIZATION
# =============================================================================


def make_key(*parts: Any) -> str:
    """
    Ключ кэша из строковых форм частей.

    Raises:
        CacheError: если str() части бросает
    """
    try:
        return ":".join(str(part) for part in parts)
    except Exception as exc:  # str() произвольного объекта
        raise CacheError(f"cannot build cache key: {exc}") from exc


def memoized(
    cache: Optional[LRUCache[str, T]],
    key_parts: tuple,
    compute: Callable[[], T],
) -> T:
    """
    Вычисление через кэш с fallback на прямой вызов.

    Args:
        cache: LRU кэш (None → всегда прямое вычисление)
        key_parts: Части ключа
        compute: Вычисление без аргументов

    Returns:
        compute() (из кэша или свежий)
    """
    if cache is None:
        return compute()

    try:
        key = make_key(*key_parts)
    except CacheError as exc:
        logger.warning("Cache unavailable (%s), computing directly", exc)
        return compute()

    cached = cache.get(key)
    if cached is not None:
        return cached

    result = compute()
    cache.set(key, result)
    return result


def memoized_pow(
    base: Any,
    exponent: Any,
    cache: Optional[LRUCache[str, NumericValue]] = None,
) -> NumericValue:
    """base ** exponent через pow кэш (ключ "base:exponent")."""
    base_value = from_any(base)
    exponent_value = from_any(exponent)
    return memoized(
        cache,
        (base_value, exponent_value),
        lambda: base_value.pow(exponent_value),
    )


def binary_pow(base: Any, exponent: int) -> NumericValue:
    """
    Square-and-multiply за O(log n) умножений.

    Args:
        base: Основание
        exponent: Целый показатель >= 0

    Raises:
        ValueError: если exponent < 0

    Examples:
        >>> binary_pow(2, 10)
        NumericValue(PLAIN, 1024.0)
    """
    if exponent < 0:
        raise ValueError(f"exponent must be non-negative, got {exponent}")

    result = NumericValue.ONE
    square = from_any(base)
    remaining = int(exponent)

    while remaining > 0:
        if remaining & 1:
            result = result * square
        remaining >>= 1
        if remaining:
            square = square * square

    return result


def sanitize_ticks(ticks: Any, max_ticks: int = MAX_GROWTH_TICKS) -> int:
    """
    Приведение числа тиков к целому в [0, max_ticks].

    Дробные тики округляются вниз; отрицательные, невалидные и слишком
    большие значения ограничиваются с WARNING.
    """
    raw = from_any(ticks)
    count, was_clamped = clamp_exponent(raw.to_float(), max_ticks)
    if was_clamped:
        logger.warning("Growth ticks %s out of range [0, %d], using %d", raw, max_ticks, count)
    return count


def compound_growth(
    base: Any,
    rate: Any,
    ticks: Any,
    memo: Optional[MemoCache] = None,
) -> NumericValue:
    """
    base * rate ** ticks.

    Args:
        base: Начальное значение
        rate: Множитель за тик
        ticks: Число тиков (санитизируется, см. sanitize_ticks)
        memo: Кэши движка (None → без кэширования)

    Returns:
        Значение после ticks тиков
    """
    config = memo.config if memo is not None else CacheConfig()
    count = sanitize_ticks(ticks, config.max_growth_ticks)
    base_value = from_any(base)
    rate_value = from_any(rate)

    def compute() -> NumericValue:
        if count <= config.binary_exponentiation_threshold:
            multiplier = memoized_pow(rate_value, count, memo.pow if memo is not None else None)
        else:
            multiplier = binary_pow(rate_value, count)
        return base_value * multiplier

    return memoized(
        memo.growth if memo is not None else None,
        (base_value, rate_value, count),
        compute,
    )
