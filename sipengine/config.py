"""
Конфигурация движка.

Каждый слой владеет своей frozen dataclass конфигурацией с defaults из
модульных констант; EngineConfig собирает их вместе и передаётся в
конструкторы (config or EngineConfig()).
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Final, Mapping

from sipengine.core.cache.memo import CacheConfig
from sipengine.core.domain.purchases import DEFAULT_UPGRADES, PurchaseKind, UpgradeDefinition
from sipengine.core.domain.resource_counters import COUNTER_FIELDS
from sipengine.core.economy.formulas import EconomyConfig

# =============================================================================
# SANITIZATION
# =============================================================================

# Выше потолка счётчик считается повреждённым (extended, строковая форма)
SANITY_CEILING: Final[str] = "1e300000"

# Fallback повреждённого счётчика: не ноль, чтобы не заблокировать прогресс
COUNTER_FALLBACK: Final[float] = 1.0

COUNTER_FALLBACKS: Final[Mapping[str, float]] = MappingProxyType(
    {name: COUNTER_FALLBACK for name in COUNTER_FIELDS}
)


@dataclass(frozen=True)
class SanitizationConfig:
    """Конфигурация санитизации счётчиков."""

    sanity_ceiling: str = SANITY_CEILING
    fallbacks: Mapping[str, float] = field(default_factory=lambda: COUNTER_FALLBACKS)
    default_fallback: float = COUNTER_FALLBACK
    check_contract: bool = True


@dataclass(frozen=True)
class EngineConfig:
    """Полная конфигурация движка."""

    economy: EconomyConfig = field(default_factory=EconomyConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    sanitization: SanitizationConfig = field(default_factory=SanitizationConfig)
    upgrades: Mapping[PurchaseKind, UpgradeDefinition] = field(
        default_factory=lambda: DEFAULT_UPGRADES
    )


__all__ = [
    "COUNTER_FALLBACK",
    "COUNTER_FALLBACKS",
    "SANITY_CEILING",
    "CacheConfig",
    "EconomyConfig",
    "EngineConfig",
    "SanitizationConfig",
]
