"""
EconomyEngine — фасад движка с собственным кэшем.

Движок владеет MemoCache: время жизни кэша равно времени жизни движка,
глобального состояния нет. Доступ к кэшу сериализован threading.Lock,
поэтому один движок можно разделять между потоками.
"""

import logging
import random
import threading
from typing import Any, Optional

from sipengine.config import EngineConfig
from sipengine.core.cache.lru_cache import CacheStats
from sipengine.core.cache.memo import MemoCache, compound_growth, memoized, memoized_pow
from sipengine.core.domain.economy import CostQuote, ProductionSnapshot
from sipengine.core.domain.purchases import PurchaseKind
from sipengine.core.domain.resource_counters import ResourceCounters
from sipengine.core.economy import formulas
from sipengine.core.numbers.conversion import from_any
from sipengine.core.numbers.formatting import DISPLAY_FRACTION_DIGITS, format_numeric
from sipengine.core.numbers.numeric_value import NumericValue

logger = logging.getLogger(__name__)


class EconomyEngine:
    """
    Кэширующий фасад над экономическими формулами.

    Результаты идентичны прямым вызовам formulas.*: кэш влияет только
    на скорость.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()
        self._memo = MemoCache(self.config.cache)
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Степени и рост
    # -------------------------------------------------------------------------

    def memoized_pow(self, base: Any, exponent: Any) -> NumericValue:
        with self._lock:
            return memoized_pow(base, exponent, self._memo.pow)

    def compound_growth(self, base: Any, rate: Any, ticks: Any) -> NumericValue:
        with self._lock:
            return compound_growth(base, rate, ticks, self._memo)

    # -------------------------------------------------------------------------
    # Стоимость
    # -------------------------------------------------------------------------

    def quote_cost(self, owned_count: Any, base_cost: Any, scaling_factor: Any) -> CostQuote:
        owned, base, scaling = from_any(owned_count), from_any(base_cost), from_any(scaling_factor)
        ceiling = self.config.economy.purchase_exponent_ceiling
        with self._lock:
            return memoized(
                self._memo.economy,
                ("quote", owned, base, scaling, ceiling),
                lambda: formulas.quote_cost(owned, base, scaling, ceiling),
            )

    def purchase_cost(self, owned_count: Any, base_cost: Any, scaling_factor: Any) -> NumericValue:
        return self.quote_cost(owned_count, base_cost, scaling_factor).price

    def quote_purchase(self, kind: PurchaseKind, counters: ResourceCounters) -> CostQuote:
        """
        Котировка покупки по каталогу движка.

        Raises:
            KeyError: если вида покупки нет в каталоге
        """
        definition = self.config.upgrades[kind]
        owned = getattr(counters, definition.counter)
        ceiling = self.config.economy.purchase_exponent_ceiling
        with self._lock:
            return memoized(
                self._memo.economy,
                ("upgrade", kind.value, owned),
                lambda: formulas.quote_upgrade(definition, owned, ceiling),
            )

    # -------------------------------------------------------------------------
    # Производство
    # -------------------------------------------------------------------------

    def unit_production(
        self,
        count: Any,
        base_per_unit: Any,
        upgrade_level: Any = 0,
        upgrade_per_level: Any = 0,
    ) -> NumericValue:
        economy = self.config.economy
        parts = tuple(from_any(v) for v in (count, base_per_unit, upgrade_level, upgrade_per_level))
        with self._lock:
            return memoized(
                self._memo.economy,
                ("unit",) + parts,
                lambda: formulas.unit_production(
                    *parts,
                    soft_cap_threshold=economy.soft_cap_threshold,
                    soft_cap_exponent=economy.soft_cap_exponent,
                ),
            )

    def aggregate_production(
        self, count_a: Any, production_a: Any, count_b: Any, production_b: Any
    ) -> NumericValue:
        economy = self.config.economy
        parts = tuple(from_any(v) for v in (count_a, production_a, count_b, production_b))
        with self._lock:
            return memoized(
                self._memo.economy,
                ("aggregate",) + parts,
                lambda: formulas.aggregate_production(
                    *parts, economy.synergy_threshold, economy.synergy_cap
                ),
            )

    def output_per_cycle(self, total_production: Any) -> NumericValue:
        economy = self.config.economy
        total = from_any(total_production)
        with self._lock:
            return memoized(
                self._memo.economy,
                ("output", total),
                lambda: formulas.output_per_cycle(
                    economy.base_output_per_cycle, total, economy.diminishing_returns_knee
                ),
            )

    def recalc_production(self, counters: ResourceCounters) -> ProductionSnapshot:
        key = (
            "production",
            counters.straws,
            counters.cups,
            counters.wider_straws,
            counters.better_cups,
            counters.suctions,
            counters.faster_drinks,
            counters.critical_clicks,
        )
        with self._lock:
            return memoized(
                self._memo.economy,
                key,
                lambda: formulas.recalc_production(counters, self.config.economy),
            )

    # -------------------------------------------------------------------------
    # Клик, уровень, офлайн
    # -------------------------------------------------------------------------

    def click(
        self, counters: ResourceCounters, rng: Optional[random.Random] = None
    ) -> formulas.ClickOutcome:
        """Исход клика по бонусу и шансу крита из текущего снимка производства."""
        production = self.recalc_production(counters)
        economy = self.config.economy
        return formulas.compute_click(
            economy.base_click_value,
            production.click_bonus,
            production.critical_chance,
            economy.critical_click_multiplier,
            rng=rng,
        )

    def level_up_gain(self, counters: ResourceCounters) -> NumericValue:
        """Награда за повышение уровня при текущем выходе за цикл."""
        production = self.recalc_production(counters)
        return formulas.level_up_gain(
            production.output_per_cycle, self.config.economy.level_up_sips_multiplier
        )

    def offline_progress(
        self, counters: ResourceCounters, elapsed_ms: float
    ) -> formulas.OfflineProgress:
        """Заработок за время отсутствия при текущих выходе и длительности цикла."""
        production = self.recalc_production(counters)
        economy = self.config.economy
        return formulas.offline_progress(
            elapsed_ms,
            production.output_per_cycle,
            production.drink_rate_ms,
            economy.max_offline_ms,
            economy.min_offline_ms,
            economy.offline_efficiency,
        )

    # -------------------------------------------------------------------------
    # Отображение
    # -------------------------------------------------------------------------

    def format(self, value: Any, precision: int = DISPLAY_FRACTION_DIGITS) -> str:
        numeric = from_any(value)
        with self._lock:
            return memoized(
                self._memo.format,
                (numeric, precision),
                lambda: format_numeric(numeric, precision),
            )

    # -------------------------------------------------------------------------
    # Кэш
    # -------------------------------------------------------------------------

    def clear_cache(self) -> None:
        with self._lock:
            self._memo.clear()
        logger.debug("Engine caches cleared")

    def cache_stats(self) -> dict[str, CacheStats]:
        with self._lock:
            return self._memo.stats()
