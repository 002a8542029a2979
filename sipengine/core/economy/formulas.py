"""
Economy Formulas — производство, синергия, diminishing returns, стоимость,
клик, длительность цикла, награда за уровень и офлайн прогресс.

Все функции чистые и тотальные: входы коэрсируются через from_any,
невалидные входы деградируют к "без бонуса" (база без модификаторов),
отрицательные количества считаются нулём.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. apply_soft_cap: тождество до порога, непрерывна и монотонна выше
2. synergy_multiplier строго меньше 1 + cap
3. output_per_cycle монотонно не убывает и конечна для любых конечных входов
4. purchase_cost: показатель ограничен потолком, clamp логируется (WARNING)
"""

import logging
import math
import random
from dataclasses import dataclass
from typing import Any, Final, NamedTuple, Optional

from sipengine.core.domain.economy import CostCurve, CostQuote, ProductionSnapshot
from sipengine.core.domain.purchases import UpgradeDefinition
from sipengine.core.domain.resource_counters import ResourceCounters
from sipengine.core.math.numerical_safeguards import (
    clamp,
    clamp_exponent,
    sanitize_float,
    validate_in_range,
    validate_non_negative,
)
from sipengine.core.numbers.conversion import from_any
from sipengine.core.numbers.numeric_value import NumericValue, maximum, minimum

logger = logging.getLogger(__name__)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Базовое производство за единицу
STRAW_BASE_PER_UNIT: Final[float] = 0.6
CUP_BASE_PER_UNIT: Final[float] = 1.2

# Бонус за уровень апгрейда (доля базы)
WIDER_STRAWS_PER_LEVEL: Final[float] = 0.5
BETTER_CUPS_PER_LEVEL: Final[float] = 0.4

# Базовый выход за цикл
BASE_OUTPUT_PER_CYCLE: Final[float] = 1.0

# Soft cap: выше порога рост сжимается степенью
SOFT_CAP_THRESHOLD: Final[float] = 1e100
SOFT_CAP_EXPONENT: Final[float] = 0.5

# Синергия: оба количества выше порога → бонус, ограниченный cap
SYNERGY_THRESHOLD: Final[float] = 100.0
SYNERGY_CAP: Final[float] = 0.1

# Diminishing returns: выше колена рост логарифмический
DIMINISHING_RETURNS_KNEE: Final[float] = 1e12

# Потолок показателя степени в стоимости покупки
PURCHASE_EXPONENT_CEILING: Final[int] = 1_000_000

# Клик
BASE_CLICK_VALUE: Final[float] = 1.0
SUCTION_CLICK_BONUS: Final[float] = 1.0
CRITICAL_CLICK_MULTIPLIER: Final[float] = 5.0
CRITICAL_CLICK_BASE_CHANCE: Final[float] = 0.001
CRITICAL_CLICK_CHANCE_PER_LEVEL: Final[float] = 0.001

# Цикл: каждый уровень faster_drinks сокращает длительность на долю
DEFAULT_DRINK_RATE_MS: Final[int] = 5000
MIN_DRINK_RATE_MS: Final[int] = 500
FASTER_DRINKS_REDUCTION_PER_LEVEL: Final[float] = 0.1

# Повышение уровня приносит LEVEL_UP_SIPS_MULTIPLIER выходов за цикл
LEVEL_UP_SIPS_MULTIPLIER: Final[float] = 1.0

# Офлайн прогресс
MAX_OFFLINE_MS: Final[int] = 8 * 60 * 60 * 1000
MIN_OFFLINE_MS: Final[int] = 60 * 1000
OFFLINE_EFFICIENCY: Final[float] = 1.0


@dataclass(frozen=True)
class EconomyConfig:
    """Параметры экономических формул."""

    straw_base_per_unit: float = STRAW_BASE_PER_UNIT
    cup_base_per_unit: float = CUP_BASE_PER_UNIT
    wider_straws_per_level: float = WIDER_STRAWS_PER_LEVEL
    better_cups_per_level: float = BETTER_CUPS_PER_LEVEL
    base_output_per_cycle: float = BASE_OUTPUT_PER_CYCLE
    soft_cap_threshold: float = SOFT_CAP_THRESHOLD
    soft_cap_exponent: float = SOFT_CAP_EXPONENT
    synergy_threshold: float = SYNERGY_THRESHOLD
    synergy_cap: float = SYNERGY_CAP
    diminishing_returns_knee: float = DIMINISHING_RETURNS_KNEE
    purchase_exponent_ceiling: int = PURCHASE_EXPONENT_CEILING

    base_click_value: float = BASE_CLICK_VALUE
    suction_click_bonus: float = SUCTION_CLICK_BONUS
    critical_click_multiplier: float = CRITICAL_CLICK_MULTIPLIER
    critical_click_base_chance: float = CRITICAL_CLICK_BASE_CHANCE
    critical_click_chance_per_level: float = CRITICAL_CLICK_CHANCE_PER_LEVEL

    default_drink_rate_ms: int = DEFAULT_DRINK_RATE_MS
    min_drink_rate_ms: int = MIN_DRINK_RATE_MS
    faster_drinks_reduction: float = FASTER_DRINKS_REDUCTION_PER_LEVEL

    level_up_sips_multiplier: float = LEVEL_UP_SIPS_MULTIPLIER

    max_offline_ms: int = MAX_OFFLINE_MS
    min_offline_ms: int = MIN_OFFLINE_MS
    offline_efficiency: float = OFFLINE_EFFICIENCY

    def __post_init__(self) -> None:
        for name in (
            "straw_base_per_unit",
            "cup_base_per_unit",
            "wider_straws_per_level",
            "better_cups_per_level",
            "base_output_per_cycle",
            "synergy_cap",
            "base_click_value",
            "suction_click_bonus",
            "critical_click_multiplier",
            "critical_click_chance_per_level",
            "level_up_sips_multiplier",
            "min_offline_ms",
            "offline_efficiency",
        ):
            validate_non_negative(getattr(self, name), name)
        for name in ("soft_cap_threshold", "synergy_threshold", "diminishing_returns_knee"):
            validate_in_range(getattr(self, name), name, min_value=1.0)
        validate_in_range(self.soft_cap_exponent, "soft_cap_exponent", 0.0, 1.0)
        validate_non_negative(self.purchase_exponent_ceiling, "purchase_exponent_ceiling")
        validate_in_range(self.critical_click_base_chance, "critical_click_base_chance", 0.0, 1.0)
        validate_in_range(self.faster_drinks_reduction, "faster_drinks_reduction", 0.0, 1.0)
        validate_in_range(self.min_drink_rate_ms, "min_drink_rate_ms", min_value=1)
        validate_in_range(
            self.default_drink_rate_ms, "default_drink_rate_ms", min_value=self.min_drink_rate_ms
        )
        validate_in_range(self.max_offline_ms, "max_offline_ms", min_value=self.min_offline_ms)


def _non_negative(value: Any) -> NumericValue:
    numeric = from_any(value)
    if numeric.is_negative:
        return NumericValue.ZERO
    return numeric


# =============================================================================
# ПРОИЗВОДСТВО
# =============================================================================


def per_unit_production(
    base_per_unit: Any,
    upgrade_level: Any = 0,
    upgrade_per_level: Any = 0,
) -> NumericValue:
    """
    Производство одной единицы с учётом апгрейда.

    base * (1 + level * per_level); невалидный уровень → база без бонуса.

    Examples:
        >>> per_unit_production(0.6, 2, 0.5)
        NumericValue(PLAIN, 1.2)
    """
    base = _non_negative(base_per_unit)
    level = _non_negative(upgrade_level)
    per_level = _non_negative(upgrade_per_level)

    if level.is_zero or per_level.is_zero:
        return base

    return base * (NumericValue.ONE + level * per_level)


def apply_soft_cap(
    value: Any,
    threshold: Any = SOFT_CAP_THRESHOLD,
    exponent: float = SOFT_CAP_EXPONENT,
) -> NumericValue:
    """
    Soft cap: value до порога, threshold * (value / threshold) ** exponent выше.

    Args:
        value: Исходное значение
        threshold: Порог начала сжатия
        exponent: Степень сжатия (0, 1]

    Raises:
        ValueError: если exponent вне (0, 1]
    """
    validate_in_range(exponent, "soft_cap_exponent", min_value=0.0, max_value=1.0)
    if exponent == 0.0:
        raise ValueError("soft_cap_exponent must be > 0")

    numeric = from_any(value)
    limit = from_any(threshold)

    if numeric.lte(limit):
        return numeric

    return limit * (numeric / limit).pow(exponent)


def unit_production(
    count: Any,
    base_per_unit: Any,
    upgrade_level: Any = 0,
    upgrade_per_level: Any = 0,
    soft_cap_threshold: Any = SOFT_CAP_THRESHOLD,
    soft_cap_exponent: float = SOFT_CAP_EXPONENT,
) -> NumericValue:
    """
    Производство count единиц: count * per_unit_production, затем soft cap.

    Examples:
        >>> unit_production(5, 0.6)
        NumericValue(PLAIN, 3.0)
    """
    rate = per_unit_production(base_per_unit, upgrade_level, upgrade_per_level)
    raw = _non_negative(count) * rate
    return apply_soft_cap(raw, soft_cap_threshold, soft_cap_exponent)


def synergy_multiplier(
    count_a: Any,
    count_b: Any,
    threshold: Any = SYNERGY_THRESHOLD,
    cap: Any = SYNERGY_CAP,
) -> NumericValue:
    """
    Множитель синергии двух типов производителей.

    1, пока оба количества не превысят threshold; затем
    1 + cap * (1 - threshold / min(a, b)), строго меньше 1 + cap.
    """
    lesser = minimum(_non_negative(count_a), _non_negative(count_b))
    limit = from_any(threshold)

    if lesser.lte(limit):
        return NumericValue.ONE

    return NumericValue.ONE + _non_negative(cap) * (NumericValue.ONE - limit / lesser)


def aggregate_production(
    count_a: Any,
    production_a: Any,
    count_b: Any,
    production_b: Any,
    synergy_threshold: Any = SYNERGY_THRESHOLD,
    synergy_cap: Any = SYNERGY_CAP,
) -> NumericValue:
    """
    (count_a * production_a + count_b * production_b) * synergy.

    Examples:
        >>> 600 < aggregate_production(150, 2, 150, 2).to_float() < 660
        True
    """
    a = _non_negative(count_a)
    b = _non_negative(count_b)
    base = a * _non_negative(production_a) + b * _non_negative(production_b)
    return base * synergy_multiplier(a, b, synergy_threshold, synergy_cap)


def output_per_cycle(
    base_output: Any,
    total_production: Any,
    knee: Any = DIMINISHING_RETURNS_KNEE,
) -> NumericValue:
    """
    Выход за цикл с diminishing returns.

    effective(t) = t для t <= knee, knee * (1 + ln(t / knee)) выше.
    Логарифм считается в Decimal, экспонента не вычисляется никогда,
    поэтому результат конечен при любой конечной магнитуде.
    """
    base = _non_negative(base_output)
    total = _non_negative(total_production)
    limit = from_any(knee)

    if total.lte(limit):
        effective = total
    else:
        effective = limit * (NumericValue.ONE + (total / limit).ln())

    return base + effective


# =============================================================================
# СТОИМОСТЬ
# =============================================================================


def quote_cost(
    owned_count: Any,
    base_cost: Any,
    scaling_factor: Any,
    max_exponent: int = PURCHASE_EXPONENT_CEILING,
) -> CostQuote:
    """
    Котировка экспоненциальной стоимости: base * scaling ** min(owned, max_exponent).

    Args:
        owned_count: Текущее количество
        base_cost: Базовая стоимость
        scaling_factor: Множитель за единицу
        max_exponent: Потолок показателя

    Returns:
        CostQuote с флагом exponent_clamped
    """
    owned = _non_negative(owned_count)
    exponent, was_clamped = clamp_exponent(owned.to_float(), max_exponent)

    if was_clamped:
        logger.warning(
            "Owned count %s exceeds exponent ceiling %d, cost computed at ceiling",
            owned,
            max_exponent,
        )

    base = _non_negative(base_cost)
    scaling = _non_negative(scaling_factor)

    return CostQuote(
        curve=CostCurve.EXPONENTIAL,
        base_cost=base,
        scaling_factor=scaling,
        owned_count=owned,
        effective_exponent=exponent,
        price=base * scaling.pow(exponent),
        exponent_clamped=was_clamped,
    )


def purchase_cost(
    owned_count: Any,
    base_cost: Any,
    scaling_factor: Any,
    max_exponent: int = PURCHASE_EXPONENT_CEILING,
) -> NumericValue:
    """
    Стоимость следующей единицы.

    Examples:
        >>> purchase_cost(0, 5, 1.08)
        NumericValue(PLAIN, 5.0)
    """
    return quote_cost(owned_count, base_cost, scaling_factor, max_exponent).price


def quote_linear_cost(owned_count: Any, base_cost: Any, offset: int = 1) -> CostQuote:
    """
    Котировка линейной стоимости: base * max(owned + offset, 1).

    Множитель не опускается ниже 1: уровень 0 стоит base, а не 0
    (нулевая котировка отклоняется как INVALID_COST).
    """
    owned = _non_negative(owned_count)
    base = _non_negative(base_cost)
    multiplier = maximum(owned + offset, NumericValue.ONE)
    return CostQuote(
        curve=CostCurve.LINEAR,
        base_cost=base,
        scaling_factor=NumericValue.ONE,
        owned_count=owned,
        effective_exponent=0,
        price=base * multiplier,
    )


def linear_upgrade_cost(owned_count: Any, base_cost: Any, offset: int = 1) -> NumericValue:
    return quote_linear_cost(owned_count, base_cost, offset).price


def quote_upgrade(
    definition: UpgradeDefinition,
    owned_count: Any,
    max_exponent: int = PURCHASE_EXPONENT_CEILING,
) -> CostQuote:
    """Котировка по определению покупки (диспетчеризация по кривой)."""
    if definition.curve is CostCurve.LINEAR:
        return quote_linear_cost(owned_count, definition.base_cost, definition.linear_offset)
    return quote_cost(owned_count, definition.base_cost, definition.scaling_factor, max_exponent)


# =============================================================================
# КЛИК
# =============================================================================


class ClickOutcome(NamedTuple):
    gained: NumericValue
    critical: bool


def _level_count(value: Any) -> int:
    """Уровень апгрейда как int в [0, PURCHASE_EXPONENT_CEILING]."""
    level, _ = clamp_exponent(_non_negative(value).to_float(), PURCHASE_EXPONENT_CEILING)
    return level


def suction_click_bonus(suctions: Any, bonus_per_suction: Any = SUCTION_CLICK_BONUS) -> NumericValue:
    """
    Бонус клика: bonus_per_suction * suctions.

    Examples:
        >>> suction_click_bonus(3)
        NumericValue(PLAIN, 3.0)
    """
    return _non_negative(bonus_per_suction) * _non_negative(suctions)


def critical_click_chance(
    critical_clicks: Any,
    base_chance: float = CRITICAL_CLICK_BASE_CHANCE,
    chance_per_level: float = CRITICAL_CLICK_CHANCE_PER_LEVEL,
) -> float:
    """Вероятность крита: base + level * per_level, ограничена [0, 1]."""
    chance = sanitize_float(base_chance) + _level_count(critical_clicks) * sanitize_float(
        chance_per_level
    )
    return clamp(chance, 0.0, 1.0)


def click_value(
    base_click: Any,
    suction_bonus: Any = 0,
    critical: bool = False,
    critical_multiplier: Any = CRITICAL_CLICK_MULTIPLIER,
) -> NumericValue:
    """(base + bonus) * (critical_multiplier если критический клик, иначе 1)."""
    gained = _non_negative(base_click) + _non_negative(suction_bonus)
    if critical:
        return gained * _non_negative(critical_multiplier)
    return gained


def compute_click(
    base_click: Any,
    suction_bonus: Any,
    critical_chance: float,
    critical_multiplier: Any = CRITICAL_CLICK_MULTIPLIER,
    rng: Optional[random.Random] = None,
) -> ClickOutcome:
    """
    Исход клика со случайным критом.

    Args:
        critical_chance: Вероятность крита [0, 1]
        rng: Источник случайности (детерминированные тесты передают seeded Random)
    """
    chance = clamp(sanitize_float(critical_chance), 0.0, 1.0)
    roll = (rng or random).random()
    critical = roll < chance
    return ClickOutcome(
        gained=click_value(base_click, suction_bonus, critical, critical_multiplier),
        critical=critical,
    )


# =============================================================================
# ЦИКЛ, УРОВЕНЬ, ОФЛАЙН
# =============================================================================


def drink_rate(
    faster_drinks: Any,
    base_rate_ms: int = DEFAULT_DRINK_RATE_MS,
    reduction_per_level: float = FASTER_DRINKS_REDUCTION_PER_LEVEL,
    min_rate_ms: int = MIN_DRINK_RATE_MS,
) -> int:
    """
    Длительность цикла: max(min_rate, round(base_rate * (1 - reduction) ** level)).

    Args:
        faster_drinks: Уровень апгрейда скорости
        base_rate_ms: Длительность без апгрейдов
        reduction_per_level: Доля сокращения за уровень [0, 1]
        min_rate_ms: Нижняя граница длительности

    Examples:
        >>> drink_rate(0)
        5000
        >>> drink_rate(2)
        4050
        >>> drink_rate(10_000)
        500
    """
    reduction = clamp(sanitize_float(reduction_per_level), 0.0, 1.0)
    factor = (1.0 - reduction) ** _level_count(faster_drinks)
    return max(int(min_rate_ms), round(sanitize_float(base_rate_ms) * factor))


def level_up_gain(
    sips_per_cycle: Any, multiplier: Any = LEVEL_UP_SIPS_MULTIPLIER
) -> NumericValue:
    """Награда за повышение уровня: multiplier * выход за цикл."""
    return _non_negative(multiplier) * _non_negative(sips_per_cycle)


class OfflineProgress(NamedTuple):
    """
    Результат офлайн прогресса.

    Attributes:
        sips_earned: Заработано за время отсутствия
        cycles: Число полных циклов
        counted_ms: Учтённое время (после ограничения сверху)
        was_active: False если отсутствие короче минимума или циклов нет
    """

    sips_earned: NumericValue
    cycles: int
    counted_ms: float
    was_active: bool


def offline_progress(
    elapsed_ms: float,
    sips_per_cycle: Any,
    rate_ms: int = DEFAULT_DRINK_RATE_MS,
    max_offline_ms: int = MAX_OFFLINE_MS,
    min_offline_ms: int = MIN_OFFLINE_MS,
    efficiency: Any = OFFLINE_EFFICIENCY,
) -> OfflineProgress:
    """
    Заработок за время отсутствия.

    sips_per_cycle * efficiency * floor(min(elapsed, max_offline) / rate).

    Args:
        elapsed_ms: Время отсутствия (NaN/отрицательное → 0)
        sips_per_cycle: Выход за цикл
        rate_ms: Длительность цикла (невалидная → DEFAULT_DRINK_RATE_MS)
        max_offline_ms: Верхняя граница учитываемого времени
        min_offline_ms: Отсутствие короче минимума не учитывается
        efficiency: Доля офлайн выхода

    Examples:
        >>> offline_progress(60_000, 2, rate_ms=5000).sips_earned
        NumericValue(PLAIN, 24.0)
    """
    elapsed = max(sanitize_float(elapsed_ms), 0.0)
    counted = min(elapsed, float(max_offline_ms))

    if elapsed < min_offline_ms:
        return OfflineProgress(NumericValue.ZERO, 0, counted, False)

    rate = sanitize_float(rate_ms)
    if rate <= 0:
        rate = float(DEFAULT_DRINK_RATE_MS)

    cycles = math.floor(counted / rate)
    if cycles == 0:
        return OfflineProgress(NumericValue.ZERO, 0, counted, False)

    earned = _non_negative(sips_per_cycle) * _non_negative(efficiency) * cycles
    logger.debug("Offline progress: %d cycles x %s = %s", cycles, sips_per_cycle, earned)
    return OfflineProgress(earned, cycles, counted, True)


# =============================================================================
# ПЕРЕСЧЁТ ПРОИЗВОДСТВА
# =============================================================================


def recalc_production(
    counters: ResourceCounters,
    config: Optional[EconomyConfig] = None,
) -> ProductionSnapshot:
    """
    Полный пересчёт производных значений производства.

    Returns:
        ProductionSnapshot: производство за единицу (трубочка, стакан),
        суммарное производство (с синергией и soft cap), выход за цикл,
        бонус клика, длительность цикла и вероятность крита
    """
    config = config or EconomyConfig()

    straw_rate = per_unit_production(
        config.straw_base_per_unit, counters.wider_straws, config.wider_straws_per_level
    )
    cup_rate = per_unit_production(
        config.cup_base_per_unit, counters.better_cups, config.better_cups_per_level
    )
    total = apply_soft_cap(
        aggregate_production(
            counters.straws,
            straw_rate,
            counters.cups,
            cup_rate,
            config.synergy_threshold,
            config.synergy_cap,
        ),
        config.soft_cap_threshold,
        config.soft_cap_exponent,
    )

    return ProductionSnapshot(
        straw_production=straw_rate,
        cup_production=cup_rate,
        total_production=total,
        output_per_cycle=output_per_cycle(
            config.base_output_per_cycle, total, config.diminishing_returns_knee
        ),
        click_bonus=suction_click_bonus(counters.suctions, config.suction_click_bonus),
        drink_rate_ms=drink_rate(
            counters.faster_drinks,
            config.default_drink_rate_ms,
            config.faster_drinks_reduction,
            config.min_drink_rate_ms,
        ),
        critical_chance=critical_click_chance(
            counters.critical_clicks,
            config.critical_click_base_chance,
            config.critical_click_chance_per_level,
        ),
    )
