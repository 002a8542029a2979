"""
Economy formulas: production, synergy, diminishing returns, purchase cost,
click, drink rate, level-up reward, offline progress.
"""

from sipengine.core.economy.formulas import (
    BASE_CLICK_VALUE,
    BASE_OUTPUT_PER_CYCLE,
    BETTER_CUPS_PER_LEVEL,
    CRITICAL_CLICK_BASE_CHANCE,
    CRITICAL_CLICK_CHANCE_PER_LEVEL,
    CRITICAL_CLICK_MULTIPLIER,
    CUP_BASE_PER_UNIT,
    DEFAULT_DRINK_RATE_MS,
    DIMINISHING_RETURNS_KNEE,
    FASTER_DRINKS_REDUCTION_PER_LEVEL,
    LEVEL_UP_SIPS_MULTIPLIER,
    MAX_OFFLINE_MS,
    MIN_DRINK_RATE_MS,
    MIN_OFFLINE_MS,
    OFFLINE_EFFICIENCY,
    PURCHASE_EXPONENT_CEILING,
    SOFT_CAP_EXPONENT,
    SOFT_CAP_THRESHOLD,
    STRAW_BASE_PER_UNIT,
    SUCTION_CLICK_BONUS,
    SYNERGY_CAP,
    SYNERGY_THRESHOLD,
    WIDER_STRAWS_PER_LEVEL,
    ClickOutcome,
    EconomyConfig,
    OfflineProgress,
    aggregate_production,
    apply_soft_cap,
    click_value,
    compute_click,
    critical_click_chance,
    drink_rate,
    level_up_gain,
    linear_upgrade_cost,
    offline_progress,
    output_per_cycle,
    per_unit_production,
    purchase_cost,
    quote_cost,
    quote_linear_cost,
    quote_upgrade,
    recalc_production,
    suction_click_bonus,
    synergy_multiplier,
    unit_production,
)

__all__ = [
    # Constants
    "BASE_CLICK_VALUE",
    "BASE_OUTPUT_PER_CYCLE",
    "BETTER_CUPS_PER_LEVEL",
    "CRITICAL_CLICK_BASE_CHANCE",
    "CRITICAL_CLICK_CHANCE_PER_LEVEL",
    "CRITICAL_CLICK_MULTIPLIER",
    "CUP_BASE_PER_UNIT",
    "DEFAULT_DRINK_RATE_MS",
    "DIMINISHING_RETURNS_KNEE",
    "FASTER_DRINKS_REDUCTION_PER_LEVEL",
    "LEVEL_UP_SIPS_MULTIPLIER",
    "MAX_OFFLINE_MS",
    "MIN_DRINK_RATE_MS",
    "MIN_OFFLINE_MS",
    "OFFLINE_EFFICIENCY",
    "PURCHASE_EXPONENT_CEILING",
    "SOFT_CAP_EXPONENT",
    "SOFT_CAP_THRESHOLD",
    "STRAW_BASE_PER_UNIT",
    "SUCTION_CLICK_BONUS",
    "SYNERGY_CAP",
    "SYNERGY_THRESHOLD",
    "WIDER_STRAWS_PER_LEVEL",
    # Types
    "ClickOutcome",
    "EconomyConfig",
    "OfflineProgress",
    # Production
    "aggregate_production",
    "apply_soft_cap",
    "output_per_cycle",
    "per_unit_production",
    "recalc_production",
    "synergy_multiplier",
    "unit_production",
    # Cost
    "linear_upgrade_cost",
    "purchase_cost",
    "quote_cost",
    "quote_linear_cost",
    "quote_upgrade",
    # Click
    "click_value",
    "compute_click",
    "critical_click_chance",
    "suction_click_bonus",
    # Cycle, level, offline
    "drink_rate",
    "level_up_gain",
    "offline_progress",
]
