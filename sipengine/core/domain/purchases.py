"""
Каталог покупок: виды, определения и значения по умолчанию.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from sipengine.core.domain.economy import CostCurve


class PurchaseKind(str, Enum):
    """Вид покупки."""

    STRAW = "STRAW"
    CUP = "CUP"
    SUCTION = "SUCTION"
    FASTER_DRINKS = "FASTER_DRINKS"
    CRITICAL_CLICK = "CRITICAL_CLICK"
    WIDER_STRAWS = "WIDER_STRAWS"
    BETTER_CUPS = "BETTER_CUPS"
    LEVEL = "LEVEL"


@dataclass(frozen=True)
class UpgradeDefinition:
    """
    Определение покупки.

    Attributes:
        kind: Вид покупки
        counter: Имя поля ResourceCounters, которое увеличивается на 1
        base_cost: Базовая стоимость
        curve: Кривая стоимости
        scaling_factor: Множитель (EXPONENTIAL)
        linear_offset: Смещение количества (LINEAR): base * max(owned + offset, 1)
    """

    kind: PurchaseKind
    counter: str
    base_cost: float
    curve: CostCurve = CostCurve.EXPONENTIAL
    scaling_factor: float = 1.0
    linear_offset: int = 1


DEFAULT_UPGRADES: Mapping[PurchaseKind, UpgradeDefinition] = MappingProxyType(
    {
        PurchaseKind.STRAW: UpgradeDefinition(
            PurchaseKind.STRAW, "straws", 5.0, scaling_factor=1.08
        ),
        PurchaseKind.CUP: UpgradeDefinition(
            PurchaseKind.CUP, "cups", 15.0, scaling_factor=1.15
        ),
        PurchaseKind.SUCTION: UpgradeDefinition(
            PurchaseKind.SUCTION, "suctions", 40.0, scaling_factor=1.12
        ),
        PurchaseKind.FASTER_DRINKS: UpgradeDefinition(
            PurchaseKind.FASTER_DRINKS, "faster_drinks", 80.0, scaling_factor=1.10
        ),
        PurchaseKind.CRITICAL_CLICK: UpgradeDefinition(
            PurchaseKind.CRITICAL_CLICK, "critical_clicks", 60.0, scaling_factor=1.12
        ),
        PurchaseKind.WIDER_STRAWS: UpgradeDefinition(
            PurchaseKind.WIDER_STRAWS, "wider_straws", 150.0, curve=CostCurve.LINEAR
        ),
        PurchaseKind.BETTER_CUPS: UpgradeDefinition(
            PurchaseKind.BETTER_CUPS, "better_cups", 400.0, curve=CostCurve.LINEAR
        ),
        # стоимость уровня: base * max(level, 1)
        PurchaseKind.LEVEL: UpgradeDefinition(
            PurchaseKind.LEVEL, "level", 3000.0, curve=CostCurve.LINEAR, linear_offset=0
        ),
    }
)
