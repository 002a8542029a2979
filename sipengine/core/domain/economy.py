"""
Value objects экономики: котировка стоимости и снимок производства.
"""

from dataclasses import dataclass
from enum import Enum

from sipengine.core.numbers.numeric_value import NumericValue


class CostCurve(str, Enum):
    """
    Кривая стоимости покупки.

    EXPONENTIAL: base * scaling ** owned
    LINEAR: base * max(owned + offset, 1)
    """

    EXPONENTIAL = "EXPONENTIAL"
    LINEAR = "LINEAR"


@dataclass(frozen=True)
class CostQuote:
    """
    Котировка стоимости следующей единицы.

    Attributes:
        curve: Кривая стоимости
        base_cost: Базовая стоимость
        scaling_factor: Множитель за единицу (ONE для LINEAR)
        owned_count: Текущее количество (после коэрсии)
        effective_exponent: Показатель после clamp (0 для LINEAR)
        price: Итоговая стоимость
        exponent_clamped: True если owned_count превысил потолок показателя
    """

    curve: CostCurve
    base_cost: NumericValue
    scaling_factor: NumericValue
    owned_count: NumericValue
    effective_exponent: int
    price: NumericValue
    exponent_clamped: bool = False


@dataclass(frozen=True)
class ProductionSnapshot:
    """
    Согласованный набор производных значений производства.

    Пересчитывается целиком при любом изменении счётчиков.

    Attributes:
        straw_production: Производство одной трубочки
        cup_production: Производство одного стакана
        total_production: Суммарное производство (синергия, soft cap)
        output_per_cycle: Выход за цикл (diminishing returns)
        click_bonus: Бонус клика от suctions
        drink_rate_ms: Длительность цикла в миллисекундах
        critical_chance: Вероятность критического клика [0, 1]
    """

    straw_production: NumericValue
    cup_production: NumericValue
    total_production: NumericValue
    output_per_cycle: NumericValue
    click_bonus: NumericValue
    drink_rate_ms: int
    critical_chance: float
