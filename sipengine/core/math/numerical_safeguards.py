"""
Numerical Safeguards — граница plain-чисел (float)

Всё, что касается native float, проходит через этот модуль:
- порог, ниже которого значение живёт как float (SAFE_NUMBER_THRESHOLD)
- замена NaN/Inf на fallback
- деление без ZeroDivisionError
- clamp показателя степени с явным флагом срабатывания
- валидация параметров конфигурации

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. float "безопасен" только если finite и abs(x) < SAFE_NUMBER_THRESHOLD
2. NaN/Inf не выходят из функций модуля
3. Вызывающий код всегда знает, что показатель был ограничен (was_clamped)
"""

import math
from typing import Final

# =============================================================================
# ПОРОГИ
# =============================================================================

# Выше порога значение хранится в extended-представлении (Decimal)
SAFE_NUMBER_THRESHOLD: Final[float] = 1e15

# "Экстремальные" значения (описание магнитуды)
EXTREME_VALUE_THRESHOLD: Final[float] = 1e150

# Начиная с этой магнитуды отображение переходит в научную форму
DISPLAY_SCIENTIFIC_THRESHOLD: Final[float] = 1e6


# =============================================================================
# NaN/Inf
# =============================================================================


def is_valid_float(value: float) -> bool:
    """True для finite значения."""
    return math.isfinite(value)


def is_safe_number(value: float, threshold: float = SAFE_NUMBER_THRESHOLD) -> bool:
    """
    Можно ли хранить и отдавать значение как native float.

    Examples:
        >>> is_safe_number(3.0)
        True
        >>> is_safe_number(1e15)
        False
        >>> is_safe_number(float('nan'))
        False
    """
    return math.isfinite(value) and abs(value) < threshold


def sanitize_float(value: float, fallback: float = 0.0) -> float:
    """
    NaN/Inf → fallback, остальное без изменений.

    Examples:
        >>> sanitize_float(float('nan'))
        0.0
        >>> sanitize_float(float('-inf'), fallback=-1.0)
        -1.0
    """
    return value if math.isfinite(value) else fallback


def safe_divide(numerator: float, denominator: float, fallback: float = 0.0) -> float:
    """
    numerator / denominator, либо fallback при нулевом знаменателе,
    NaN/Inf во входах или переполнении результата.

    Examples:
        >>> safe_divide(3.0, 4.0)
        0.75
        >>> safe_divide(3.0, 0.0, fallback=1.0)
        1.0
    """
    numerator = sanitize_float(numerator)
    denominator = sanitize_float(denominator)

    if denominator == 0.0:
        return fallback

    try:
        return sanitize_float(numerator / denominator, fallback)
    except OverflowError:
        return fallback


# =============================================================================
# CLAMP
# =============================================================================


def clamp(
    value: float,
    min_value: float | None = None,
    max_value: float | None = None,
) -> float:
    """Ограничение value диапазоном; None означает открытую границу."""
    if min_value is not None and value < min_value:
        return min_value
    if max_value is not None and value > max_value:
        return max_value
    return value


def clamp_exponent(exponent: float, ceiling: int) -> tuple[int, bool]:
    """
    Целый показатель степени в [0, ceiling].

    Повреждённый счётчик (NaN, Inf, 1e300) не должен порождать
    патологический рост стоимости, поэтому показатель ограничивается
    до возведения в степень.

    Args:
        exponent: Исходный показатель (может быть NaN/Inf/отрицательным)
        ceiling: Верхняя граница (>= 0)

    Returns:
        (floor(exponent) в [0, ceiling], was_clamped)

    Raises:
        ValueError: если ceiling < 0

    Examples:
        >>> clamp_exponent(12.7, 1000)
        (12, False)
        >>> clamp_exponent(float('inf'), 1000)
        (1000, True)
        >>> clamp_exponent(-3.0, 1000)
        (0, True)
    """
    if ceiling < 0:
        raise ValueError(f"ceiling must be non-negative, got {ceiling}")

    if math.isnan(exponent) or exponent < 0:
        return 0, True
    if exponent > ceiling:
        return ceiling, True
    return math.floor(exponent), False


# =============================================================================
# ВАЛИДАЦИЯ ПАРАМЕТРОВ
# =============================================================================


def validate_non_negative(value: float, name: str) -> None:
    """
    Raises:
        ValueError: если value < 0 или NaN/Inf
    """
    validate_in_range(value, name)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def validate_in_range(
    value: float,
    name: str,
    min_value: float | None = None,
    max_value: float | None = None,
) -> None:
    """
    Raises:
        ValueError: если value вне [min_value, max_value] или NaN/Inf
    """
    if not is_valid_float(value):
        raise ValueError(f"{name} must be a valid float (not NaN/Inf), got {value}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")
