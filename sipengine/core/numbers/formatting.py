"""
Display formatting для NumericValue.

- magnitude >= 1e6: научная форма "1.50e+6" (мантисса из Decimal, без float)
- ниже: группировка разрядов, не более 2 дробных цифр, без хвостовых нулей
"""

import re
from typing import Any, Final

from sipengine.core.math.numerical_safeguards import DISPLAY_SCIENTIFIC_THRESHOLD
from sipengine.core.numbers.conversion import from_any
from sipengine.core.numbers.numeric_value import float_to_decimal

DISPLAY_FRACTION_DIGITS: Final[int] = 2

_SCIENTIFIC_DECIMAL_THRESHOLD: Final = float_to_decimal(DISPLAY_SCIENTIFIC_THRESHOLD)

_SIGNIFICANT_DIGIT: Final[re.Pattern[str]] = re.compile(r"[1-9]")


def format_numeric(value: Any, precision: int = DISPLAY_FRACTION_DIGITS) -> str:
    """
    Форматирование значения для отображения.

    Args:
        value: Любое коэрсируемое значение (невалидное → "0")
        precision: Дробные цифры мантиссы в научной форме

    Returns:
        Строка для UI

    Examples:
        >>> format_numeric(1_500_000)
        '1.50e+6'
        >>> format_numeric(12345.6)
        '12,345.6'
        >>> format_numeric("1.5e100")
        '1.50e+100'
    """
    numeric = from_any(value)
    exact = numeric.to_decimal()

    if exact.copy_abs() >= _SCIENTIFIC_DECIMAL_THRESHOLD:
        return f"{exact:.{precision}e}"

    # 999999.996 округляется до 1,000,000: порог проверяется после округления
    rounded = round(numeric.to_float(), DISPLAY_FRACTION_DIGITS)
    if abs(rounded) >= DISPLAY_SCIENTIFIC_THRESHOLD:
        return f"{exact:.{precision}e}"

    grouped = f"{rounded:,.{DISPLAY_FRACTION_DIGITS}f}"
    if "." in grouped:
        grouped = grouped.rstrip("0").rstrip(".")
    if grouped in ("-0", ""):
        return "0"
    return grouped


def clean_extreme_decimals(text: str) -> str:
    """
    Удаление артефактов точности float из десятичной строки.

    Научная форма и целые строки возвращаются как есть. Длинные дробные
    хвосты режутся до значащих цифр, хвостовые нули удаляются.

    Examples:
        >>> clean_extreme_decimals("5.4000000000000004")
        '5.4'
        >>> clean_extreme_decimals("3.000000001")
        '3'
        >>> clean_extreme_decimals("1.5e+100")
        '1.5e+100'
    """
    if "e" in text or "E" in text or "." not in text:
        return text

    parts = text.split(".")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return text

    integer_part, fraction = parts

    first_significant = _first_significant(fraction)
    if len(fraction) > 15:
        if first_significant == -1 or first_significant > 10:
            return integer_part
        keep = min(2, len(fraction) - first_significant)
        fraction = fraction[: first_significant + keep]
    elif len(fraction) > 6:
        if first_significant == -1 or first_significant > 3:
            return integer_part
        fraction = fraction[: min(2, first_significant + 2)]
    elif len(fraction) > 2:
        fraction = fraction[:2]

    fraction = fraction.rstrip("0")
    if not fraction:
        return integer_part
    return f"{integer_part}.{fraction}"


def _first_significant(fraction: str) -> int:
    match = _SIGNIFICANT_DIGIT.search(fraction)
    return match.start() if match else -1
