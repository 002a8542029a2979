"""
Conversion Layer — приведение произвольных значений к NumericValue.

Три слоя:
1. try_convert: strict, никогда не бросает, возвращает ConversionResult
2. to_numeric_strict: бросает ConversionError
3. from_any: lenient, любая ошибка → fallback (ZERO), лог на DEBUG

Реестр адаптеров (register_adapter) диспетчеризует по MRO типа значения.
Объекты с протоколом Coercible (to_number/to_string) принимаются напрямую,
объекты с camelCase toNumber/toString оборачиваются LegacyNumberAdapter.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN/Infinity никогда не становятся NumericValue
2. Magnitude >= 1e15 сохраняется в EXTENDED без потери через float
3. bool не является числом
"""

import logging
import math
import re
from decimal import Decimal, DecimalException
from fractions import Fraction
from typing import Any, Callable, Final, NamedTuple, Optional, Protocol, runtime_checkable

from sipengine.core.math.numerical_safeguards import (
    EXTREME_VALUE_THRESHOLD,
    SAFE_NUMBER_THRESHOLD,
    is_safe_number,
)
from sipengine.core.numbers.numeric_value import (
    ENGINE_CONTEXT,
    NumericValue,
    float_to_decimal,
)
from sipengine.errors import ConversionError, ConversionErrorKind

logger = logging.getLogger(__name__)

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Строки, которые никогда не являются числом (наследие JS-сериализации)
INVALID_SENTINELS: Final[frozenset[str]] = frozenset(
    {"NaN", "Infinity", "-Infinity", "inf", "-inf", "undefined", "null", ""}
)

_NON_FINITE_WORDS: Final[frozenset[str]] = frozenset(
    {"nan", "-nan", "+nan", "infinity", "-infinity", "+infinity", "inf", "-inf", "+inf"}
)

_NUMERIC_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
)

_EXTREME_DECIMAL: Final[Decimal] = float_to_decimal(EXTREME_VALUE_THRESHOLD)

_REPR_LIMIT: Final[int] = 80

# repr() больших int упирается в sys.get_int_max_str_digits()
_REPR_MAX_INT_BITS: Final[int] = 256


# =============================================================================
# ПРОТОКОЛ И АДАПТЕРЫ
# =============================================================================


@runtime_checkable
class Coercible(Protocol):
    """Значение, которое умеет отдать себя числом и строкой."""

    def to_number(self) -> float:
        ...

    def to_string(self) -> str:
        ...


class LegacyNumberAdapter:
    """
    Обёртка для объектов с camelCase toNumber()/toString().

    Приводит JS-style интерфейс к протоколу Coercible на границе.
    """

    def __init__(self, wrapped: Any) -> None:
        self._wrapped = wrapped

    @staticmethod
    def supports(value: Any) -> bool:
        return callable(getattr(value, "toNumber", None)) and callable(
            getattr(value, "toString", None)
        )

    def to_number(self) -> float:
        return float(self._wrapped.toNumber())

    def to_string(self) -> str:
        return str(self._wrapped.toString())


class ConversionResult(NamedTuple):
    """Результат strict-конверсии: ровно одно из полей не None."""

    value: Optional[NumericValue]
    error: Optional[ConversionError]

    @property
    def ok(self) -> bool:
        return self.error is None


Adapter = Callable[[Any], NumericValue]

_ADAPTERS: dict[type, Adapter] = {}


def register_adapter(value_type: type, adapter: Adapter) -> None:
    """
    Регистрация адаптера для типа.

    Адаптер получает значение и возвращает NumericValue либо бросает
    ConversionError. Подклассы наследуют адаптер базового типа.
    """
    _ADAPTERS[value_type] = adapter


def _find_adapter(value: Any) -> Optional[Adapter]:
    for cls in type(value).__mro__:
        adapter = _ADAPTERS.get(cls)
        if adapter is not None:
            return adapter
    return None


def describe_value(value: Any) -> str:
    """
    Короткое описание значения для диагностики (логи, ConversionError).

    Большие int описываются длиной в битах: их repr() либо обрезается,
    либо бросает ValueError выше лимита цифр интерпретатора.

    Examples:
        >>> describe_value(float("nan"))
        'nan'
        >>> describe_value(10**300001)
        '<int 996582 bits>'
    """
    if isinstance(value, int) and value.bit_length() > _REPR_MAX_INT_BITS:
        return f"<int {value.bit_length()} bits>"
    text = repr(value)
    if len(text) > _REPR_LIMIT:
        return text[: _REPR_LIMIT - 3] + "..."
    return text


def _from_numeric_value(value: NumericValue) -> NumericValue:
    return value


def _from_bool(value: bool) -> NumericValue:
    raise ConversionError(ConversionErrorKind.UNSUPPORTED_TYPE, describe_value(value))


def _from_int(value: int) -> NumericValue:
    if abs(value) < SAFE_NUMBER_THRESHOLD:
        return NumericValue.plain(float(value))
    try:
        return NumericValue.extended(ENGINE_CONTEXT.create_decimal(value))
    except DecimalException as exc:
        raise ConversionError(ConversionErrorKind.NON_FINITE, describe_value(value)) from exc


def _from_float(value: float) -> NumericValue:
    if not math.isfinite(value):
        raise ConversionError(ConversionErrorKind.NON_FINITE, describe_value(value))
    if is_safe_number(value):
        return NumericValue.plain(value)
    return NumericValue.extended(float_to_decimal(value))


def _from_decimal(value: Decimal) -> NumericValue:
    if not value.is_finite():
        raise ConversionError(ConversionErrorKind.NON_FINITE, describe_value(value))
    try:
        return NumericValue.from_decimal(ENGINE_CONTEXT.plus(value))
    except DecimalException as exc:
        raise ConversionError(ConversionErrorKind.NON_FINITE, describe_value(value)) from exc


def _from_fraction(value: Fraction) -> NumericValue:
    quotient = ENGINE_CONTEXT.divide(Decimal(value.numerator), Decimal(value.denominator))
    return NumericValue.from_decimal(quotient)


def _from_string(value: str) -> NumericValue:
    text = value.strip()

    if text.lower() in _NON_FINITE_WORDS:
        raise ConversionError(ConversionErrorKind.NON_FINITE, describe_value(value))

    if text in INVALID_SENTINELS or not is_numeric_string(text):
        raise ConversionError(ConversionErrorKind.UNPARSEABLE, describe_value(value))

    try:
        parsed = ENGINE_CONTEXT.create_decimal(text)
    except DecimalException as exc:
        # экспонента за пределами диапазона контекста
        raise ConversionError(ConversionErrorKind.NON_FINITE, describe_value(value)) from exc

    return NumericValue.from_decimal(parsed)


def _from_coercible(value: Coercible) -> NumericValue:
    """
    Coercible: сначала to_string() (сохраняет extended магнитуду),
    затем to_number().
    """
    string_error: Optional[ConversionError] = None

    try:
        text = value.to_string()
    except Exception as exc:  # чужой код на границе интеропа
        logger.debug("to_string() of %s raised %s", type(value).__name__, exc)
        text = None

    if isinstance(text, str):
        try:
            return _from_string(text)
        except ConversionError as exc:
            string_error = exc

    try:
        number = float(value.to_number())
    except Exception as exc:  # чужой код на границе интеропа
        raise string_error or ConversionError(
            ConversionErrorKind.UNPARSEABLE, describe_value(value)
        ) from exc

    try:
        return _from_float(number)
    except ConversionError:
        if string_error is not None:
            raise string_error
        raise


register_adapter(NumericValue, _from_numeric_value)
register_adapter(bool, _from_bool)
register_adapter(int, _from_int)
register_adapter(float, _from_float)
register_adapter(Decimal, _from_decimal)
register_adapter(Fraction, _from_fraction)
register_adapter(str, _from_string)


# =============================================================================
# ПУБЛИЧНЫЙ API
# =============================================================================


def is_numeric_string(text: Any) -> bool:
    """
    Проверка, что строка однозначно является конечным числом.

    Examples:
        >>> is_numeric_string("1.5e100")
        True
        >>> is_numeric_string("NaN")
        False
        >>> is_numeric_string("12abc")
        False
    """
    if not isinstance(text, str):
        return False
    return _NUMERIC_PATTERN.fullmatch(text.strip()) is not None


def try_convert(value: Any) -> ConversionResult:
    """
    Strict конверсия без исключений.

    Args:
        value: Произвольное значение

    Returns:
        ConversionResult(value, None) при успехе,
        ConversionResult(None, ConversionError) при ошибке
    """
    adapter = _find_adapter(value)

    if adapter is None:
        if isinstance(value, Coercible):
            adapter = _from_coercible
        elif LegacyNumberAdapter.supports(value):
            value = LegacyNumberAdapter(value)
            adapter = _from_coercible
        else:
            return ConversionResult(
                None,
                ConversionError(ConversionErrorKind.UNSUPPORTED_TYPE, describe_value(value)),
            )

    try:
        return ConversionResult(adapter(value), None)
    except ConversionError as exc:
        return ConversionResult(None, exc)


def to_numeric_strict(value: Any) -> NumericValue:
    """
    Strict конверсия.

    Raises:
        ConversionError: если значение не приводится к конечному числу
    """
    result = try_convert(value)
    if result.error is not None:
        raise result.error
    return result.value


def from_any(value: Any, fallback: NumericValue = NumericValue.ZERO) -> NumericValue:
    """
    Lenient конверсия: никогда не бросает, никогда не возвращает NaN/Inf.

    Args:
        value: Произвольное значение
        fallback: Значение при ошибке (default: ZERO)

    Examples:
        >>> from_any("1e100").is_extended
        True
        >>> from_any(float("nan"))
        NumericValue(PLAIN, 0.0)
    """
    result = try_convert(value)
    if result.error is None:
        return result.value

    logger.debug(
        "Conversion of %s failed (%s), using fallback %s",
        result.error.value_repr,
        result.error.kind.value,
        fallback,
    )
    return fallback


def to_safe_number(value: Any) -> float:
    """
    float только если finite и abs < 1e15, иначе 0.0.

    Examples:
        >>> to_safe_number(42)
        42.0
        >>> to_safe_number("1e100")
        0.0
    """
    as_float = from_any(value).to_float()
    if is_safe_number(as_float):
        return as_float
    return 0.0


def is_extreme_value(value: Any) -> bool:
    """Магнитуда >= EXTREME_VALUE_THRESHOLD (1e150)."""
    return from_any(value).to_decimal().copy_abs() >= _EXTREME_DECIMAL


def magnitude_description(value: Any) -> str:
    """
    Человекочитаемая оценка магнитуды.

    Returns:
        "Zero" | "Tiny" | "Small" | "Medium" | "Large" | "Extreme" | "Negative"

    Examples:
        >>> magnitude_description(500)
        'Small'
        >>> magnitude_description("1e200")
        'Large'
        >>> magnitude_description("1e600")
        'Extreme'
    """
    numeric = from_any(value)

    if numeric.is_zero:
        return "Zero"
    if numeric.is_negative:
        return "Negative"

    if is_extreme_value(numeric):
        if numeric.to_decimal().adjusted() >= 500:
            return "Extreme"
        return "Large"

    if numeric.gte(1e6):
        return "Large"
    if numeric.gte(1000):
        return "Medium"
    if numeric.gte(1):
        return "Small"
    return "Tiny"
