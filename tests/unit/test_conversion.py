"""
Тесты для Conversion Layer

Проверяет:
1. Strict слой try_convert / to_numeric_strict (ConversionResult, ConversionError)
2. Lenient from_any: NaN/Inf/мусор → fallback, никогда не бросает
3. Протокол Coercible и LegacyNumberAdapter (toNumber/toString)
4. Реестр адаптеров
5. to_safe_number и round-trip для безопасных чисел
6. Оценку магнитуды
"""

import math
from decimal import Decimal
from fractions import Fraction

import pytest

from sipengine.core.numbers.conversion import (
    INVALID_SENTINELS,
    Coercible,
    LegacyNumberAdapter,
    describe_value,
    from_any,
    is_extreme_value,
    is_numeric_string,
    magnitude_description,
    register_adapter,
    to_numeric_strict,
    to_safe_number,
    try_convert,
)
from sipengine.core.numbers.numeric_value import NumericValue
from sipengine.errors import ConversionError, ConversionErrorKind


class BigNumberStub:
    """Объект с протоколом Coercible (snake_case)"""

    def __init__(self, text: str, number: float) -> None:
        self._text = text
        self._number = number

    def to_number(self) -> float:
        return self._number

    def to_string(self) -> str:
        return self._text


class LegacyDecimalStub:
    """Объект с JS-style toNumber/toString"""

    def __init__(self, text: str) -> None:
        self._text = text

    def toNumber(self) -> float:  # noqa: N802
        return float(self._text)

    def toString(self) -> str:  # noqa: N802
        return self._text


class BrokenCoercible:
    """Coercible, у которого оба метода бросают"""

    def to_number(self) -> float:
        raise RuntimeError("boom")

    def to_string(self) -> str:
        raise RuntimeError("boom")


# =============================================================================
# STRICT СЛОЙ
# =============================================================================


class TestTryConvert:
    """Тесты для try_convert"""

    def test_plain_number(self) -> None:
        """Число в безопасном диапазоне → PLAIN"""
        result = try_convert(42)
        assert result.ok
        assert result.error is None
        assert result.value == NumericValue.plain(42.0)
        assert not result.value.is_extended

    def test_large_int_is_extended(self) -> None:
        """Большой int → EXTENDED без потери через float"""
        result = try_convert(10**20 + 1)
        assert result.value.is_extended
        assert result.value.to_decimal() == Decimal(10**20 + 1)

    def test_scientific_string(self) -> None:
        """Строка в научной нотации"""
        result = try_convert("1e100")
        assert result.value.is_extended
        assert str(result.value) == "1e+100"

    def test_whitespace_and_sign(self) -> None:
        """Пробелы и знак допустимы"""
        assert try_convert("  -2.5 ").value == -2.5
        assert try_convert("+.5").value == 0.5

    def test_nan_is_non_finite(self) -> None:
        """NaN → NON_FINITE"""
        result = try_convert(float("nan"))
        assert not result.ok
        assert result.value is None
        assert result.error.kind is ConversionErrorKind.NON_FINITE

    def test_infinity_string_is_non_finite(self) -> None:
        """Строки Infinity/-inf → NON_FINITE"""
        assert try_convert("Infinity").error.kind is ConversionErrorKind.NON_FINITE
        assert try_convert("-inf").error.kind is ConversionErrorKind.NON_FINITE

    def test_garbage_string_is_unparseable(self) -> None:
        """Мусорная строка → UNPARSEABLE"""
        assert try_convert("12abc").error.kind is ConversionErrorKind.UNPARSEABLE
        assert try_convert("undefined").error.kind is ConversionErrorKind.UNPARSEABLE
        assert try_convert("").error.kind is ConversionErrorKind.UNPARSEABLE

    def test_exponent_beyond_context_is_non_finite(self) -> None:
        """Экспонента за пределами контекста → NON_FINITE"""
        result = try_convert("1e99999999999999999999")
        assert result.error.kind is ConversionErrorKind.NON_FINITE

    def test_unsupported_types(self) -> None:
        """None, bool, list → UNSUPPORTED_TYPE"""
        for value in (None, True, [1, 2], object()):
            assert try_convert(value).error.kind is ConversionErrorKind.UNSUPPORTED_TYPE

    def test_decimal_and_fraction(self) -> None:
        """Decimal и Fraction"""
        assert try_convert(Decimal("2.5")).value == 2.5
        assert try_convert(Fraction(1, 4)).value == 0.25
        assert try_convert(Decimal("NaN")).error.kind is ConversionErrorKind.NON_FINITE

    def test_numeric_value_passthrough(self) -> None:
        """NumericValue возвращается как есть"""
        value = from_any("1e300")
        assert try_convert(value).value is value


class TestToNumericStrict:
    """Тесты для to_numeric_strict"""

    def test_valid_value(self) -> None:
        """Валидное значение конвертируется"""
        assert to_numeric_strict("5.4") == 5.4

    def test_invalid_value_raises(self) -> None:
        """Невалидное значение → ConversionError"""
        with pytest.raises(ConversionError, match="UNPARSEABLE") as exc_info:
            to_numeric_strict("abc")
        assert exc_info.value.kind is ConversionErrorKind.UNPARSEABLE
        assert exc_info.value.value_repr == "'abc'"

    def test_conversion_error_is_value_error(self) -> None:
        """ConversionError совместим с ValueError"""
        with pytest.raises(ValueError):
            to_numeric_strict(float("inf"))


class TestDescribeValue:
    """Тесты для describe_value"""

    def test_short_repr(self) -> None:
        assert describe_value("abc") == "'abc'"
        assert describe_value(float("nan")) == "nan"

    def test_long_repr_truncated(self) -> None:
        """Длинный repr обрезается до 80 символов"""
        text = describe_value("x" * 500)
        assert len(text) == 80
        assert text.endswith("...")

    def test_huge_int_described_by_bits(self) -> None:
        """int выше лимита цифр repr() не роняет описание"""
        assert describe_value(10**300001) == "<int 996582 bits>"
        assert describe_value(2**300) == "<int 301 bits>"

    def test_huge_int_still_converts(self) -> None:
        """Сам int выше лимита цифр конвертируется без str()"""
        value = from_any(10**300001)
        assert value.is_extended
        assert value.to_decimal().adjusted() == 300001


# =============================================================================
# LENIENT СЛОЙ
# =============================================================================


class TestFromAny:
    """Тесты для from_any"""

    @pytest.mark.parametrize(
        "value",
        [float("nan"), float("inf"), -math.inf, "NaN", "Infinity", "garbage", None, {}],
    )
    def test_invalid_input_yields_zero(self, value: object) -> None:
        """Невалидный вход → ZERO"""
        result = from_any(value)
        assert result.is_zero
        assert not result.is_extended

    def test_custom_fallback(self) -> None:
        """Пользовательский fallback"""
        assert from_any("garbage", fallback=NumericValue.ONE) == 1

    def test_every_sentinel_yields_zero(self) -> None:
        """Все сентинелы → ZERO"""
        for sentinel in INVALID_SENTINELS:
            assert from_any(sentinel).is_zero


class TestCoercible:
    """Тесты протокола Coercible и legacy адаптера"""

    def test_numeric_value_is_coercible(self) -> None:
        """NumericValue удовлетворяет протоколу"""
        assert isinstance(NumericValue.ONE, Coercible)

    def test_coercible_prefers_string(self) -> None:
        """Строковая форма сохраняет extended магнитуду"""
        value = from_any(BigNumberStub("1e500", float("inf")))
        assert value.is_extended
        assert str(value) == "1e+500"

    def test_coercible_falls_back_to_number(self) -> None:
        """Нечисловая строка → to_number()"""
        value = from_any(BigNumberStub("not a number", 12.0))
        assert value == 12

    def test_broken_coercible_is_unparseable(self) -> None:
        """Бросающие методы → UNPARSEABLE, без исключения наружу"""
        result = try_convert(BrokenCoercible())
        assert result.error.kind is ConversionErrorKind.UNPARSEABLE
        assert from_any(BrokenCoercible()).is_zero

    def test_legacy_camel_case_object(self) -> None:
        """toNumber/toString оборачиваются LegacyNumberAdapter"""
        value = from_any(LegacyDecimalStub("2.5e300"))
        assert value.is_extended
        assert str(value) == "2.5e+300"

    def test_legacy_adapter_protocol(self) -> None:
        """LegacyNumberAdapter реализует Coercible"""
        adapter = LegacyNumberAdapter(LegacyDecimalStub("7"))
        assert isinstance(adapter, Coercible)
        assert adapter.to_number() == 7.0
        assert adapter.to_string() == "7"
        assert LegacyNumberAdapter.supports(LegacyDecimalStub("1"))
        assert not LegacyNumberAdapter.supports(42)


class TestRegisterAdapter:
    """Тесты реестра адаптеров"""

    def test_custom_type_adapter(self) -> None:
        """Пользовательский тип конвертируется зарегистрированным адаптером"""

        class Sips:
            def __init__(self, amount: int) -> None:
                self.amount = amount

        register_adapter(Sips, lambda value: NumericValue.plain(float(value.amount)))
        assert from_any(Sips(7)) == 7


# =============================================================================
# SAFE NUMBER И МАГНИТУДА
# =============================================================================


class TestToSafeNumber:
    """Тесты для to_safe_number"""

    @pytest.mark.parametrize(
        "number",
        [0.0, 1.0, -1.0, 0.1, 3.14159, 123456.789, -987654321.123, 999_999_999_999_999.0],
    )
    def test_round_trip(self, number: float) -> None:
        """to_safe_number(from_any(n)) == n для |n| < 1e15"""
        assert to_safe_number(from_any(number)) == number

    def test_large_value_is_zero(self) -> None:
        """Значения за порогом → 0"""
        assert to_safe_number("1e100") == 0.0
        assert to_safe_number(1e15) == 0.0

    def test_invalid_value_is_zero(self) -> None:
        """Невалидные значения → 0"""
        assert to_safe_number(float("nan")) == 0.0


class TestMagnitude:
    """Тесты is_extreme_value и magnitude_description"""

    def test_is_extreme_value(self) -> None:
        """Порог 1e150"""
        assert is_extreme_value("1e150")
        assert is_extreme_value("-1e200")
        assert not is_extreme_value(1e149)

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, "Zero"),
            (-5, "Negative"),
            (0.5, "Tiny"),
            (500, "Small"),
            (5000, "Medium"),
            (5e6, "Large"),
            ("1e200", "Large"),
            ("1e600", "Extreme"),
        ],
    )
    def test_magnitude_description(self, value: object, expected: str) -> None:
        """Описание магнитуды"""
        assert magnitude_description(value) == expected


class TestNumericString:
    """Тесты для is_numeric_string"""

    def test_numeric_strings(self) -> None:
        """Числовые строки"""
        for text in ("1", "-1.5", "1e100", "2.5E-3", " 42 ", ".5"):
            assert is_numeric_string(text)

    def test_non_numeric_strings(self) -> None:
        """Не числовые строки и не строки"""
        for text in ("", "NaN", "Infinity", "1e", "abc", "1,000"):
            assert not is_numeric_string(text)
        assert not is_numeric_string(5)
