"""
Тесты для display formatting
"""

import pytest

from sipengine.core.numbers.conversion import from_any
from sipengine.core.numbers.formatting import clean_extreme_decimals, format_numeric


class TestFormatNumeric:
    """Тесты для format_numeric"""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (0, "0"),
            (3, "3"),
            (2.5, "2.5"),
            (12345.6, "12,345.6"),
            (999.999, "1,000"),
            (0.004, "0"),
            (-0.001, "0"),
            (-42.25, "-42.25"),
        ],
    )
    def test_small_values_grouped(self, value: object, expected: str) -> None:
        """Ниже 1e6: группировка и не более двух дробных цифр"""
        assert format_numeric(value) == expected

    def test_large_value_is_scientific(self) -> None:
        """От 1e6: научная форма"""
        assert format_numeric(1_500_000) == "1.50e+6"
        assert format_numeric(-2e6) == "-2.00e+6"

    @pytest.mark.parametrize("value", [999999.996, 999999.999, -999999.999])
    def test_rounding_up_to_threshold_is_scientific(self, value: float) -> None:
        """Значение, округлённое до 1e6, показывается в научной форме"""
        assert format_numeric(value).endswith("e+6")

    def test_just_below_threshold_stays_grouped(self) -> None:
        assert format_numeric(999999.99) == "999,999.99"

    def test_extended_value_keeps_exponent(self) -> None:
        """Extended значение не теряет экспоненту"""
        assert format_numeric("1.5e100") == "1.50e+100"
        assert format_numeric(from_any("2.25e300000")) == "2.25e+300000"

    def test_precision(self) -> None:
        """Дробные цифры мантиссы настраиваются"""
        assert format_numeric(1_500_000, precision=3) == "1.500e+6"

    def test_invalid_value_formats_as_zero(self) -> None:
        """Невалидный вход форматируется как ноль"""
        assert format_numeric(float("nan")) == "0"
        assert format_numeric("garbage") == "0"


class TestCleanExtremeDecimals:
    """Тесты для clean_extreme_decimals"""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("5.4000000000000004", "5.4"),
            ("3.000000001", "3"),
            ("2.50", "2.5"),
            ("7.129", "7.12"),
            ("10.000", "10"),
            ("42", "42"),
            ("1.5e+100", "1.5e+100"),
        ],
    )
    def test_cleanup(self, text: str, expected: str) -> None:
        """Артефакты float удаляются, научная форма не трогается"""
        assert clean_extreme_decimals(text) == expected
