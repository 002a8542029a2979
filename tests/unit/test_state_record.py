"""
Тесты для State Record: миграция сохранений и JSON Schema контракт

Проверяет:
1. record_to_numeric: числа и числовые строки → NumericValue, сентинелы → ZERO
2. record_to_plain: обратная конверсия (extended → строка)
3. parse_saved_value: исторические формы сохранений
4. Контракт state_record.json через jsonschema
"""

import pytest
from jsonschema import ValidationError

from sipengine.core.contracts.validators import (
    SchemaLoader,
    StateRecordValidator,
    validate_state_record,
)
from sipengine.core.domain.resource_counters import ResourceCounters
from sipengine.core.migration.state_record import (
    parse_saved_value,
    record_to_numeric,
    record_to_plain,
)
from sipengine.core.numbers.conversion import from_any
from sipengine.core.numbers.numeric_value import NumericValue


# =============================================================================
# МИГРАЦИЯ
# =============================================================================


class TestRecordToNumeric:
    """Тесты для record_to_numeric"""

    def test_numbers_and_numeric_strings(self) -> None:
        """Числа и числовые строки конвертируются"""
        converted = record_to_numeric({"straws": 5, "sips": "1e500", "cups": "12"})
        assert converted["straws"] == 5
        assert converted["sips"].is_extended
        assert converted["cups"] == 12

    @pytest.mark.parametrize("sentinel", ["NaN", "Infinity", "-Infinity", "undefined", "null", ""])
    def test_sentinels_become_zero(self, sentinel: str) -> None:
        """Строки-сентинелы → ZERO"""
        assert record_to_numeric({"sips": sentinel})["sips"] is NumericValue.ZERO

    def test_non_numeric_values_untouched(self) -> None:
        """Прочие значения без изменений"""
        record = {"name": "player", "muted": True, "history": [1, 2]}
        assert record_to_numeric(record) == record

    def test_field_filter(self) -> None:
        """Конвертируются только выбранные поля"""
        converted = record_to_numeric({"sips": "5", "version": "5"}, fields=["sips"])
        assert converted["sips"] == 5
        assert converted["version"] == "5"

    def test_non_finite_floats_become_zero(self) -> None:
        """NaN/Inf числа → ZERO"""
        converted = record_to_numeric({"sips": float("nan"), "cups": float("inf")})
        assert converted["sips"].is_zero
        assert converted["cups"].is_zero


class TestRecordToPlain:
    """Тесты для record_to_plain"""

    def test_plain_and_extended(self) -> None:
        """Безопасные значения → float, остальные → строка"""
        plain = record_to_plain({"straws": from_any(5), "sips": from_any("1.5e300")})
        assert plain == {"straws": 5.0, "sips": "1.5e+300"}

    def test_huge_int_becomes_string(self) -> None:
        """int за порогом → строковая форма, мелкие int без изменений"""
        plain = record_to_plain({"sips": 10**300001, "straws": 7, "flag": True})
        assert isinstance(plain["sips"], str)
        assert from_any(plain["sips"]) == from_any(10**300001)
        assert plain["straws"] == 7
        assert plain["flag"] is True

    def test_nested_records(self) -> None:
        """Вложенные записи обрабатываются рекурсивно"""
        plain = record_to_plain({"stats": {"best": from_any("1e20")}, "name": "x"})
        assert plain == {"stats": {"best": "1e+20"}, "name": "x"}

    def test_round_trip(self) -> None:
        """plain → numeric → plain сохраняет значения"""
        record = {"straws": 12.0, "sips": "2.5e+1000", "name": "player"}
        assert record_to_plain(record_to_numeric(record)) == record


class TestParseSavedValue:
    """Тесты для parse_saved_value"""

    def test_plain_forms(self) -> None:
        """Числа и строки"""
        assert parse_saved_value(42) == 42
        assert str(parse_saved_value("1e500")) == "1e+500"

    def test_wrapped_forms(self) -> None:
        """Обёртки {"_value": ...} и {"value": ...}"""
        assert parse_saved_value({"_value": "1e500"}).is_extended
        assert parse_saved_value({"value": 7}) == 7
        assert parse_saved_value({"other": 7}, default=3) == 3

    def test_list_takes_first_element(self) -> None:
        """Из списка берётся первый элемент"""
        assert parse_saved_value(["9", "1"]) == 9
        assert parse_saved_value([], default=2) == 2

    def test_unreadable_uses_default(self) -> None:
        """None и мусор → default"""
        assert parse_saved_value(None, default=1) == 1
        assert parse_saved_value("garbage", default=1) == 1
        assert parse_saved_value(float("nan")).is_zero


# =============================================================================
# КОНТРАКТ
# =============================================================================


class TestStateRecordContract:
    """Тесты JSON Schema контракта записи состояния"""

    def test_serialized_counters_are_valid(self) -> None:
        """Сериализованный ResourceCounters проходит схему"""
        record = ResourceCounters(straws=3, sips="1e500", widerStraws=1).to_record()
        validate_state_record(record)

    def test_extra_keys_allowed(self) -> None:
        """Дополнительные ключи сохранения допустимы"""
        assert StateRecordValidator().is_valid({"sips": 1, "lastSaved": "2024-01-01"})

    @pytest.mark.parametrize(
        "record",
        [
            {"sips": -1},
            {"sips": "NaN"},
            {"straws": "abc"},
            {"cups": None},
        ],
    )
    def test_invalid_records(self, record: dict) -> None:
        """Отрицательные, сентинелы и мусор нарушают контракт"""
        validator = StateRecordValidator()
        assert not validator.is_valid(record)
        with pytest.raises(ValidationError):
            validator.validate(record)

    def test_iter_errors_reports_path(self) -> None:
        """Ошибки указывают на поле"""
        errors = list(StateRecordValidator().iter_errors({"sips": "abc", "cups": 1}))
        assert len(errors) == 1
        assert list(errors[0].absolute_path) == ["sips"]

    def test_violations_sorted_by_path(self) -> None:
        """violations() собирает все нарушения по полям"""
        violations = StateRecordValidator().violations({"sips": "abc", "cups": -1, "level": 2})
        assert [violation.path for violation in violations] == ["cups", "sips"]
        assert all(violation.message for violation in violations)

    def test_record_with_numeric_values(self) -> None:
        """Запись с NumericValue проверяется в plain форме"""
        record = {"sips": from_any("1e500"), "straws": from_any(3)}
        assert StateRecordValidator().is_valid(record)
        assert StateRecordValidator().violations(record) == []


class TestSchemaLoader:
    """Тесты для SchemaLoader"""

    def test_missing_directory(self, tmp_path) -> None:
        """Несуществующий каталог → RuntimeError"""
        with pytest.raises(RuntimeError, match="Schema directory not found"):
            SchemaLoader(tmp_path / "missing")

    def test_missing_schema(self, tmp_path) -> None:
        """Несуществующая схема → FileNotFoundError"""
        with pytest.raises(FileNotFoundError):
            SchemaLoader(tmp_path).load_schema("nope")

    def test_invalid_schema(self, tmp_path) -> None:
        """Схема, не прошедшая meta-validation → ValueError"""
        (tmp_path / "broken.json").write_text('{"type": 12}', encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid JSON Schema"):
            SchemaLoader(tmp_path).load_schema("broken")

    def test_schema_cached(self) -> None:
        """Повторная загрузка возвращает тот же объект"""
        loader = SchemaLoader()
        assert loader.load_schema("state_record") is loader.load_schema("state_record")
        assert loader.validator_for("state_record") is loader.validator_for("state_record")

    def test_custom_loader(self, tmp_path) -> None:
        """Валидатор строится из схемы переданного загрузчика"""
        (tmp_path / "state_record.json").write_text(
            '{"type": "object", "required": ["sips"]}', encoding="utf-8"
        )
        validator = StateRecordValidator(SchemaLoader(tmp_path))
        assert not validator.is_valid({})
        assert validator.is_valid({"sips": "anything"})
