"""
State Record Contract

JSON Schema (Draft 2020-12) контракт сериализованной записи счётчиков:
числа < 1e15 хранятся как JSON number, большие значения как lossless
строка в научной нотации, ключи в camelCase.

Схемы лежат в пакете (sipengine/core/contracts/schema/) и ставятся вместе с ним.
"""

import json
from pathlib import Path
from typing import Any, Dict, Final, Iterator, Mapping, NamedTuple, Optional

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

from sipengine.core.migration.state_record import record_to_plain

STATE_RECORD_SCHEMA: Final[str] = "state_record"


class ContractViolation(NamedTuple):
    """Нарушение контракта: путь к полю и сообщение jsonschema."""

    path: str
    message: str


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик схем и собранных по ним валидаторов.

    Каждая схема читается и проходит meta-validation один раз на загрузчик.
    """

    def __init__(self, schema_dir: Optional[Path] = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        self._schemas: Dict[str, Dict[str, Any]] = {}
        self._validators: Dict[str, Draft202012Validator] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'state_record')

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        schema = json.loads(schema_path.read_text(encoding="utf-8"))

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema

    def validator_for(self, schema_name: str) -> Draft202012Validator:
        if schema_name not in self._validators:
            self._validators[schema_name] = Draft202012Validator(self.load_schema(schema_name))
        return self._validators[schema_name]


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# STATE RECORD VALIDATOR
# =============================================================================


class StateRecordValidator:
    """
    Валидатор записи состояния.

    Принимает как plain запись (загруженный JSON), так и запись с
    NumericValue: перед проверкой она приводится к plain форме.
    """

    def __init__(self, loader: Optional[SchemaLoader] = None):
        self._validator = (loader or _SCHEMA_LOADER).validator_for(STATE_RECORD_SCHEMA)

    def validate(self, record: Mapping[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если запись не соответствует схеме
        """
        self._validator.validate(record_to_plain(record))

    def is_valid(self, record: Mapping[str, Any]) -> bool:
        return self._validator.is_valid(record_to_plain(record))

    def iter_errors(self, record: Mapping[str, Any]) -> Iterator[ValidationError]:
        return self._validator.iter_errors(record_to_plain(record))

    def violations(self, record: Mapping[str, Any]) -> list[ContractViolation]:
        """Все нарушения, отсортированные по пути поля."""
        found = [
            ContractViolation(
                path=".".join(str(part) for part in error.absolute_path) or "<record>",
                message=error.message,
            )
            for error in self.iter_errors(record)
        ]
        return sorted(found)


def validate_state_record(record: Mapping[str, Any]) -> None:
    """
    Валидация записи состояния.

    Raises:
        ValidationError: Если запись не соответствует схеме
    """
    StateRecordValidator().validate(record)
