"""
ResourceCounters — Модель счётчиков ресурсов игрока

Immutable Pydantic модель: каждое поле NumericValue, strict коэрсия через
to_numeric_strict. Повреждённые значения (NaN, Infinity, мусор) модель
отвергает: сырые записи проходят через Sanitizer, который подставляет
fallback и фиксирует замену.
Сериализация: float если безопасен, иначе lossless строка (см. state_record.json).
Принимает исходные camelCase имена сохранений (widerStraws, totalSipsEarned).
"""

from typing import Annotated, Any, Final, Union

from pydantic import (
    BaseModel,
    Field,
    PlainSerializer,
    PlainValidator,
    ValidationInfo,
    field_validator,
)

from sipengine.core.numbers.conversion import to_numeric_strict
from sipengine.core.numbers.numeric_value import NumericValue


def _serialize(value: NumericValue) -> Union[float, str]:
    return value.to_plain()


NumericField = Annotated[
    NumericValue,
    PlainValidator(to_numeric_strict),
    PlainSerializer(_serialize, return_type=Union[float, str]),
]


class ResourceCounters(BaseModel):
    """
    Снимок счётчиков ресурсов.

    Все значения неотрицательны.
    """

    # Постройки
    straws: NumericField = Field(default=NumericValue.ZERO, description="Количество трубочек")
    cups: NumericField = Field(default=NumericValue.ZERO, description="Количество стаканов")

    # Апгрейды
    suctions: NumericField = Field(default=NumericValue.ZERO, description="Апгрейды клика")
    wider_straws: NumericField = Field(
        default=NumericValue.ZERO,
        alias="widerStraws",
        description="Уровень апгрейда трубочек",
    )
    better_cups: NumericField = Field(
        default=NumericValue.ZERO,
        alias="betterCups",
        description="Уровень апгрейда стаканов",
    )
    faster_drinks: NumericField = Field(
        default=NumericValue.ZERO,
        alias="fasterDrinks",
        description="Апгрейды скорости цикла",
    )
    critical_clicks: NumericField = Field(
        default=NumericValue.ZERO,
        alias="criticalClicks",
        description="Апгрейды критического клика",
    )
    level: NumericField = Field(default=NumericValue.ONE, description="Уровень игрока")

    # Валюта
    sips: NumericField = Field(default=NumericValue.ZERO, description="Текущий баланс")
    total_sips_earned: NumericField = Field(
        default=NumericValue.ZERO,
        alias="totalSipsEarned",
        description="Заработано за всё время",
    )

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": True,
    }

    @field_validator("*")
    @classmethod
    def validate_non_negative(cls, value: NumericValue, info: ValidationInfo) -> NumericValue:
        if value.is_negative:
            raise ValueError(f"{info.field_name} must be non-negative, got {value}")
        return value

    def updated(self, **changes: Any) -> "ResourceCounters":
        """Новый снимок с изменениями (с полной валидацией)."""
        values = {name: getattr(self, name) for name in COUNTER_FIELDS}
        values.update(changes)
        return ResourceCounters(**values)

    def to_record(self) -> dict[str, Union[float, str]]:
        """Plain-запись с camelCase ключами."""
        return self.model_dump(by_alias=True)


COUNTER_FIELDS: Final[tuple[str, ...]] = tuple(ResourceCounters.model_fields)

# snake_case и camelCase имя → имя поля
FIELD_LOOKUP: Final[dict[str, str]] = {
    **{name: name for name in COUNTER_FIELDS},
    **{
        info.alias: name
        for name, info in ResourceCounters.model_fields.items()
        if info.alias is not None
    },
}
