"""
Иерархия исключений sipengine.

Публичный lenient API никогда не бросает эти исключения наружу:
они используются strict-хелперами и внутри слоёв (кэш, конверсия).
"""

from enum import Enum


class EngineError(Exception):
    """Базовое исключение движка."""


class ConversionErrorKind(str, Enum):
    """Классификация ошибок конверсии."""

    UNPARSEABLE = "UNPARSEABLE"
    NON_FINITE = "NON_FINITE"
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"


class ConversionError(EngineError, ValueError):
    """
    Значение не может быть приведено к NumericValue.

    Attributes:
        kind: Классификация ошибки
        value_repr: repr() исходного значения (для диагностики)
    """

    def __init__(self, kind: ConversionErrorKind, value_repr: str, message: str = "") -> None:
        self.kind = kind
        self.value_repr = value_repr
        super().__init__(message or f"{kind.value}: cannot convert {value_repr}")


class CacheError(EngineError):
    """Внутренняя ошибка слоя мемоизации. Никогда не выходит за пределы слоя."""
