"""
State record conversion: plain сохранения ↔ NumericValue.

record_to_numeric и record_to_plain взаимно обратны для валидных записей:
plain → NumericValue → plain сохраняет значения (extended в строковой форме).
"""

import logging
from decimal import Decimal
from typing import Any, Iterable, Mapping, Optional

from sipengine.core.math.numerical_safeguards import SAFE_NUMBER_THRESHOLD
from sipengine.core.numbers.conversion import (
    INVALID_SENTINELS,
    from_any,
    is_numeric_string,
    try_convert,
)
from sipengine.core.numbers.numeric_value import NumericValue

logger = logging.getLogger(__name__)


def _is_sentinel(text: str) -> bool:
    stripped = text.strip()
    return stripped in INVALID_SENTINELS or stripped.lower() in ("nan", "infinity", "-infinity")


def _is_unsafe_int(value: Any) -> bool:
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and abs(value) >= SAFE_NUMBER_THRESHOLD
    )


def record_to_numeric(
    record: Mapping[str, Any],
    fields: Optional[Iterable[str]] = None,
) -> dict[str, Any]:
    """
    Конверсия числовых полей записи в NumericValue.

    Args:
        record: Plain запись (например, загруженный JSON)
        fields: Ограничить конверсию этими ключами (None → все ключи)

    Returns:
        Новая запись: числа и числовые строки → NumericValue, NaN/Inf и
        строки-сентинелы ("NaN", "Infinity", "undefined", ...) → ZERO,
        прочие строки и не-числовые значения без изменений
    """
    selected = set(fields) if fields is not None else None
    converted: dict[str, Any] = {}

    for key, value in record.items():
        if selected is not None and key not in selected:
            converted[key] = value
        elif isinstance(value, bool):
            converted[key] = value
        elif isinstance(value, (int, float, Decimal)):
            converted[key] = from_any(value)
        elif isinstance(value, str) and _is_sentinel(value):
            logger.debug("Field %s holds invalid sentinel %r, using zero", key, value)
            converted[key] = NumericValue.ZERO
        elif isinstance(value, str) and is_numeric_string(value):
            converted[key] = from_any(value)
        else:
            converted[key] = value

    return converted


def record_to_plain(record: Mapping[str, Any]) -> dict[str, Any]:
    """
    Обратная конверсия: NumericValue → float если безопасен, иначе строка.
    int за порогом безопасности тоже переводится в строковую форму.

    Вложенные dict обрабатываются рекурсивно, остальное без изменений.
    """
    plain: dict[str, Any] = {}
    for key, value in record.items():
        if isinstance(value, NumericValue):
            plain[key] = value.to_plain()
        elif _is_unsafe_int(value):
            # repr() огромного int бросает ValueError в сообщениях jsonschema
            plain[key] = from_any(value).to_plain()
        elif isinstance(value, Mapping):
            plain[key] = record_to_plain(value)
        else:
            plain[key] = value
    return plain


def parse_saved_value(value: Any, default: Any = 0) -> NumericValue:
    """
    Разбор значения из сохранения любой исторической формы.

    Принимает числа, строки, Coercible объекты, обёртки {"_value": ...} и
    {"value": ...}, а также непустые списки (берётся первый элемент).
    Экстремальные значения сохраняются без усечения.

    Examples:
        >>> parse_saved_value({"_value": "1e500"}).is_extended
        True
        >>> parse_saved_value(None, default=1)
        NumericValue(PLAIN, 1.0)
    """
    fallback = from_any(default)

    if value is None:
        return fallback

    if isinstance(value, Mapping):
        for wrapper_key in ("_value", "value"):
            if wrapper_key in value:
                return parse_saved_value(value[wrapper_key], default)
        return fallback

    if isinstance(value, (list, tuple)):
        if not value:
            return fallback
        return parse_saved_value(value[0], default)

    result = try_convert(value)
    if result.error is not None:
        logger.debug(
            "Saved value %s unreadable (%s), using default",
            result.error.value_repr,
            result.error.kind.value,
        )
        return fallback
    return result.value
