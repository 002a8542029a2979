"""
Sanitizer — замена повреждённых счётчиков на документированные fallback.

Счётчик повреждён, если он:
- не приводится к числу (NaN, Infinity, "abc", объект без протокола)
- отрицателен
- превышает sanity ceiling (1e300000)

Повреждённое значение заменяется fallback (1, не ноль), замена логируется
(WARNING) и возвращается как SanitizationEvent для диагностики.
Санитизация валидного входа — no-op.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from sipengine.config import SanitizationConfig
from sipengine.core.contracts.validators import StateRecordValidator
from sipengine.core.domain.resource_counters import (
    COUNTER_FIELDS,
    FIELD_LOOKUP,
    ResourceCounters,
)
from sipengine.core.numbers.conversion import describe_value, from_any, try_convert
from sipengine.core.numbers.numeric_value import NumericValue

logger = logging.getLogger(__name__)

CountersInput = Union[ResourceCounters, Mapping[str, Any]]


class SanitizationReason(str, Enum):
    """Причина замены счётчика."""

    NON_FINITE = "NON_FINITE"
    UNPARSEABLE = "UNPARSEABLE"
    UNSUPPORTED_TYPE = "UNSUPPORTED_TYPE"
    NEGATIVE = "NEGATIVE"
    ABOVE_CEILING = "ABOVE_CEILING"


@dataclass(frozen=True)
class SanitizationEvent:
    """Запись о замене повреждённого значения."""

    field: str
    original: str
    fallback: NumericValue
    reason: SanitizationReason


class Sanitizer:
    """Санитизация счётчиков на границах оценки."""

    def __init__(self, config: Optional[SanitizationConfig] = None):
        self.config = config or SanitizationConfig()
        self._ceiling = from_any(self.config.sanity_ceiling)
        self._contract = StateRecordValidator() if self.config.check_contract else None

    def fallback_for(self, name: str) -> NumericValue:
        return from_any(self.config.fallbacks.get(name, self.config.default_fallback))

    def sanitize_value(
        self, name: str, value: Any
    ) -> tuple[NumericValue, Optional[SanitizationEvent]]:
        """
        Санитизация одного значения.

        Returns:
            (value, None) для валидного значения,
            (fallback, SanitizationEvent) для повреждённого
        """
        result = try_convert(value)

        if result.error is not None:
            reason = SanitizationReason(result.error.kind.value)
        elif result.value.is_negative:
            reason = SanitizationReason.NEGATIVE
        elif result.value.gt(self._ceiling):
            reason = SanitizationReason.ABOVE_CEILING
        else:
            return result.value, None

        fallback = self.fallback_for(name)
        event = SanitizationEvent(
            field=name,
            original=describe_value(value),
            fallback=fallback,
            reason=reason,
        )
        logger.warning(
            "Counter %s=%s is corrupted (%s), substituting fallback %s",
            name,
            event.original,
            reason.value,
            fallback,
        )
        return fallback, event

    def sanitize_counters(
        self, counters: CountersInput
    ) -> tuple[ResourceCounters, tuple[SanitizationEvent, ...]]:
        """
        Санитизация набора счётчиков.

        Args:
            counters: ResourceCounters или сырая запись (snake_case или
                camelCase ключи, неизвестные ключи игнорируются)

        Returns:
            (ResourceCounters, events); валидный ResourceCounters
            возвращается тем же объектом с пустым списком событий
        """
        if isinstance(counters, ResourceCounters):
            raw = {name: getattr(counters, name) for name in COUNTER_FIELDS}
        else:
            self._check_contract(counters)
            raw = {
                FIELD_LOOKUP[key]: value
                for key, value in counters.items()
                if key in FIELD_LOOKUP
            }

        clean: dict[str, NumericValue] = {}
        events: list[SanitizationEvent] = []
        for name, value in raw.items():
            clean[name], event = self.sanitize_value(name, value)
            if event is not None:
                events.append(event)

        if isinstance(counters, ResourceCounters) and not events:
            return counters, ()

        return ResourceCounters(**clean), tuple(events)

    def _check_contract(self, record: Mapping[str, Any]) -> None:
        if self._contract is None:
            return
        for violation in self._contract.violations(record):
            logger.debug(
                "State record contract violation at %s: %s", violation.path, violation.message
            )
