"""Purchase Evaluator — Quote → Validate → Commit | Reject.

Покупка — атомарная транзакция над ResourceCounters:
1. Санитизация входа (повреждённые счётчики → fallback, событие в результате)
2. QUOTE: стоимость следующей единицы из каталога
3. VALIDATE: стоимость положительна и конечна, баланс >= стоимости
4. COMMIT: новый снимок (count + 1, sips - cost) и полный пересчёт производства;
   LEVEL дополнительно начисляет награду за уровень (sips и total_sips_earned)
   REJECT: вход не меняется

Инварианты:
- отклонённая покупка не меняет счётчики
- подтверждённая покупка меняет все зависимые значения одним снимком
- счётчики никогда не становятся отрицательными
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sipengine.config import EngineConfig
from sipengine.core.domain.economy import CostQuote, ProductionSnapshot
from sipengine.core.domain.purchases import PurchaseKind
from sipengine.core.domain.resource_counters import ResourceCounters
from sipengine.core.numbers.numeric_value import NumericValue
from sipengine.engine import EconomyEngine
from sipengine.purchase.sanitizer import CountersInput, SanitizationEvent, Sanitizer

logger = logging.getLogger(__name__)


class PurchasePhase(str, Enum):
    """Фаза, на которой завершилась оценка покупки."""

    QUOTE = "QUOTE"
    VALIDATE = "VALIDATE"
    COMMIT = "COMMIT"
    REJECT = "REJECT"


class RejectReason(str, Enum):
    """Причина отклонения покупки."""

    INVALID_COST = "INVALID_COST"
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"
    UNKNOWN_PURCHASE = "UNKNOWN_PURCHASE"


@dataclass(frozen=True)
class PurchaseResult:
    """Результат оценки покупки."""

    kind: PurchaseKind
    phase: PurchasePhase
    committed: bool
    reject_reason: Optional[RejectReason]

    quote: Optional[CostQuote]
    spent: NumericValue

    # Полный снимок после покупки (или санитизированный вход при REJECT)
    counters: ResourceCounters
    production: ProductionSnapshot

    # Диагностика
    sanitization_events: tuple[SanitizationEvent, ...]
    details: str


class PurchaseEvaluator:
    """Оценка и проведение покупок.

    Вся арифметика идёт через EconomyEngine (кэш стоимости и производства),
    вход проходит через Sanitizer.
    """

    def __init__(
        self,
        engine: Optional[EconomyEngine] = None,
        config: Optional[EngineConfig] = None,
    ):
        """Инициализация evaluator.

        Args:
            engine: движок (по умолчанию создаётся с config)
            config: конфигурация нового движка (не используется, если engine передан)
        """
        self.engine = engine or EconomyEngine(config)
        self.config = self.engine.config
        self.sanitizer = Sanitizer(self.config.sanitization)

    def quote(self, kind: PurchaseKind, counters: CountersInput) -> Optional[CostQuote]:
        """Котировка без проведения; None для неизвестного вида покупки."""
        clean, _ = self.sanitizer.sanitize_counters(counters)
        return self._quote(_resolve_kind(kind), clean)

    def can_afford(self, kind: PurchaseKind, counters: CountersInput) -> bool:
        result = self.evaluate(kind, counters)
        return result.committed

    def affordability_table(self, counters: CountersInput) -> dict[PurchaseKind, bool]:
        clean, _ = self.sanitizer.sanitize_counters(counters)
        return {kind: self.evaluate(kind, clean).committed for kind in self.config.upgrades}

    def evaluate(self, kind: PurchaseKind, counters: CountersInput) -> PurchaseResult:
        """Оценка покупки: Quote → Validate → Commit | Reject.

        Args:
            kind: вид покупки
            counters: текущие счётчики (ResourceCounters или сырая запись)

        Returns:
            PurchaseResult; при committed=True counters — новый снимок
        """
        clean, events = self.sanitizer.sanitize_counters(counters)

        # 1. QUOTE
        resolved = _resolve_kind(kind)
        quote = self._quote(resolved, clean)
        if resolved is None or quote is None:
            return self._reject(
                kind,
                PurchasePhase.QUOTE,
                RejectReason.UNKNOWN_PURCHASE,
                None,
                clean,
                events,
                details=f"no definition for {kind}",
            )

        # 2. VALIDATE
        if not quote.price.is_positive:
            logger.warning("Purchase %s quoted non-positive cost %s", resolved.value, quote.price)
            return self._reject(
                kind,
                PurchasePhase.VALIDATE,
                RejectReason.INVALID_COST,
                quote,
                clean,
                events,
                details=f"cost={quote.price} is not positive",
            )

        if clean.sips.lt(quote.price):
            return self._reject(
                kind,
                PurchasePhase.VALIDATE,
                RejectReason.INSUFFICIENT_FUNDS,
                quote,
                clean,
                events,
                details=f"sips={clean.sips} < cost={quote.price}",
            )

        # 3. COMMIT
        counter = self.config.upgrades[resolved].counter
        remaining = clean.sips - quote.price
        if remaining.is_negative:
            remaining = NumericValue.ZERO

        changes = {counter: getattr(clean, counter) + 1, "sips": remaining}
        if resolved is PurchaseKind.LEVEL:
            # награда считается по выходу за цикл до покупки
            gained = self.engine.level_up_gain(clean)
            changes["sips"] = remaining + gained
            changes["total_sips_earned"] = clean.total_sips_earned + gained

        updated = clean.updated(**changes)
        production = self.engine.recalc_production(updated)

        logger.debug("Purchase %s committed for %s", resolved.value, quote.price)

        return PurchaseResult(
            kind=resolved,
            phase=PurchasePhase.COMMIT,
            committed=True,
            reject_reason=None,
            quote=quote,
            spent=quote.price,
            counters=updated,
            production=production,
            sanitization_events=events,
            details=(
                f"{counter}: {getattr(clean, counter)} -> {getattr(updated, counter)}, "
                f"sips: {clean.sips} -> {updated.sips}"
            ),
        )

    def apply(self, result: PurchaseResult, counters: ResourceCounters) -> ResourceCounters:
        """Все или ничего: новый снимок при COMMIT, иначе исходные счётчики."""
        if result.committed:
            return result.counters
        return counters

    def _quote(
        self, kind: Optional[PurchaseKind], counters: ResourceCounters
    ) -> Optional[CostQuote]:
        if kind is None or kind not in self.config.upgrades:
            return None
        return self.engine.quote_purchase(kind, counters)

    def _reject(
        self,
        kind: PurchaseKind,
        phase: PurchasePhase,
        reason: RejectReason,
        quote: Optional[CostQuote],
        counters: ResourceCounters,
        events: tuple[SanitizationEvent, ...],
        details: str,
    ) -> PurchaseResult:
        """Создание результата REJECT (счётчики без изменений)."""
        logger.debug("Purchase %r rejected at %s: %s", kind, phase.value, details)
        return PurchaseResult(
            kind=kind,
            phase=PurchasePhase.REJECT,
            committed=False,
            reject_reason=reason,
            quote=quote,
            spent=NumericValue.ZERO,
            counters=counters,
            production=self.engine.recalc_production(counters),
            sanitization_events=events,
            details=f"{phase.value}: {details}",
        )


def _resolve_kind(kind: object) -> Optional[PurchaseKind]:
    try:
        return PurchaseKind(kind)
    except ValueError:
        return None
