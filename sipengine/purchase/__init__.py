"""
Purchase evaluation: sanitization and the Quote → Validate → Commit | Reject flow.
"""

from sipengine.purchase.evaluator import (
    PurchaseEvaluator,
    PurchasePhase,
    PurchaseResult,
    RejectReason,
)
from sipengine.purchase.sanitizer import (
    SanitizationEvent,
    SanitizationReason,
    Sanitizer,
)

__all__ = [
    # Evaluator
    "PurchaseEvaluator",
    "PurchasePhase",
    "PurchaseResult",
    "RejectReason",
    # Sanitizer
    "SanitizationEvent",
    "SanitizationReason",
    "Sanitizer",
]
