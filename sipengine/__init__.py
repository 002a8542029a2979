"""
sipengine — unlimited-scale numeric and economy engine for an idle clicker.
"""

from sipengine.config import EngineConfig
from sipengine.core.domain import PurchaseKind, ResourceCounters
from sipengine.core.numbers import NumericValue, format_numeric, from_any
from sipengine.engine import EconomyEngine
from sipengine.purchase import PurchaseEvaluator, PurchaseResult

__version__ = "0.1.0"

__all__ = [
    "EconomyEngine",
    "EngineConfig",
    "NumericValue",
    "PurchaseEvaluator",
    "PurchaseKind",
    "PurchaseResult",
    "ResourceCounters",
    "format_numeric",
    "from_any",
]
