"""
Domain models and value objects.

Contains ResourceCounters, cost quotes, production snapshots and the
purchase catalogue.
"""

from sipengine.core.domain.economy import CostCurve, CostQuote, ProductionSnapshot
from sipengine.core.domain.purchases import (
    DEFAULT_UPGRADES,
    PurchaseKind,
    UpgradeDefinition,
)
from sipengine.core.domain.resource_counters import (
    COUNTER_FIELDS,
    FIELD_LOOKUP,
    NumericField,
    ResourceCounters,
)

__all__ = [
    # Economy value objects
    "CostCurve",
    "CostQuote",
    "ProductionSnapshot",
    # Purchase catalogue
    "DEFAULT_UPGRADES",
    "PurchaseKind",
    "UpgradeDefinition",
    # Resource counters
    "COUNTER_FIELDS",
    "FIELD_LOOKUP",
    "NumericField",
    "ResourceCounters",
]
