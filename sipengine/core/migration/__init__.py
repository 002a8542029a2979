"""
Conversion of persisted state records to and from NumericValue.
"""

from sipengine.core.migration.state_record import (
    parse_saved_value,
    record_to_numeric,
    record_to_plain,
)

__all__ = [
    "parse_saved_value",
    "record_to_numeric",
    "record_to_plain",
]
