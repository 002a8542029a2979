"""
Contract Validation Module

JSON Schema контракты сериализованного состояния sipengine.
"""

from .validators import (
    STATE_RECORD_SCHEMA,
    ContractViolation,
    SchemaLoader,
    StateRecordValidator,
    validate_state_record,
)

__all__ = [
    # Classes
    "ContractViolation",
    "SchemaLoader",
    "StateRecordValidator",
    # Constants
    "STATE_RECORD_SCHEMA",
    # Functions
    "validate_state_record",
]
