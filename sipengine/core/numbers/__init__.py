"""
Numeric primitives: NumericValue, conversion layer, display formatting.
"""

from sipengine.core.numbers.conversion import (
    INVALID_SENTINELS,
    Coercible,
    ConversionResult,
    LegacyNumberAdapter,
    from_any,
    is_extreme_value,
    is_numeric_string,
    magnitude_description,
    register_adapter,
    to_numeric_strict,
    to_safe_number,
    try_convert,
)
from sipengine.core.numbers.formatting import (
    DISPLAY_FRACTION_DIGITS,
    clean_extreme_decimals,
    format_numeric,
)
from sipengine.core.numbers.numeric_value import (
    DECIMAL_PRECISION,
    ENGINE_CONTEXT,
    NumericKind,
    NumericValue,
    float_to_decimal,
    maximum,
    minimum,
)

__all__ = [
    # NumericValue
    "DECIMAL_PRECISION",
    "ENGINE_CONTEXT",
    "NumericKind",
    "NumericValue",
    "float_to_decimal",
    "maximum",
    "minimum",
    # Conversion
    "INVALID_SENTINELS",
    "Coercible",
    "ConversionResult",
    "LegacyNumberAdapter",
    "from_any",
    "is_extreme_value",
    "is_numeric_string",
    "magnitude_description",
    "register_adapter",
    "to_numeric_strict",
    "to_safe_number",
    "try_convert",
    # Formatting
    "DISPLAY_FRACTION_DIGITS",
    "clean_extreme_decimals",
    "format_numeric",
]
