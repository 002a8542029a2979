"""
Core math: примитивы численной безопасности для plain-чисел (float).
"""

from sipengine.core.math.numerical_safeguards import (
    DISPLAY_SCIENTIFIC_THRESHOLD,
    EXTREME_VALUE_THRESHOLD,
    SAFE_NUMBER_THRESHOLD,
    clamp,
    clamp_exponent,
    is_safe_number,
    is_valid_float,
    safe_divide,
    sanitize_float,
    validate_in_range,
    validate_non_negative,
)

__all__ = [
    # Thresholds
    "DISPLAY_SCIENTIFIC_THRESHOLD",
    "EXTREME_VALUE_THRESHOLD",
    "SAFE_NUMBER_THRESHOLD",
    # Float boundary
    "is_safe_number",
    "is_valid_float",
    "sanitize_float",
    "safe_divide",
    # Exponent / range
    "clamp",
    "clamp_exponent",
    "validate_in_range",
    "validate_non_negative",
]
