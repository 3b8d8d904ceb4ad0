"""
Input validation utilities for re-ranking configuration.

This module provides validation functions that turn out-of-range tuning
values into explicit configuration errors before they reach the fitter.
"""

import math
import numbers
from typing import Any, List, Optional, Union

from .error_handler import ConfigurationError


def validate_numeric_range(
    value: Union[int, float],
    min_value: Optional[Union[int, float]] = None,
    max_value: Optional[Union[int, float]] = None,
    field_name: str = "value"
) -> Union[int, float]:
    """
    Validate a numeric value is within specified range.

    Args:
        value: Numeric value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive)
        field_name: Name of the field for error messages

    Returns:
        The validated value

    Raises:
        ConfigurationError: If value is not a finite number or is outside the allowed range
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value):
        raise ConfigurationError(
            f"{field_name} must be a finite number, got {value!r}",
            details={"field_name": field_name, "value": value}
        )

    if min_value is not None and value < min_value:
        raise ConfigurationError(
            f"{field_name} {value} is below minimum {min_value}",
            details={
                "field_name": field_name,
                "value": value,
                "min_value": min_value,
                "max_value": max_value
            }
        )

    if max_value is not None and value > max_value:
        raise ConfigurationError(
            f"{field_name} {value} is above maximum {max_value}",
            details={
                "field_name": field_name,
                "value": value,
                "min_value": min_value,
                "max_value": max_value
            }
        )

    return value


def validate_enum_value(
    value: Any,
    allowed_values: List[Any],
    field_name: str = "value"
) -> Any:
    """
    Validate a value is one of the allowed enum values.

    Args:
        value: Value to validate
        allowed_values: List of allowed values
        field_name: Name of the field for error messages

    Returns:
        The validated value

    Raises:
        ConfigurationError: If value is not in the allowed list
    """
    if value not in allowed_values:
        raise ConfigurationError(
            f"{field_name} '{value}' is not allowed. Allowed values: {allowed_values}",
            details={
                "field_name": field_name,
                "value": value,
                "allowed_values": allowed_values
            }
        )

    return value
