"""
Centralized error handling for geometric re-ranking.

This module provides the exception classes raised by the posting list,
the configuration layer and the robust model fitter, plus a helper for
logging failures that are absorbed rather than propagated.
"""

import logging
from typing import Any, Dict, Optional
from dataclasses import dataclass


class GeomRankError(Exception):
    """Base exception class for all geomrank errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(GeomRankError):
    """Raised when a configuration value is out of range or malformed."""
    pass


class ConfigurationParseError(ConfigurationError):
    """Raised when a named configuration value (e.g. a scoring scheme) is unknown."""
    pass


class MissingTermError(GeomRankError, KeyError):
    """Raised when payloads are requested for a term never inserted into a posting list."""

    def __str__(self) -> str:
        return GeomRankError.__str__(self)


class UnsupportedConversionError(GeomRankError, NotImplementedError):
    """Raised when a payload posting list is asked for generic positional postings."""
    pass


class DegenerateFitInput(GeomRankError):
    """Raised when the robust model fitter is handed an empty correspondence set."""
    pass


class ModelEstimationError(GeomRankError):
    """Raised when a transform cannot be estimated from a set of point pairs."""
    pass


@dataclass
class ErrorContext:
    """Context information for error reporting."""
    operation: str
    module: str
    function: str
    input_data: Optional[Dict[str, Any]] = None
    timestamp: Optional[str] = None


def handle_error(
    error: Exception,
    context: ErrorContext,
    logger: logging.Logger,
    reraise: bool = True,
    default_return: Any = None
) -> Any:
    """
    Centralized error handling with logging and optional recovery.

    Args:
        error: The exception that occurred
        context: Context information about where the error occurred
        logger: Logger instance to use for error reporting
        reraise: Whether to re-raise the exception after logging
        default_return: Value to return if not re-raising

    Returns:
        The default_return value if not re-raising

    Raises:
        The original exception if reraise is True
    """
    error_msg = f"Error in {context.module}.{context.function} during {context.operation}"

    if isinstance(error, GeomRankError):
        error_msg += f": {error.message}"
        if error.details:
            error_msg += f" | Details: {error.details}"
    else:
        error_msg += f": {str(error)}"

    logger.error(
        error_msg,
        extra={
            "error_type": type(error).__name__,
            "operation": context.operation,
            "error_module": context.module,
            "error_function": context.function,
            "input_data": context.input_data,
            "timestamp": context.timestamp,
            "exception": error
        },
        exc_info=True
    )

    if reraise:
        raise error

    return default_return
