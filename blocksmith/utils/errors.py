"""Errors and parameter checks for BlockSmith.

Invalid grid, pattern or export parameters are fatal to the call that
received them and raise :class:`ParameterError` before any block is produced.
Missing optional block fields are never errors; the export formatter writes
placeholders instead.
"""

import math
import numbers
from typing import Any, Iterable, Optional


class BlockSmithError(Exception):
    """Base exception for BlockSmith errors."""

    def __init__(
        self,
        message: str,
        suggestion: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        """Initialize BlockSmith error.

        Args:
            message: Primary error message.
            suggestion: Optional suggestion for fixing the error.
            details: Optional dictionary with additional error details.
        """
        super().__init__(message)
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        if self.suggestion:
            return f"{self.message}\n\nSuggestion: {self.suggestion}"
        return self.message


class DataValidationError(BlockSmithError):
    """Raised when a block table is malformed (e.g. no coordinate columns)."""


class ParameterError(BlockSmithError):
    """Raised when grid, pattern or export parameters are invalid."""


def format_parameter_error(
    parameter_name: str,
    value: Any,
    valid_values: Optional[Iterable[Any]] = None,
    constraint: Optional[str] = None,
) -> str:
    """Build the message for an invalid parameter.

    Example:
        >>> print(format_parameter_error("nx", 0, constraint="Must be > 0"))
        Invalid value for parameter 'nx': 0
        Constraint: Must be > 0
    """
    lines = [f"Invalid value for parameter '{parameter_name}': {value!r}"]
    if valid_values:
        lines.append(f"Valid values: {', '.join(map(str, valid_values))}")
    if constraint:
        lines.append(f"Constraint: {constraint}")
    return "\n".join(lines)


def raise_parameter_error(
    parameter_name: str,
    value: Any,
    valid_values: Optional[Iterable[Any]] = None,
    constraint: Optional[str] = None,
    suggestion: Optional[str] = None,
) -> None:
    """Raise a :class:`ParameterError` for ``parameter_name``.

    Args:
        parameter_name: Name of the invalid parameter.
        value: Value that was provided.
        valid_values: Accepted values, listed in the message.
        constraint: Constraint that was violated.
        suggestion: How to fix the error.

    Raises:
        ParameterError: Always.
    """
    valid_values = list(valid_values) if valid_values is not None else None
    raise ParameterError(
        format_parameter_error(parameter_name, value, valid_values, constraint),
        suggestion=suggestion,
        details={"parameter": parameter_name, "value": value, "valid_values": valid_values},
    )


def raise_validation_error(
    message: str,
    expected: Optional[str] = None,
    received: Optional[str] = None,
) -> None:
    """Raise a :class:`DataValidationError` describing a malformed block table."""
    lines = [message]
    if expected:
        lines.append(f"Expected: {expected}")
    if received:
        lines.append(f"Received: {received}")
    raise DataValidationError(
        "\n".join(lines), details={"expected": expected, "received": received}
    )


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and not math.isnan(value)


def check_positive(name: str, value: Optional[float]) -> None:
    """Raise ParameterError unless ``value`` is None or a number > 0."""
    if value is not None and not (_is_number(value) and value > 0):
        raise_parameter_error(name, value, constraint="Must be greater than 0")


def check_non_negative(name: str, value: Optional[float]) -> None:
    """Raise ParameterError unless ``value`` is None or a number >= 0."""
    if value is not None and not (_is_number(value) and value >= 0):
        raise_parameter_error(name, value, constraint="Must be non-negative")


def check_fraction(name: str, value: Optional[float]) -> None:
    """Raise ParameterError unless ``value`` is None or within [0, 1]."""
    if value is not None and not (_is_number(value) and 0 <= value <= 1):
        raise_parameter_error(name, value, constraint="Must be between 0 and 1")
