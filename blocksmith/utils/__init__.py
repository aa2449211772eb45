"""Utility modules for BlockSmith."""

from blocksmith.utils.errors import (
    BlockSmithError,
    DataValidationError,
    ParameterError,
    check_fraction,
    check_non_negative,
    check_positive,
    format_parameter_error,
    raise_parameter_error,
    raise_validation_error,
)

__all__ = [
    "BlockSmithError",
    "DataValidationError",
    "ParameterError",
    "check_fraction",
    "check_non_negative",
    "check_positive",
    "format_parameter_error",
    "raise_parameter_error",
    "raise_validation_error",
]
