"""Core configuration and exceptions."""

from .config import SampleSizeConfig
from .exceptions import (
    ColumnNameError,
    DuplicateStratumError,
    InputValidationError,
    MissingColumnError,
    MissingInputError,
    MissingValueError,
    NonFiniteSizeError,
    NonNumericError,
    PyStratSizeError,
    ShapeMismatchError,
)

__all__ = [
    "SampleSizeConfig",
    "PyStratSizeError",
    "InputValidationError",
    "MissingInputError",
    "MissingColumnError",
    "ShapeMismatchError",
    "NonNumericError",
    "MissingValueError",
    "ColumnNameError",
    "DuplicateStratumError",
    "NonFiniteSizeError",
]
