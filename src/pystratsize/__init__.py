"""
pyStratSize: sample size planning for stratified surveys.

Computes the minimum sample size per stratum needed to estimate totals
with a target coefficient of variation, given expected totals, population
variances, population sizes, response rates and design effects.
"""

from .core.config import SampleSizeConfig
from .core.exceptions import (
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
from .estimation.sample_size import expsize, sample_size_expr

__version__ = "0.1.0"

__all__ = [
    "expsize",
    "sample_size_expr",
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
