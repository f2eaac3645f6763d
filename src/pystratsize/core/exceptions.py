"""
Exceptions raised by pyStratSize.

Every validation failure names the input that violated its contract so the
caller can fix that input and call again. Nothing here is caught inside the
library.
"""

from __future__ import annotations


class PyStratSizeError(Exception):
    """Base class for all pyStratSize errors."""


class InputValidationError(PyStratSizeError, ValueError):
    """An input failed its shape, type or content contract.

    Parameters
    ----------
    input_name : str
        Name of the offending argument (``"Yh"``, ``"s2h"``, ...).
    message : str
        Description of the violated constraint. It is prefixed with the
        quoted input name.
    """

    def __init__(self, input_name: str, message: str):
        self.input_name = input_name
        super().__init__(f"'{input_name}' {message}")


class MissingInputError(InputValidationError):
    """A required input was not supplied."""

    def __init__(self, input_name: str):
        super().__init__(input_name, "is required")


class MissingColumnError(InputValidationError):
    """A column reference does not exist in the supplied dataset."""

    def __init__(self, input_name: str, reference=None):
        self.reference = reference
        super().__init__(input_name, "does not exist in 'dataset'!")


class ShapeMismatchError(InputValidationError):
    """Row or column count disagrees with the expected totals table."""


class NonNumericError(InputValidationError):
    """A numeric-only input holds non-numeric values."""


class MissingValueError(InputValidationError):
    """An input contains null or NaN cells."""

    def __init__(self, input_name: str):
        super().__init__(input_name, "has unknown values")


class ColumnNameError(InputValidationError):
    """Column names are absent or clash with other columns."""


class DuplicateStratumError(InputValidationError):
    """The stratum key repeats values and duplicates are configured as errors."""

    def __init__(self, input_name: str, duplicates: list):
        self.duplicates = duplicates
        super().__init__(
            input_name,
            f"has duplicated strata: {duplicates}. Each stratum must appear "
            "once, or set duplicate_strata='allow' in SampleSizeConfig.",
        )


class NonFiniteSizeError(PyStratSizeError, ArithmeticError):
    """The sample size formula produced infinite or NaN values."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(
            f"{count} sample size(s) are not finite; check for zero response "
            "rates, population sizes, variances or design effects"
        )
