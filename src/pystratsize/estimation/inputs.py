"""
Input resolution and validation for sample size calculation.

Inputs arrive in many forms: polars frames and series, numpy arrays,
mappings of column name to values, plain sequences, or references into a
``dataset`` frame. This module turns each of them into a ``pl.DataFrame``
and checks it against the contract of the argument it was passed as.

Checks run in a fixed order for each input:

1. Row count equals the expected totals' row count
2. Column count equals the expected count (the number of variables for
   per-variable tables, one for per-stratum inputs)
3. No null or NaN cells
4. Numeric dtypes (skipped for the stratum key)

Column names are checked while converting, since an unnamed 2-D array
cannot label the variable dimension.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Optional

import numpy as np
import polars as pl

from ..core.exceptions import (
    ColumnNameError,
    MissingColumnError,
    MissingValueError,
    NonNumericError,
    ShapeMismatchError,
)

logger = logging.getLogger(__name__)


def _is_column_ref(item: Any) -> bool:
    if isinstance(item, bool):
        return False
    return isinstance(item, (str, int, np.integer))


def is_reference(value: Any) -> bool:
    """Whether ``value`` names dataset columns rather than holding data.

    A reference is a column name, a zero-based column index, or a list or
    tuple made only of those.
    """
    if _is_column_ref(value):
        return True
    if isinstance(value, (list, tuple)) and len(value) > 0:
        return all(_is_column_ref(item) for item in value)
    return False


def as_dataset(dataset: Any) -> pl.DataFrame:
    """Convert the optional dataset collector to a frame."""
    if isinstance(dataset, pl.DataFrame):
        return dataset
    return pl.DataFrame(dataset)


def resolve_reference(name: str, value: Any, dataset: pl.DataFrame) -> Any:
    """
    Replace a column reference with the referenced dataset columns.

    Parameters
    ----------
    name : str
        Argument name, used in error messages.
    value : Any
        Column name, column index, a list of those, or data. Data is
        returned unchanged.
    dataset : pl.DataFrame
        Frame the references point into.

    Returns
    -------
    Any
        A ``pl.DataFrame`` selection for references, otherwise ``value``.

    Raises
    ------
    MissingColumnError
        If a name is not a column of ``dataset`` or an index is out of range.
    ColumnNameError
        If the same column is referenced twice.
    """
    if value is None or not is_reference(value):
        return value

    refs = [value] if _is_column_ref(value) else list(value)
    columns = []
    for ref in refs:
        if isinstance(ref, str):
            if ref not in dataset.columns:
                raise MissingColumnError(name, ref)
            columns.append(ref)
        else:
            index = int(ref)
            if not 0 <= index < dataset.width:
                raise MissingColumnError(name, ref)
            columns.append(dataset.columns[index])

    if len(set(columns)) != len(columns):
        raise ColumnNameError(name, f"references the same column twice: {columns}")

    logger.debug("Resolved '%s' to dataset columns %s", name, columns)
    return dataset.select(columns)


def _series_from_values(name: str, values: Any) -> pl.Series:
    return pl.Series(name, list(values), strict=False)


def as_frame(name: str, value: Any) -> pl.DataFrame:
    """
    Convert an input to a ``pl.DataFrame``.

    Single unnamed columns take ``name`` as their column name. Multi-column
    inputs without column names are rejected.

    Parameters
    ----------
    name : str
        Argument name.
    value : Any
        Frame, series, numpy array, mapping, sequence or scalar.

    Returns
    -------
    pl.DataFrame
        The input as a frame.

    Raises
    ------
    ColumnNameError
        If a multi-column input has no column names, or a column name is
        empty.
    ShapeMismatchError
        If the columns of a mapping differ in length.
    """
    if isinstance(value, pl.DataFrame):
        frame = value
    elif isinstance(value, pl.Series):
        frame = value.to_frame(value.name or name)
    elif isinstance(value, np.ndarray):
        frame = _frame_from_array(name, value)
    elif isinstance(value, Mapping):
        try:
            frame = pl.DataFrame(
                {str(key): _series_from_values(str(key), col) for key, col in value.items()}
            )
        except pl.exceptions.ShapeError as exc:
            raise ShapeMismatchError(name, f"columns must have equal lengths: {exc}") from exc
    elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        frame = _frame_from_sequence(name, value)
    elif np.isscalar(value):
        frame = pl.DataFrame({name: _series_from_values(name, [value])})
    else:
        frame = pl.DataFrame(value)

    if any(column == "" for column in frame.columns):
        raise ColumnNameError(name, "must have column names")
    return frame


def _frame_from_array(name: str, array: np.ndarray) -> pl.DataFrame:
    if array.ndim == 0:
        return pl.DataFrame({name: [array.item()]})
    if array.ndim == 1:
        return pl.DataFrame({name: array})
    if array.ndim == 2 and array.shape[1] == 1:
        return pl.DataFrame({name: array[:, 0]})
    raise ColumnNameError(name, "must have column names")


def _frame_from_sequence(name: str, values: Sequence) -> pl.DataFrame:
    rows = list(values)
    nested = [
        isinstance(row, Sequence) and not isinstance(row, (str, bytes))
        for row in rows
    ]
    if not any(nested):
        return pl.DataFrame({name: _series_from_values(name, rows)})
    # Row-wise nested lists carry no column names
    if all(nested) and all(len(row) == 1 for row in rows):
        return pl.DataFrame({name: _series_from_values(name, [row[0] for row in rows])})
    raise ColumnNameError(name, "must have column names")


def _has_missing(frame: pl.DataFrame) -> bool:
    if frame.null_count().sum_horizontal().item() > 0:
        return True
    float_cols = [
        column for column, dtype in frame.schema.items() if dtype.is_float()
    ]
    if not float_cols:
        return False
    return bool(
        frame.select(pl.any_horizontal(pl.col(float_cols).is_nan().any())).item()
    )


def validate_table(
    name: str,
    frame: pl.DataFrame,
    n_rows: int,
    n_cols: Optional[int],
    numeric: bool = True,
    reference: str = "Yh",
    per_stratum: bool = False,
) -> pl.DataFrame:
    """
    Check one input against its shape and content contract.

    Parameters
    ----------
    name : str
        Argument name, used in error messages.
    frame : pl.DataFrame
        The converted input.
    n_rows : int
        Required row count (the number of strata).
    n_cols : int, optional
        Required column count of a per-variable input; ``None`` skips the
        column check. Ignored when ``per_stratum`` is set.
    numeric : bool, default True
        Require numeric dtypes in every column.
    per_stratum : bool, default False
        The input holds one value per stratum and must be a single column,
        whatever the number of variables.
    reference : str, default 'Yh'
        Input the counts come from, used in error messages.

    Returns
    -------
    pl.DataFrame
        The same frame, for chaining.

    Raises
    ------
    ShapeMismatchError
        If the row or column count is wrong.
    MissingValueError
        If any cell is null or NaN.
    NonNumericError
        If ``numeric`` and a column is not numeric.
    """
    if frame.height != n_rows:
        raise ShapeMismatchError(
            name,
            f"length must be equal with '{reference}' row count "
            f"({frame.height} != {n_rows})",
        )
    if per_stratum:
        if frame.width != 1:
            raise ShapeMismatchError(
                name,
                f"must be a single column, got {frame.width} columns",
            )
    elif n_cols is not None and frame.width != n_cols:
        raise ShapeMismatchError(
            name,
            f"and '{reference}' must be equal column count "
            f"({frame.width} != {n_cols})",
        )
    if _has_missing(frame):
        raise MissingValueError(name)
    if numeric:
        non_numeric = [
            column for column, dtype in frame.schema.items() if not dtype.is_numeric()
        ]
        if non_numeric:
            raise NonNumericError(
                name, f"must be all numeric values, got non-numeric columns {non_numeric}"
            )

    logger.debug("Validated '%s': %d rows x %d columns", name, frame.height, frame.width)
    return frame


def prepare_input(
    name: str,
    value: Any,
    n_rows: int,
    n_cols: Optional[int],
    numeric: bool = True,
    per_stratum: bool = False,
) -> pl.DataFrame:
    """Convert, validate and, for numeric inputs, cast an input to Float64."""
    frame = validate_table(
        name, as_frame(name, value), n_rows, n_cols, numeric, per_stratum=per_stratum
    )
    if numeric:
        frame = frame.cast(pl.Float64)
    return frame
