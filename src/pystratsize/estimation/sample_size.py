"""
Minimum sample size per stratum for estimating totals.

For every stratum h and variable of interest, the sample size needed to
reach a target coefficient of variation of the estimated total is

    n_h = N_h² × S²_h × deff_h / (R_h × ((Y_h × CV_h / 100)² + N_h × S²_h × deff_h))

Where:
- N_h = population size of the stratum (``poph``)
- S²_h = expected population variance of the variable (``s2h``)
- deff_h = expected design effect (``deffh``), 1 under simple random sampling
- R_h = expected response rate (``Rh``), 1 under full response
- Y_h = expected total of the variable (``estim``, from ``Yh``)
- CV_h = target coefficient of variation in percent (``CVh``)

This is the stratum sample size n_h solving

    CV_h / 100 = sqrt(deff_h × N_h² × (1 - n_h/N_h) × S²_h / n_h) / Y_h

for the respondent count, inflated by 1/R_h for expected nonresponse.

Inputs are given "wide", one column per variable of interest. They are
reshaped to "long" form, one row per stratum and variable, and aligned with
full outer joins on the stratum key and variable name, so a key missing
from one input shows up as nulls rather than a dropped row.

Division by zero is not guarded. Zero response rates, population sizes,
variances or design effects give ``inf`` or ``NaN`` sizes, which are
reported according to ``SampleSizeConfig.nonfinite_sizes``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import polars as pl

from ..core.config import SampleSizeConfig
from ..core.exceptions import (
    ColumnNameError,
    DuplicateStratumError,
    MissingInputError,
    NonFiniteSizeError,
    ShapeMismatchError,
)
from .constants import (
    CV_PERCENT_SCALE,
    CVH_COL,
    DEFAULT_DESIGN_EFFECT,
    DEFAULT_RESPONSE_RATE,
    DEFAULT_STRATUM_COL,
    DEFFH_COL,
    ESTIM_COL,
    NH_COL,
    POPH_COL,
    RESULT_COLUMNS,
    RH_COL,
    S2H_COL,
    VARIABLE_COL,
)
from .inputs import as_dataset, as_frame, prepare_input, resolve_reference, validate_table

logger = logging.getLogger(__name__)


def sample_size_expr(
    estim: str = ESTIM_COL,
    s2h: str = S2H_COL,
    poph: str = POPH_COL,
    rh: str = RH_COL,
    deffh: str = DEFFH_COL,
    cvh: str = CVH_COL,
) -> pl.Expr:
    """
    Minimum sample size as a Polars expression.

    Parameters
    ----------
    estim, s2h, poph, rh, deffh, cvh : str
        Column names of the expected total, population variance, population
        size, response rate, design effect and target CV (in percent).

    Returns
    -------
    pl.Expr
        Expression for n_h, aliased to ``nh``.
    """
    design_var = pl.col(poph) * pl.col(s2h) * pl.col(deffh)
    target = (pl.col(estim) * pl.col(cvh) / CV_PERCENT_SCALE) ** 2
    return (
        pl.col(poph) ** 2
        * pl.col(s2h)
        * pl.col(deffh)
        / (pl.col(rh) * (target + design_var))
    ).alias(NH_COL)


def _melt_wide(
    strata: pl.DataFrame, wide: pl.DataFrame, value_name: str
) -> pl.DataFrame:
    """Reshape a per-variable table to (stratum, variable, value) rows."""
    stratum_col = strata.columns[0]
    return pl.concat([strata, wide], how="horizontal").unpivot(
        index=stratum_col,
        variable_name=VARIABLE_COL,
        value_name=value_name,
    )


def _melt_scalar(
    strata: pl.DataFrame, scalar: pl.DataFrame, value_name: str
) -> pl.DataFrame:
    """Key a per-stratum input by stratum only."""
    return pl.concat(
        [strata, scalar.rename({scalar.columns[0]: value_name})], how="horizontal"
    )


def _outer_join(left: pl.DataFrame, right: pl.DataFrame, on: list[str]) -> pl.DataFrame:
    joined = left.join(right, on=on, how="full", coalesce=True)
    logger.debug(
        "Outer join on %s: %d x %d rows -> %d rows",
        on,
        left.height,
        right.height,
        joined.height,
    )
    return joined


def _relabel_positionally(
    name: str, frame: pl.DataFrame, variables: list[str]
) -> pl.DataFrame:
    """Give ``frame`` the variable names of ``Yh``, column by column."""
    if frame.columns != variables:
        logger.debug(
            "Matching '%s' columns to 'Yh' by position: %s",
            name,
            dict(zip(frame.columns, variables)),
        )
    return frame.rename(dict(zip(frame.columns, variables)))


def _check_duplicate_strata(strata: pl.DataFrame, policy: str) -> None:
    stratum_col = strata.columns[0]
    duplicated = strata.filter(pl.col(stratum_col).is_duplicated())
    if duplicated.is_empty() or policy == "allow":
        return

    keys = duplicated[stratum_col].unique(maintain_order=True).to_list()
    if policy == "error":
        raise DuplicateStratumError("H", keys)
    logger.warning(
        "Stratum key '%s' repeats values %s; rows of repeated strata are "
        "combined pairwise during the merge",
        stratum_col,
        keys,
    )


def _check_nonfinite(result: pl.DataFrame, policy: str) -> None:
    if policy == "allow":
        return

    count = result.select(
        (pl.col(NH_COL).is_infinite() | pl.col(NH_COL).is_nan()).sum()
    ).item()
    if not count:
        return
    if policy == "error":
        raise NonFiniteSizeError(count)
    logger.warning(
        "%d sample size(s) are not finite; check for zero response rates, "
        "population sizes, variances or design effects",
        count,
    )


def expsize(
    Yh: Any,
    H: Any,
    s2h: Any,
    poph: Any,
    Rh: Any = None,
    deffh: Any = None,
    CVh: Any = None,
    dataset: Any = None,
    config: Optional[SampleSizeConfig] = None,
) -> pl.DataFrame:
    """
    Compute the minimum sample size per stratum for estimates of totals.

    The calculation takes into account the expected totals, population
    variance, expected response rate and design effect in each stratum,
    and the coefficient of variation to be achieved.

    Parameters
    ----------
    Yh : frame-like or column reference
        Expected totals of the variables of interest, one row per stratum
        and one named column per variable.
    H : frame-like or column reference
        Stratum key, a single column with one row per stratum. Any dtype.
    s2h : frame-like or column reference
        Expected population variance S² of each variable in each stratum.
        Column i describes the same variable as column i of ``Yh``.
    poph : frame-like or column reference
        Population size of each stratum.
    Rh : frame-like or column reference, optional
        Expected response rate of each stratum. Defaults to 1 (full
        response).
    deffh : frame-like or column reference, optional
        Expected design effect of each variable in each stratum. Column i
        describes the same variable as column i of ``Yh``. Defaults to 1.
    CVh : frame-like or column reference
        Coefficient of variation to achieve in each stratum, in percent.
    dataset : frame-like, optional
        Data with one row per stratum. When given, inputs may be column
        names, zero-based column indices, or lists of those. A plain list
        of integers is then read as column indices, not as data; pass
        numeric data as a ``pl.Series``, numpy array or list of floats.
    config : SampleSizeConfig, optional
        Policies for duplicate strata and non-finite sizes.

    Returns
    -------
    pl.DataFrame
        One row per stratum and variable with the columns: the stratum key
        (named after ``H``), ``variable``, ``estim``, ``deffh``, ``s2h``,
        ``CVh``, ``Rh``, ``poph`` and ``nh``, the minimal sample size to
        achieve the target CV.

    Raises
    ------
    MissingColumnError
        If a reference does not exist in ``dataset``.
    ShapeMismatchError
        If an input's row or column count disagrees with ``Yh``.
    MissingValueError
        If an input contains null or NaN values.
    NonNumericError
        If a numeric input holds non-numeric values.
    ColumnNameError
        If a multi-column input has no column names, or the stratum column
        name clashes with a variable or result column.

    Examples
    --------
    >>> data = pl.DataFrame({
    ...     "H": [1, 2, 3], "Yh": [10, 20, 30], "Yh1": [40, 50, 60],
    ...     "s2h": [2.5, 3.1, 7.4], "s2h2": [1.2, 5.5, 4.0],
    ...     "CVh": [4.9, 4.9, 4.9], "poph": [8, 16, 24], "Rh": [1, 1, 1],
    ...     "deffh": [2, 2, 2], "deffh2": [3, 3, 3],
    ... })
    >>> size = expsize(
    ...     Yh=["Yh", "Yh1"], H="H", s2h=["s2h", "s2h2"], poph="poph",
    ...     Rh="Rh", deffh=["deffh", "deffh2"], CVh="CVh", dataset=data,
    ... )
    >>> size.shape
    (6, 9)
    """
    config = config or SampleSizeConfig()

    required = (("Yh", Yh), ("H", H), ("s2h", s2h), ("poph", poph), ("CVh", CVh))
    for name, value in required:
        if value is None:
            raise MissingInputError(name)

    if dataset is not None:
        dataset = as_dataset(dataset)
        Yh = resolve_reference("Yh", Yh, dataset)
        H = resolve_reference("H", H, dataset)
        s2h = resolve_reference("s2h", s2h, dataset)
        CVh = resolve_reference("CVh", CVh, dataset)
        poph = resolve_reference("poph", poph, dataset)
        Rh = resolve_reference("Rh", Rh, dataset)
        deffh = resolve_reference("deffh", deffh, dataset)

    # Yh fixes the number of strata and variables
    estim = as_frame("Yh", Yh)
    if estim.height == 0 or estim.width == 0:
        raise ShapeMismatchError("Yh", "must have at least one row and one column")
    n, m = estim.height, estim.width
    estim = validate_table("Yh", estim, n, m).cast(pl.Float64)
    variables = estim.columns

    variance = prepare_input("s2h", s2h, n, m)

    strata = validate_table(
        "H", as_frame(DEFAULT_STRATUM_COL, H), n, 1, numeric=False, per_stratum=True
    )
    stratum_col = strata.columns[0]
    if stratum_col in variables or stratum_col in RESULT_COLUMNS:
        raise ColumnNameError(
            "H",
            f"column name '{stratum_col}' clashes with a variable or result column",
        )

    cv = prepare_input("CVh", CVh, n, 1, per_stratum=True)
    population = prepare_input("poph", poph, n, 1, per_stratum=True)
    if Rh is None:
        Rh = pl.Series(RH_COL, [DEFAULT_RESPONSE_RATE] * n)
    response = prepare_input("Rh", Rh, n, 1, per_stratum=True)
    design = prepare_input("deffh", deffh, n, m) if deffh is not None else None

    _check_duplicate_strata(strata, config.duplicate_strata)

    logger.debug(
        "Computing sample sizes for %d strata x %d variables %s", n, m, variables
    )

    result = _outer_join(
        _melt_scalar(strata, cv, CVH_COL),
        _melt_scalar(strata, response, RH_COL),
        on=[stratum_col],
    )
    result = _outer_join(
        result, _melt_scalar(strata, population, POPH_COL), on=[stratum_col]
    )

    variance = _relabel_positionally("s2h", variance, variables)
    result = _outer_join(
        _melt_wide(strata, variance, S2H_COL), result, on=[stratum_col]
    )

    keys = [stratum_col, VARIABLE_COL]
    if design is not None:
        design = _relabel_positionally("deffh", design, variables)
        result = _outer_join(_melt_wide(strata, design, DEFFH_COL), result, on=keys)
    else:
        result = result.with_columns(pl.lit(DEFAULT_DESIGN_EFFECT).alias(DEFFH_COL))

    result = _outer_join(_melt_wide(strata, estim, ESTIM_COL), result, on=keys)

    result = result.with_columns(sample_size_expr()).select(
        [stratum_col, *RESULT_COLUMNS]
    )
    if config.sort_result:
        result = result.sort(
            [stratum_col, pl.col(VARIABLE_COL).cast(pl.Enum(variables))]
        )

    _check_nonfinite(result, config.nonfinite_sizes)
    return result
