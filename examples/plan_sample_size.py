#!/usr/bin/env python3
"""
Sample Size Plan from a CSV of Strata
=====================================

This example computes the minimum number of units to sample in each
stratum so that estimated totals reach a target coefficient of variation
(CV). It is the planning step a statistical office runs before fielding a
stratified household or business survey.

Inputs per stratum
------------------
- Expected totals of each variable of interest (e.g. households, income)
- Expected population variance S² of each variable
- Population size N_h
- Expected response rate R_h (optional, defaults to full response)
- Expected design effect of each variable (optional, defaults to 1)
- Target CV in percent

How This Script Works
---------------------
1. Reads a CSV with one row per stratum using Polars
2. Passes column names to `expsize` together with `dataset=`
3. Prints the per-stratum, per-variable sample sizes
4. Summarises the requirement per stratum: the largest n_h across variables,
   since one sample has to satisfy every variable at once

Usage
-----
    # Bundled example data
    uv run python examples/plan_sample_size.py

    # Your own CSV
    uv run python examples/plan_sample_size.py --csv strata.csv \\
        --h region --yh households income --s2h s2h_households s2h_income \\
        --poph poph --rh Rh --deffh deff_households deff_income --cvh CVh
"""

import argparse
import logging
import math
from pathlib import Path

import polars as pl
from rich.console import Console
from rich.table import Table

from pystratsize import InputValidationError, expsize

console = Console()

DEFAULT_CSV = Path(__file__).parent / "data" / "strata.csv"


def build_parser():
    """Command line arguments, defaulting to the bundled example data."""
    parser = argparse.ArgumentParser(
        description="Compute minimum sample sizes per stratum from a CSV"
    )
    parser.add_argument("--csv", type=Path, default=DEFAULT_CSV, help="CSV file, one row per stratum")
    parser.add_argument("--h", default="region", help="Stratum column")
    parser.add_argument(
        "--yh", nargs="+", default=["households", "income"], help="Expected total columns"
    )
    parser.add_argument(
        "--s2h",
        nargs="+",
        default=["s2h_households", "s2h_income"],
        help="Population variance columns, in the same order as --yh",
    )
    parser.add_argument("--poph", default="poph", help="Population size column")
    parser.add_argument("--rh", default="Rh", help="Response rate column")
    parser.add_argument(
        "--deffh",
        nargs="*",
        default=["deff_households", "deff_income"],
        help="Design effect columns, in the same order as --yh",
    )
    parser.add_argument("--cvh", default="CVh", help="Target CV column (percent)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output")
    return parser


def show_plan(result: pl.DataFrame, stratum_col: str):
    """Print the per-variable sample sizes and the per-stratum requirement."""
    table = Table(title="Minimum Sample Size by Stratum and Variable")
    table.add_column(stratum_col, justify="left")
    table.add_column("Variable", justify="left")
    table.add_column("Total", justify="right")
    table.add_column("S²", justify="right")
    table.add_column("deff", justify="right")
    table.add_column("R", justify="right")
    table.add_column("N", justify="right")
    table.add_column("CV %", justify="right")
    table.add_column("n", justify="right")

    for row in result.iter_rows(named=True):
        table.add_row(
            str(row[stratum_col]),
            row["variable"],
            f"{row['estim']:,.0f}",
            f"{row['s2h']:,.2f}",
            f"{row['deffh']:.2f}",
            f"{row['Rh']:.2f}",
            f"{row['poph']:,.0f}",
            f"{row['CVh']:.1f}",
            f"{row['nh']:,.1f}",
        )

    console.print(table)

    # One sample serves every variable, so the largest requirement binds
    required = (
        result.group_by(stratum_col, maintain_order=True)
        .agg(pl.col("nh").nan_max().alias("nh_max"))
    )

    console.print("\n[bold]Sample to Draw per Stratum[/bold]")
    total = 0
    for row in required.iter_rows(named=True):
        # inf or NaN from zero response rates or variances has no plan
        if not math.isfinite(row["nh_max"]):
            console.print(f"  {str(row[stratum_col]):<12} {'n/a':>8}")
            continue
        n_draw = math.ceil(row["nh_max"])
        total += n_draw
        console.print(f"  {str(row[stratum_col]):<12} {n_draw:>8,}")
    console.print(f"  {'Total':<12} {total:>8,}")

    return required


def main(argv=None):
    """Main entry point - parse arguments and print the plan."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if not args.csv.exists():
        console.print(f"[red]Error: CSV file not found: {args.csv}[/red]")
        return 1

    console.print(f"[cyan]Reading strata from: {args.csv}[/cyan]")
    data = pl.read_csv(args.csv)

    try:
        result = expsize(
            Yh=args.yh,
            H=args.h,
            s2h=args.s2h,
            poph=args.poph,
            Rh=args.rh or None,
            deffh=args.deffh or None,
            CVh=args.cvh,
            dataset=data,
        )
    except InputValidationError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 1

    show_plan(result, args.h)
    console.print("\n[green]Done![/green]")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
