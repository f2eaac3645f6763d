"""
Configuration for unit tests.

Unit tests are fast, isolated tests that run on small synthetic tables
built in memory. They need no files or external services.
"""

from pathlib import Path

import polars as pl
import pytest


def pytest_collection_modifyitems(items):
    """Mark tests in this directory as unit tests."""
    unit_dir = Path(__file__).parent
    for item in items:
        if unit_dir in item.path.parents:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def strata_dataset():
    """
    Three strata with two variables of interest, one row per stratum.

    Known values for hand calculation verification (stratum 1, "Yh"):
    - estim = 10, s2h = 2.5, deffh = 2, poph = 8, Rh = 1, CVh = 4.9
    - numerator = 8^2 * 2.5 * 2 = 320
    - denominator = 1 * ((10 * 4.9 / 100)^2 + 8 * 2.5 * 2) = 40.2401
    - nh = 320 / 40.2401 = 7.95226...
    """
    return pl.DataFrame(
        {
            "H": [1, 2, 3],
            "Yh": [10, 20, 30],
            "Yh1": [40, 50, 60],
            "s2h": [2.5, 3.1, 7.4],
            "s2h2": [1.2, 5.5, 4.0],
            "CVh": [4.9, 4.9, 4.9],
            "poph": [8, 16, 24],
            "Rh": [1.0, 0.9, 0.8],
            "deffh": [2.0, 2.0, 2.0],
            "deffh2": [3.0, 3.0, 3.0],
        }
    )
