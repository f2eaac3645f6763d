"""
Configuration for integration tests.

Integration tests verify that components work together on realistic
input: strata tables read from CSV files and the command line example.
"""

from pathlib import Path

import pytest


def pytest_collection_modifyitems(items):
    """Mark tests in this directory as integration tests."""
    integration_dir = Path(__file__).parent
    for item in items:
        if integration_dir in item.path.parents:
            item.add_marker(pytest.mark.integration)
