"""Pytest configuration for the fire-planner test suite."""

import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from tax.reference import build_tax_details

# Configure pytest-asyncio so the MCP server tests can await tool handlers
pytest_plugins = ('pytest_asyncio',)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "asyncio: mark test as an async test"
    )


@pytest.fixture(scope="session")
def tax_details():
    """IncomeTaxDetails and LevyDetails hydrated from reference/tax-details.json."""
    return build_tax_details()
