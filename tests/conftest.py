# tests/conftest.py
"""Shared fixtures for the analysis_core test-suite."""

import logging

import pytest

from analysis_core.options import BUG_ALL, BUG_INTEGER_ALL, BUG_MEMORY_ALL, IntegerBug

BUG_FLAG_NAMES = [kind.value for kind in IntegerBug] + [
    BUG_INTEGER_ALL,
    BUG_MEMORY_ALL,
    BUG_ALL,
]


@pytest.fixture
def bug_flag_names():
    return list(BUG_FLAG_NAMES)


@pytest.fixture
def make_raw():
    """Build a raw flag mapping with every bug flag off, then apply overrides."""
    def _make(**overrides):
        raw = {name: False for name in BUG_FLAG_NAMES}
        for key, value in overrides.items():
            raw[key.replace("_", "-")] = value
        return raw
    return _make


@pytest.fixture(autouse=True)
def _reset_package_logger():
    logger = logging.getLogger("analysis_core")
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
