"""Fixtures for CLI tests"""

import logging

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Commands reconfigure the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
