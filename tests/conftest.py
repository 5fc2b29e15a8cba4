"""Shared test fixtures."""

import logging
from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def _restore_root_logger() -> Generator[None, None, None]:
    """``setup_logging`` replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
