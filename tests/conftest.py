"""
Root conftest.py - Session-scoped fixtures shared across all tests.

This file sets up the Python path so the tests run from a source checkout.
"""

from pathlib import Path
import sys

import pytest

# Add directories to path BEFORE importing local modules
SRC_DIR = Path(__file__).parent.parent.resolve() / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))
TESTS_DIR = Path(__file__).parent.resolve()


@pytest.fixture(scope="session")
def tests_dir():
    """Path to tests directory."""
    return TESTS_DIR


@pytest.fixture(autouse=True)
def _clean_provision_env(monkeypatch):
    """Keep LHAPDF_PROVISION_* and toolchain variables from the host out of tests."""
    import os
    for key in list(os.environ):
        if key.startswith("LHAPDF_PROVISION_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.delenv("CXX", raising=False)
    monkeypatch.delenv("AR", raising=False)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo configure_logging() so caplog sees records again."""
    import logging
    yield
    logger = logging.getLogger("lhapdf_provision")
    for handler in list(logger.handlers):
        if getattr(handler, '_lhapdf_provision_handler', False):
            logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
