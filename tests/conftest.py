"""
Pytest configuration and fixtures.

Every test runs with default configuration and no registered reporter, so
tests that install reporters or change the allow-list cannot leak into each
other.
"""

import logging
import sys

import pytest

from pylazy import reset_config
from pylazy._internal.reporter_context import reporter_scope
from pylazy._internal.reporter_registry import ReporterRegistry


def pytest_configure(config):
    """Configure pytest with custom settings."""
    log_level = logging.DEBUG if config.getoption("--debug-pylazy") else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    logging.getLogger("pylazy").setLevel(log_level)

    custom_log_file = config.getoption("--pylazy-log-file")
    if custom_log_file:
        file_handler = logging.FileHandler(custom_log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
            )
        )
        logging.getLogger().addHandler(file_handler)


def pytest_addoption(parser):
    """Add custom command line options."""
    parser.addoption(
        "--debug-pylazy",
        action="store_true",
        default=False,
        help="Enable debug logging for pylazy (shows every materialization)",
    )
    parser.addoption(
        "--pylazy-log-file",
        action="store",
        default=None,
        help="Log pylazy debug output to specified file",
    )


@pytest.fixture(autouse=True)
def isolated_pylazy_state(monkeypatch):
    """Reset configuration and reporters around each test."""
    monkeypatch.delenv("PYLAZY_REPORTER", raising=False)
    reset_config()
    with reporter_scope():
        ReporterRegistry.unregister()
        yield
    reset_config()


class CountingCreator:
    """Creator that records how often it ran and returns a fixed value."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.value


@pytest.fixture
def counting_creator():
    return CountingCreator
