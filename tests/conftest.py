"""Pytest configuration and fixtures for stubsync tests."""

import os

import pytest

# Set a fixed terminal width to prevent line wrapping issues in CI
# This must be set before any Rich imports
os.environ.setdefault("COLUMNS", "200")
os.environ.setdefault("LINES", "50")
# Disable Rich's terminal detection to ensure consistent output
os.environ.setdefault("TERM", "dumb")

_CONFIG_ENV_VARS = (
    "PHP_VERSION",
    "STUBSYNC_PHP_VERSION",
    "STUBSYNC_VERSIONS",
    "STUBSYNC_NAMESPACE_SEPARATOR",
    "STUBSYNC_MUTED_PROBLEMS",
)


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the host environment from leaking into configuration."""
    for var in _CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture(autouse=True)
def reset_stubsync_logger() -> None:
    """Undo CLI logging setup so caplog sees stubsync records."""
    import logging

    logger = logging.getLogger("stubsync")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
