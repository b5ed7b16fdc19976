"""CLI utility functions for stubsync.

Provides helper functions for:
- Config wiring: Extracting Typer CLI options and passing to load_config
- Error formatting: Consistent user-friendly error messages with exit codes
- Path checks: Verifying input files before loading them
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, NoReturn

import typer

from stubsync.config import StubsyncConfig, load_config

# Exit code conventions
EXIT_USER_ERROR = 1  # User error (bad input, missing file, etc.)
EXIT_VALIDATION_FAILED = 2  # Validation found errors


# -----------------------------------------------------------------------------
# Error Formatting Helpers
# -----------------------------------------------------------------------------


def error(msg: str, *, exit_code: int = EXIT_USER_ERROR) -> NoReturn:
    """Print an error message and exit with the given exit code.

    Raises:
        typer.Exit: Always raises to exit the program.
    """
    styled_prefix = typer.style("Error:", fg=typer.colors.RED, bold=True)
    typer.echo(f"{styled_prefix} {msg}", err=True)
    raise typer.Exit(code=exit_code)


# -----------------------------------------------------------------------------
# Path Helpers
# -----------------------------------------------------------------------------


def ensure_file_exists(path: Path, path_type: str = "File") -> Path:
    """Ensure a path exists and is a file.

    Raises:
        typer.Exit: If the path doesn't exist or is not a file.
    """
    if not path.exists():
        error(f"{path_type} does not exist: {path}")
    if not path.is_file():
        error(f"{path_type} is not a file: {path}")
    return path


# -----------------------------------------------------------------------------
# Config Wiring Helper
# -----------------------------------------------------------------------------


def wire_config(
    php_version: str | None = None,
    muted_problems: str | None = None,
    start_dir: Path | None = None,
) -> StubsyncConfig:
    """Wire CLI options to load_config with appropriate overrides.

    Args:
        php_version: Override for the targeted runtime version.
        muted_problems: Override for the muted-problems file.
        start_dir: Directory to start searching for config files.

    Returns:
        Fully resolved StubsyncConfig instance.

    Raises:
        typer.Exit: If configuration is invalid.
    """
    cli_overrides: dict[str, Any] = {}

    if php_version is not None:
        cli_overrides["php_version"] = php_version
    if muted_problems is not None:
        cli_overrides["muted_problems"] = muted_problems

    try:
        return load_config(cli_overrides=cli_overrides, start_dir=start_dir)
    except ValueError as e:
        error(f"Invalid configuration: {e}", exit_code=EXIT_USER_ERROR)


# -----------------------------------------------------------------------------
# Typer Option Factory Functions
# -----------------------------------------------------------------------------
# Typer consumes Option objects when decorating commands, so each command
# needs a fresh instance.


def php_version_option() -> Any:
    """Create a Typer Option for --php-version / -p."""
    return typer.Option(
        None,
        "--php-version",
        "-p",
        help="Runtime version to check against (default: PHP_VERSION or the latest known).",
    )


def json_option() -> Any:
    """Create a Typer Option for --json."""
    return typer.Option(
        False,
        "--json",
        help="Output as JSON.",
    )


def quiet_option() -> Any:
    """Create a Typer Option for --quiet / -q."""
    return typer.Option(
        False,
        "--quiet",
        "-q",
        help="Minimal output for CI.",
    )


def verbose_option() -> Any:
    """Create a Typer Option for --verbose."""
    return typer.Option(
        False,
        "--verbose",
        help="Log resolver diagnostics to stderr.",
    )
