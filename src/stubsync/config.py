"""Configuration management for the stubsync CLI tool.

Handles configuration loading from multiple sources with precedence:
CLI args > environment variables > .stubsyncrc > pyproject.toml > defaults
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from stubsync.versions import DEFAULT_VERSIONS, format_version, parse_version

# tomllib is only available in Python 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]


def _default_versions() -> list[str]:
    return [format_version(v) for v in DEFAULT_VERSIONS]


@dataclass
class StubsyncConfig:
    """Configuration for the stubsync CLI tool.

    Attributes:
        php_version: Targeted runtime version (default: None, the latest known)
        versions: Known runtime versions (default: 5.3 through 8.3)
        namespace_separator: Separator for qualified names (default: ".")
        muted_problems: Path to a muted-problems JSON file (default: None)
    """

    php_version: str | None = None
    versions: list[str] = field(default_factory=_default_versions)
    namespace_separator: str = "."
    muted_problems: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any configuration value is invalid.
        """
        # Validate versions
        if not self.versions or not isinstance(self.versions, list):
            raise ValueError("versions must be a non-empty list")
        for version in self.versions:
            parse_version(version)

        # Validate php_version
        if self.php_version is not None:
            current = parse_version(self.php_version)
            if current not in {parse_version(v) for v in self.versions}:
                raise ValueError(f"php_version {self.php_version} is not a known version")

        # Validate namespace_separator
        if not self.namespace_separator or not isinstance(self.namespace_separator, str):
            raise ValueError("namespace_separator must be a non-empty string")

        # Validate muted_problems
        if self.muted_problems is not None and not self.muted_problems.endswith(".json"):
            raise ValueError("muted_problems must end with .json")

    def get_muted_problems_path(self, base_path: Path | None = None) -> Path | None:
        """Get the full path to the muted-problems file.

        Args:
            base_path: Base path to resolve from. Defaults to current directory.

        Returns:
            Path to the muted-problems file, or None if not configured.
        """
        if self.muted_problems is None:
            return None
        base = base_path or Path.cwd()
        return base / self.muted_problems


def _get_config_field_names() -> set[str]:
    """Get the set of valid configuration field names.

    Returns:
        Set of field names from StubsyncConfig.
    """
    return {f.name for f in fields(StubsyncConfig)}


def find_config_file(filename: str = ".stubsyncrc", start_dir: Path | None = None) -> Path | None:
    """Find a configuration file by traversing up the directory tree.

    Args:
        filename: Name of the config file to find.
        start_dir: Directory to start searching from. Defaults to current directory.

    Returns:
        Path to the config file if found, None otherwise.
    """
    current = start_dir or Path.cwd()
    current = current.resolve()

    while True:
        config_path = current / filename
        if config_path.is_file():
            return config_path

        parent = current.parent
        if parent == current:
            # Reached filesystem root
            return None
        current = parent


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    with open(path, "rb") as f:
        result: dict[str, Any] = tomllib.load(f)
        return result


def _load_from_stubsyncrc(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from a .stubsyncrc file.

    Returns:
        Dictionary containing configuration from .stubsyncrc, or empty dict if not found.
    """
    config_path = find_config_file(".stubsyncrc", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
        valid_fields = _get_config_field_names()
        return {k: v for k, v in data.items() if k in valid_fields}
    except (tomllib.TOMLDecodeError, OSError):
        return {}


def _load_from_pyproject(start_dir: Path | None = None) -> dict[str, Any]:
    """Load configuration from the pyproject.toml [tool.stubsync] section.

    Returns:
        Dictionary containing configuration from pyproject.toml, or empty dict if not found.
    """
    config_path = find_config_file("pyproject.toml", start_dir)
    if config_path is None:
        return {}

    try:
        data = _load_toml_file(config_path)
        section = data.get("tool", {}).get("stubsync", {})
        valid_fields = _get_config_field_names()
        return {k: v for k, v in section.items() if k in valid_fields}
    except (tomllib.TOMLDecodeError, OSError):
        return {}


def _load_from_env() -> dict[str, Any]:
    """Load configuration from environment variables.

    Variables are prefixed with STUBSYNC_. The bare PHP_VERSION variable is
    honored when STUBSYNC_PHP_VERSION is not set. STUBSYNC_VERSIONS is a
    comma-separated list.

    Returns:
        Dictionary containing configuration from environment variables.
    """
    env_mapping = {
        "STUBSYNC_PHP_VERSION": "php_version",
        "STUBSYNC_NAMESPACE_SEPARATOR": "namespace_separator",
        "STUBSYNC_MUTED_PROBLEMS": "muted_problems",
    }

    result: dict[str, Any] = {}
    php_version = os.environ.get("PHP_VERSION")
    if php_version:
        result["php_version"] = php_version

    for env_var, config_key in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            result[config_key] = value

    versions = os.environ.get("STUBSYNC_VERSIONS")
    if versions:
        result["versions"] = [v.strip() for v in versions.split(",") if v.strip()]

    return result


def _merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration dictionaries; later ones take precedence."""
    result: dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            if value is not None:
                result[key] = value
    return result


def load_config(
    cli_overrides: dict[str, Any] | None = None,
    start_dir: Path | None = None,
) -> StubsyncConfig:
    """Load configuration with full precedence chain.

    Precedence (highest to lowest):
    1. CLI arguments (cli_overrides)
    2. Environment variables (STUBSYNC_*, PHP_VERSION)
    3. .stubsyncrc file
    4. pyproject.toml [tool.stubsync] section
    5. Default values

    Args:
        cli_overrides: Configuration overrides from CLI arguments.
        start_dir: Directory to start searching for config files.

    Returns:
        Fully resolved StubsyncConfig instance.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    pyproject_config = _load_from_pyproject(start_dir)
    rc_config = _load_from_stubsyncrc(start_dir)
    env_config = _load_from_env()
    cli_config = cli_overrides or {}

    valid_fields = _get_config_field_names()
    cli_config = {k: v for k, v in cli_config.items() if k in valid_fields and v is not None}

    merged = _merge_configs(
        pyproject_config,
        rc_config,
        env_config,
        cli_config,
    )

    # TOML may give numbers where strings are expected
    if "php_version" in merged:
        merged["php_version"] = str(merged["php_version"])
    if "versions" in merged and isinstance(merged["versions"], list):
        merged["versions"] = [str(v) for v in merged["versions"]]

    return StubsyncConfig(**merged)
