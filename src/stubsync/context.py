"""Resolver context threaded through every resolver entry point."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import cast

from stubsync.config import StubsyncConfig
from stubsync.resolver.names import NAMESPACE_SEPARATOR
from stubsync.versions import VersionRegistry, format_version, parse_version


@dataclass(frozen=True)
class ResolverContext:
    """Read-only view of the registry and the targeted runtime version.

    Attributes:
        registry: Known runtime versions.
        current_version: Version the checks run against.
        separator: Namespace separator for qualified names.
    """

    registry: VersionRegistry = field(default_factory=VersionRegistry)
    current_version: float | None = None
    separator: str = NAMESPACE_SEPARATOR

    def __post_init__(self) -> None:
        if self.current_version is None:
            object.__setattr__(self, "current_version", self.registry.latest())

    @property
    def current_key(self) -> str:
        """The current version as a one-decimal key."""
        return format_version(self.version)

    @property
    def version(self) -> float:
        """The current version, always set once the context is built."""
        return cast(float, self.current_version)

    @classmethod
    def from_config(cls, config: StubsyncConfig) -> ResolverContext:
        registry = VersionRegistry(config.versions)
        current = parse_version(config.php_version) if config.php_version is not None else None
        return cls(registry=registry, current_version=current, separator=config.namespace_separator)
