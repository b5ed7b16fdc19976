"""Which runtime versions a declared element is available in."""

from __future__ import annotations

from collections.abc import Callable

from stubsync.context import ResolverContext
from stubsync.elements import DeclaredElement
from stubsync.versions import VersionRegistry

AvailabilityLookup = Callable[[DeclaredElement, VersionRegistry], list[float]]


def available_in_versions(element: DeclaredElement, registry: VersionRegistry) -> list[float]:
    """Return the registry versions the element is declared for.

    An element without an availability range spans the whole registry; an
    open upper bound runs to the latest version.
    """
    version_range = element.available_range
    if version_range is None:
        return list(registry)
    return registry.span(version_range.from_version, version_range.to_version)


def is_valid_for_current_version(
    element: DeclaredElement,
    context: ResolverContext,
    lookup: AvailabilityLookup = available_in_versions,
) -> bool:
    """Check that the context's current version is one the element is declared for."""
    return context.version in lookup(element, context.registry)
