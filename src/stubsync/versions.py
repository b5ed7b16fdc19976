"""Registry of the PHP language levels tracked by stubsync.

Versions are plain floats (``7.4``, ``8.0``). Keys in version-conditional
type maps use the one-decimal string form produced by :func:`format_version`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

DEFAULT_VERSIONS: tuple[float, ...] = (
    5.3, 5.4, 5.5, 5.6,
    7.0, 7.1, 7.2, 7.3, 7.4,
    8.0, 8.1, 8.2, 8.3,
)


def parse_version(value: object) -> float:
    """Parse a version given as a string or number into a float.

    Args:
        value: Version such as ``"8.1"``, ``8.1`` or ``8``.

    Returns:
        The version as a float.

    Raises:
        ValueError: If the value is not numeric.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid version: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            raise ValueError(f"Invalid version: {value!r}") from None
    raise ValueError(f"Invalid version: {value!r}")


def format_version(version: float) -> str:
    """Render a version as a one-decimal key (``8`` -> ``"8.0"``)."""
    return f"{version:.1f}"


class VersionRegistry:
    """Ordered set of known runtime versions.

    Example:
        >>> registry = VersionRegistry([8.0, 7.4, 8.1])
        >>> registry.first(), registry.latest()
        (7.4, 8.1)
    """

    def __init__(self, versions: Iterable[float | str] = DEFAULT_VERSIONS) -> None:
        parsed = sorted({parse_version(v) for v in versions})
        if not parsed:
            raise ValueError("Version registry must contain at least one version")
        self._versions: tuple[float, ...] = tuple(parsed)

    def __iter__(self) -> Iterator[float]:
        return iter(self._versions)

    def __len__(self) -> int:
        return len(self._versions)

    def __contains__(self, version: object) -> bool:
        try:
            return parse_version(version) in self._versions
        except ValueError:
            return False

    def __repr__(self) -> str:
        return f"VersionRegistry({list(self._versions)!r})"

    def first(self) -> float:
        """Return the earliest known version."""
        return self._versions[0]

    def latest(self) -> float:
        """Return the latest known version."""
        return self._versions[-1]

    def versions_from(self, threshold: float) -> list[float]:
        """Return every known version greater than or equal to ``threshold``."""
        return [v for v in self._versions if v >= threshold]

    def span(self, from_version: float, to_version: float | None = None) -> list[float]:
        """Return known versions within ``[from_version, to_version]``.

        Args:
            from_version: Inclusive lower bound.
            to_version: Inclusive upper bound, or None for the latest version.

        Returns:
            Ascending list of matching versions.
        """
        upper = self.latest() if to_version is None else to_version
        return [v for v in self._versions if from_version <= v <= upper]
