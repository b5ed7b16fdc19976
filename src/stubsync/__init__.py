"""stubsync - version-aware type and availability resolver for PHP stubs."""

__version__ = "0.1.0"
