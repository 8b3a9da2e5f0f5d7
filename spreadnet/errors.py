"""Exception and warning types raised while initialising a network."""

from __future__ import annotations

from typing import Sequence


class SpreadnetError(Exception):
    """Base class for every initialisation failure."""


class ConfigError(SpreadnetError, ValueError):
    """The configuration is malformed."""


class ConfigIncomplete(ConfigError):
    """Structurally required configuration fields are missing."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = list(missing)
        super().__init__(
            "configuration incomplete, cannot build network without: "
            + ", ".join(self.missing)
        )


class DimensionMismatch(SpreadnetError, ValueError):
    """A binary weight or case file does not match the expected size."""

    def __init__(self, path: str, expected: int, actual: int) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        self.kind = "truncated" if actual < expected else "overflow"
        super().__init__(
            f"{path}: expected {expected} bytes, found {actual} ({self.kind})"
        )


class IOUnavailable(SpreadnetError, OSError):
    """A file needed for initialisation is missing or unreadable."""


class ConfigWarning(UserWarning):
    """A configuration problem was resolved with a default."""


__all__ = [
    "SpreadnetError",
    "ConfigError",
    "ConfigIncomplete",
    "DimensionMismatch",
    "IOUnavailable",
    "ConfigWarning",
]
