"""Exceptions raised by the test adapter."""

from collections.abc import Sequence
from pathlib import Path


class AdapterError(Exception):
    """Base class for adapter errors."""


class DriverNotFoundError(AdapterError):
    """Raised when no driver executable exists at any candidate location."""

    def __init__(self, searched: Sequence[Path]) -> None:
        self.searched = tuple(searched)
        locations = ", ".join(str(p) for p in self.searched)
        super().__init__(f"Could not find test driver. Searched: {locations}")


class DriverLaunchError(AdapterError):
    """Raised when the driver process cannot be started."""


class CorrelatorNotFoundError(AdapterError):
    """Raised when a correlation strategy is not found."""
