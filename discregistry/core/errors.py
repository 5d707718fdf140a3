"""Errors raised inside the retrieval core."""
from typing import Optional


class DiscRegistryError(Exception):
    """Base class for retrieval failures."""


class StoreError(DiscRegistryError):
    """A read against the backing store failed (network, permission, bad predicate)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        surface: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.surface = surface
