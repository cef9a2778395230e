"""Error taxonomy for catalog refreshes."""

from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """Base class for every failure raised while building a catalog."""


class TransportError(CatalogError):
    """The vendor API could not be reached or answered with an HTTP error."""

    def __init__(self, message: str, *, url: str = "", status: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status = status


class DecodeError(CatalogError):
    """A vendor payload was not JSON or did not match the expected schema."""

    def __init__(self, message: str, *, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class MappingError(CatalogError):
    """One vendor entry could not be mapped; the entry is skipped, not the refresh."""
