"""
Catalog loading errors.

All of them are caught by the CatalogLoader and turned into its failed state;
none of them is meant to reach the UI.
"""

from __future__ import annotations


class CatalogError(RuntimeError):
    """Base error for a failed catalog fetch."""

    def __init__(self, message: str, original: Exception | None = None) -> None:
        super().__init__(message)
        self.original = original


class InvalidEndpoint(CatalogError):
    """The product endpoint URL is malformed. Raised before any network call."""


class TransportFailure(CatalogError):
    """Connection error, timeout, or non-2xx response from the product API."""


class DecodeFailure(CatalogError):
    """Response body is not JSON or does not have the product shape."""
