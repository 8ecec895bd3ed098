"""Data sources: the remote product API."""

from dessert_shop.infrastructure.data.sources.product_api_client import ProductApiClient

__all__ = ["ProductApiClient"]
