"""
Product API client: one GET to the product listing endpoint, JSON array out.

No caching and no retries; every failure surfaces as a CatalogError subclass.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlparse

import requests

from dessert_shop.domain.errors import DecodeFailure, InvalidEndpoint, TransportFailure
from dessert_shop.utils.config import products_url
from dessert_shop.utils.logger import get_logger

logger = get_logger()

REQUEST_TIMEOUT_SECONDS = 30


def _validate_endpoint(url: str) -> str:
    url = (url or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidEndpoint(f"Invalid product endpoint: {url!r}")
    return url


class ProductApiClient:
    """
    Fetches raw product records from a remote catalog API.

    The endpoint is validated at the start of every fetch, so a malformed URL
    fails before any request is made.
    """

    def __init__(self, endpoint: str | None = None) -> None:
        self._endpoint_raw = endpoint if endpoint is not None else products_url()
        self._request_count = 0

    @property
    def endpoint(self) -> str:
        return self._endpoint_raw

    @property
    def request_count(self) -> int:
        """Number of HTTP requests issued by this client."""
        return self._request_count

    def fetch_products(self) -> list[dict[str, Any]]:
        """
        GET the product listing and return the decoded JSON array.

        Returns:
            List of product records as sent by the API (not yet validated).

        Raises:
            InvalidEndpoint: If the endpoint URL is malformed (no request made).
            TransportFailure: On connection errors, timeouts, or non-2xx status.
            DecodeFailure: If the body is not JSON or not a JSON array.
        """
        url = _validate_endpoint(self._endpoint_raw)
        self._request_count += 1
        try:
            r = requests.get(
                url,
                timeout=REQUEST_TIMEOUT_SECONDS,
                headers={"Accept": "application/json"},
            )
            r.raise_for_status()
        except (requests.exceptions.InvalidURL, requests.exceptions.MissingSchema) as e:
            logger.exception("Product API endpoint rejected: %s", e)
            raise InvalidEndpoint(f"Invalid product endpoint: {url!r}", original=e) from e
        except requests.RequestException as e:
            logger.exception("Product API request failed: %s", e)
            raise TransportFailure(f"Product API request failed: {e}", original=e) from e

        try:
            data = r.json()
        except ValueError as e:
            logger.exception("Product API invalid JSON: %s", e)
            raise DecodeFailure(f"Product API returned invalid JSON: {e}", original=e) from e

        if not isinstance(data, list):
            raise DecodeFailure(
                f"Product API returned {type(data).__name__}, expected a JSON array"
            )
        logger.info("Product API returned %d records from %s", len(data), url)
        return data
