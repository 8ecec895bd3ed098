"""
Tests for ProductApiClient: GET, decoding, and error taxonomy.
"""

from __future__ import annotations

import logging
from unittest.mock import MagicMock, patch

import pytest
import requests

from dessert_shop.domain.errors import DecodeFailure, InvalidEndpoint, TransportFailure
from dessert_shop.infrastructure.data.sources.product_api_client import ProductApiClient

ENDPOINT = "https://fakestoreapi.com/products"


def _response(payload: object) -> MagicMock:
    mock_response = MagicMock()
    mock_response.status_code = 200
    mock_response.json.return_value = payload
    mock_response.raise_for_status = MagicMock()
    return mock_response


def test_fetch_products_returns_records() -> None:
    """Records are returned as sent, with the Accept header set."""
    records = [
        {"id": 1, "title": "Tiramisu", "price": 5.5, "category": "Dessert", "image": "u1"},
        {"id": 2, "title": "Pie", "price": 5.0, "category": "Dessert", "image": "u2"},
    ]
    client = ProductApiClient(ENDPOINT)
    with patch(
        "dessert_shop.infrastructure.data.sources.product_api_client.requests.get",
        return_value=_response(records),
    ) as mock_get:
        out = client.fetch_products()

    assert out == records
    assert client.request_count == 1
    mock_get.assert_called_once()
    args, kwargs = mock_get.call_args
    assert args[0] == ENDPOINT
    assert kwargs["headers"]["Accept"] == "application/json"


@pytest.mark.parametrize("url", ["", "not a url", "ftp://example.com/products", "https://"])
def test_invalid_endpoint_fails_before_request(url: str) -> None:
    client = ProductApiClient(url)
    with patch("dessert_shop.infrastructure.data.sources.product_api_client.requests.get") as mock_get:
        with pytest.raises(InvalidEndpoint):
            client.fetch_products()
    mock_get.assert_not_called()
    assert client.request_count == 0


def test_connection_error_is_transport_failure() -> None:
    client = ProductApiClient(ENDPOINT)
    boom = requests.ConnectionError("connection refused")
    with patch(
        "dessert_shop.infrastructure.data.sources.product_api_client.requests.get",
        side_effect=boom,
    ):
        with pytest.raises(TransportFailure) as exc_info:
            client.fetch_products()
    assert exc_info.value.original is boom


def test_http_error_status_is_transport_failure() -> None:
    client = ProductApiClient(ENDPOINT)
    mock_response = _response([])
    mock_response.status_code = 503
    mock_response.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
    with patch(
        "dessert_shop.infrastructure.data.sources.product_api_client.requests.get",
        return_value=mock_response,
    ):
        with pytest.raises(TransportFailure, match="503"):
            client.fetch_products()


def test_invalid_json_is_decode_failure() -> None:
    client = ProductApiClient(ENDPOINT)
    mock_response = _response(None)
    mock_response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    with patch(
        "dessert_shop.infrastructure.data.sources.product_api_client.requests.get",
        return_value=mock_response,
    ):
        with pytest.raises(DecodeFailure, match="invalid JSON"):
            client.fetch_products()


def test_non_array_body_is_decode_failure() -> None:
    client = ProductApiClient(ENDPOINT)
    with patch(
        "dessert_shop.infrastructure.data.sources.product_api_client.requests.get",
        return_value=_response({"products": []}),
    ):
        with pytest.raises(DecodeFailure, match="expected a JSON array"):
            client.fetch_products()


def test_endpoint_defaults_to_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PRODUCTS_URL", "https://example.test/api/products")
    client = ProductApiClient()
    assert client.endpoint == "https://example.test/api/products"


def test_transport_failure_is_logged_with_traceback(caplog: pytest.LogCaptureFixture) -> None:
    client = ProductApiClient(ENDPOINT)
    with patch(
        "dessert_shop.infrastructure.data.sources.product_api_client.requests.get",
        side_effect=requests.Timeout("read timed out"),
    ):
        with caplog.at_level(logging.ERROR, logger="dessert_shop"):
            with pytest.raises(TransportFailure):
                client.fetch_products()
    records = [r for r in caplog.records if "request failed" in r.getMessage()]
    assert records and records[0].exc_info is not None


def test_decode_failure_is_logged_with_traceback(caplog: pytest.LogCaptureFixture) -> None:
    client = ProductApiClient(ENDPOINT)
    mock_response = _response(None)
    mock_response.json.side_effect = ValueError("Expecting value")
    with patch(
        "dessert_shop.infrastructure.data.sources.product_api_client.requests.get",
        return_value=mock_response,
    ):
        with caplog.at_level(logging.ERROR, logger="dessert_shop"):
            with pytest.raises(DecodeFailure):
                client.fetch_products()
    records = [r for r in caplog.records if "invalid JSON" in r.getMessage()]
    assert records and records[0].exc_info is not None


def test_malformed_endpoint_is_only_checked_on_fetch() -> None:
    client = ProductApiClient("not a url")
    assert client.endpoint == "not a url"
    with pytest.raises(InvalidEndpoint):
        client.fetch_products()
