"""
Tests for ShopSession: source selection, one load per appearance, retry, confirm.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from dessert_shop.domain.cart import CartStore
from dessert_shop.domain.errors import TransportFailure
from dessert_shop.infrastructure.data.repositories.dessert_repository import DessertRepository
from dessert_shop.infrastructure.data.sources.product_api_client import ProductApiClient
from dessert_shop.services.catalog_loader import CatalogStatus
from dessert_shop.services.shop_session import ShopSession, build_catalog_source


def _records(n: int) -> list[dict]:
    return [{"title": f"d{i}", "price": 2.0, "category": "c", "image": f"https://img.test/{i}"} for i in range(n)]


def test_build_catalog_source(monkeypatch: pytest.MonkeyPatch) -> None:
    assert isinstance(build_catalog_source("static"), DessertRepository)
    assert isinstance(build_catalog_source("api"), ProductApiClient)
    monkeypatch.setenv("CATALOG_SOURCE", "static")
    assert isinstance(build_catalog_source(), DessertRepository)


def test_ensure_catalog_loads_once() -> None:
    src = MagicMock()
    src.fetch_products.return_value = _records(8)
    session = ShopSession(source=src, source_kind="api")

    session.ensure_catalog()
    session.ensure_catalog()

    assert src.fetch_products.call_count == 1
    assert session.catalog.status is CatalogStatus.READY
    assert len(session.catalog.desserts) == 6


def test_failed_load_is_not_retried_automatically() -> None:
    src = MagicMock()
    src.fetch_products.side_effect = TransportFailure("down")
    session = ShopSession(source=src, source_kind="api")

    session.ensure_catalog()
    session.ensure_catalog()

    assert src.fetch_products.call_count == 1
    assert session.catalog.status is CatalogStatus.FAILED


def test_reload_catalog_recovers() -> None:
    src = MagicMock()
    src.fetch_products.side_effect = [TransportFailure("down"), _records(2)]
    session = ShopSession(source=src, source_kind="api")

    session.ensure_catalog()
    session.reload_catalog()

    assert session.catalog.status is CatalogStatus.READY
    assert len(session.catalog.desserts) == 2


def test_static_session_keeps_all_bundled_desserts() -> None:
    session = ShopSession(source_kind="static")
    session.ensure_catalog()
    assert len(session.catalog.desserts) == 7


def test_catalog_limit_from_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CATALOG_LIMIT", "3")
    src = MagicMock()
    src.fetch_products.return_value = _records(5)
    session = ShopSession(source=src, source_kind="api")
    session.ensure_catalog()
    assert len(session.catalog.desserts) == 3


def test_confirming_session_cart_empties_it() -> None:
    session = ShopSession(source=DessertRepository(), source_kind="static")
    session.ensure_catalog()
    for d in session.catalog.desserts[:3]:
        session.cart.add(d)
    assert session.cart.total() == pytest.approx(6.5 + 8.0 + 5.5)

    session.cart.confirm()

    assert session.cart.count == 0
    assert session.cart.total() == 0


def test_sessions_do_not_share_carts() -> None:
    src = MagicMock()
    src.fetch_products.return_value = _records(1)
    one = ShopSession(source=src, source_kind="api")
    two = ShopSession(source=src, source_kind="api")
    one.ensure_catalog()
    one.cart.add(one.catalog.desserts[0])
    assert two.cart.count == 0


def test_injected_cart_is_used() -> None:
    cart = CartStore()
    session = ShopSession(source=DessertRepository(), cart=cart, source_kind="static")
    assert session.cart is cart


def test_injected_static_repository_keeps_all_desserts(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an explicit kind, the injected source decides whether to truncate."""
    monkeypatch.delenv("CATALOG_SOURCE", raising=False)
    session = ShopSession(source=DessertRepository())
    session.ensure_catalog()
    assert len(session.catalog.desserts) == 7


def test_injected_api_client_is_truncated(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CATALOG_SOURCE", "static")
    client = ProductApiClient("https://fakestoreapi.com/products")
    client.fetch_products = MagicMock(return_value=_records(9))
    session = ShopSession(source=client)
    session.ensure_catalog()
    assert len(session.catalog.desserts) == 6
