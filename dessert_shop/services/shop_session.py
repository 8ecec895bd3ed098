"""
Per-session shop state: one cart and one catalog loader, owned together.
"""

from __future__ import annotations

from typing import Any

from dessert_shop.domain.cart import CartStore
from dessert_shop.infrastructure.data.repositories.dessert_repository import DessertRepository
from dessert_shop.infrastructure.data.sources.product_api_client import ProductApiClient
from dessert_shop.services.catalog_loader import CatalogLoader, CatalogSource, CatalogStatus
from dessert_shop.utils.config import catalog_limit, catalog_source
from dessert_shop.utils.logger import get_logger

logger = get_logger()


def build_catalog_source(kind: str | None = None) -> CatalogSource:
    """Return the configured catalog source: remote API client or static repository."""
    kind = kind or catalog_source()
    if kind == "static":
        return DessertRepository()
    return ProductApiClient()


def _kind_of(source: CatalogSource) -> str:
    """The bundled repository is "static" and keeps every dessert; anything else is "api"."""
    return "static" if isinstance(source, DessertRepository) else "api"


class ShopSession:
    """
    Holds the cart and the catalog loader for one UI session.

    Views receive this object (or its parts) explicitly; there is no global
    cart. Pickling keeps the cart contents and a ready catalog, and drops the
    catalog source, which is reattached on demand.
    """

    def __init__(
        self,
        source: CatalogSource | None = None,
        cart: CartStore | None = None,
        limit: int | None = None,
        source_kind: str | None = None,
    ) -> None:
        if source_kind is None:
            source_kind = _kind_of(source) if source is not None else catalog_source()
        self._source_kind = source_kind
        if source is None:
            source = build_catalog_source(self._source_kind)
        if limit is None and self._source_kind != "static":
            limit = catalog_limit()
        self.cart = cart if cart is not None else CartStore()
        self.catalog = CatalogLoader(source, limit=limit)
        self._load_requested = False

    def __getstate__(self) -> dict[str, Any]:
        return {
            "_source_kind": self._source_kind,
            "cart": self.cart,
            "catalog": self.catalog,
            "_load_requested": self._load_requested and self.catalog.status is CatalogStatus.READY,
        }

    def __setstate__(self, state: dict[str, Any]) -> None:
        self._source_kind = state.get("_source_kind", "api")
        self.cart = state.get("cart") if state.get("cart") is not None else CartStore()
        self.catalog = state.get("catalog") if state.get("catalog") is not None else CatalogLoader(None)
        self._load_requested = state.get("_load_requested", False)

    def _ensure_source(self) -> None:
        if self.catalog.source is None:
            self.catalog.attach_source(build_catalog_source(self._source_kind))

    def ensure_catalog(self) -> None:
        """
        Load the catalog the first time the page appears. Later calls do
        nothing, whatever the outcome of that first load.
        """
        if self._load_requested:
            return
        self._load_requested = True
        self._ensure_source()
        self.catalog.load()

    def reload_catalog(self) -> None:
        """Start over after a failed load."""
        logger.info("Reloading %s catalog", self._source_kind)
        self._ensure_source()
        self.catalog.reset()
        self._load_requested = True
        self.catalog.load()
