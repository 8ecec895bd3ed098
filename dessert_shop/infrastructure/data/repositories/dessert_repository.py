"""
Static dessert repository: the bundled dessert list in data/catalog/desserts.json.

Records use the same shape as the remote product API (title, price, category,
image), so the CatalogLoader maps both sources the same way.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from dessert_shop.domain.errors import DecodeFailure
from dessert_shop.utils.config import project_root
from dessert_shop.utils.logger import get_logger

logger = get_logger()


def _desserts_path() -> Path:
    return project_root() / "data" / "catalog" / "desserts.json"


class DessertRepository:
    """Load the static dessert records from desserts.json."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or _desserts_path()
        self._records: list[dict[str, Any]] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def fetch_products(self) -> list[dict[str, Any]]:
        """
        Return the bundled product records. A missing file yields an empty
        catalog; an unreadable one raises DecodeFailure.
        """
        if self._records is not None:
            return list(self._records)
        p = self._path
        if not p.is_file():
            logger.warning("Dessert catalog file not found: %s", p)
            self._records = []
            return []
        try:
            with open(p, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise DecodeFailure(f"Failed to read dessert catalog {p}: {e}", original=e) from e
        if not isinstance(data, list):
            raise DecodeFailure(f"Dessert catalog {p} must hold a JSON array")
        self._records = data
        logger.info("Loaded %d static desserts from %s", len(data), p)
        return list(data)
