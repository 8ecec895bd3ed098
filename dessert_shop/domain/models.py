"""
Catalog domain models: raw product records and the desserts mapped from them.
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field
from numbers import Real
from typing import Any

from dessert_shop.domain.errors import DecodeFailure


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Product:
    """A product record as returned by the remote catalog API."""

    title: str
    price: float
    category: str
    image: str
    id: int | None = None
    description: str = ""

    @classmethod
    def from_api(cls, record: Any) -> "Product":
        """
        Validate one API record and build a Product.

        Extra keys are ignored. Raises DecodeFailure when the record is not an
        object or a required field has the wrong type.
        """
        if not isinstance(record, dict):
            raise DecodeFailure(f"Product record must be an object, got {type(record).__name__}")
        for key in ("title", "category", "image"):
            if not isinstance(record.get(key), str):
                raise DecodeFailure(f"Product record field {key!r} must be a string")
        price = record.get("price")
        # bool is a Real subclass; "price": true is not a price
        if isinstance(price, bool) or not isinstance(price, Real):
            raise DecodeFailure("Product record field 'price' must be a number")
        if not math.isfinite(price):
            raise DecodeFailure(f"Product record has a non-finite price: {price}")
        if price < 0:
            raise DecodeFailure(f"Product record has a negative price: {price}")

        raw_id = record.get("id")
        description = record.get("description")
        return cls(
            title=record["title"],
            price=float(price),
            category=record["category"],
            image=record["image"],
            id=raw_id if isinstance(raw_id, int) and not isinstance(raw_id, bool) else None,
            description=description if isinstance(description, str) else "",
        )


@dataclass(frozen=True)
class Dessert:
    """A dessert shown in the catalog and held by the cart."""

    name: str
    type: str
    price: float
    image_name: str
    id: str = field(default_factory=_new_id)

    @classmethod
    def from_product(cls, product: Product) -> "Dessert":
        """Map a product to a dessert with a freshly generated id."""
        return cls(
            name=product.title,
            type=product.category,
            price=product.price,
            image_name=product.image,
        )

    def matches(self, other: "Dessert") -> bool:
        """Same dessert: same id, or same name, type, price and image."""
        if self.id == other.id:
            return True
        return (
            self.name == other.name
            and self.type == other.type
            and self.price == other.price
            and self.image_name == other.image_name
        )

    @property
    def has_remote_image(self) -> bool:
        return self.image_name.startswith(("http://", "https://"))


def map_products(records: list[Any], limit: int) -> list[Dessert]:
    """Keep the first `limit` records and map each one to a Dessert."""
    return [Dessert.from_product(Product.from_api(r)) for r in records[:limit]]
