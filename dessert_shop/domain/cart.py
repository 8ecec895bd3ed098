"""
Cart store: ordered, de-duplicated selection of desserts with observers.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Callable

from dessert_shop.domain.models import Dessert
from dessert_shop.utils.logger import get_logger

logger = get_logger()


@dataclass(frozen=True)
class CartSnapshot:
    """Cart contents at one point in time, as handed to observers."""

    items: tuple[Dessert, ...]
    total: float

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def is_empty(self) -> bool:
        return not self.items


CartListener = Callable[[CartSnapshot], None]


class CartStore:
    """
    Mutable cart shared by the catalog rows and the cart summary.

    No two matching desserts (see Dessert.matches) are held at once. Every
    mutation that changes the contents notifies subscribers synchronously,
    while still holding the store lock, so each listener sees the mutations
    one by one and in order.
    """

    def __init__(self) -> None:
        self._items: list[Dessert] = []
        self._listeners: list[CartListener] = []
        self._lock = threading.RLock()

    def __getstate__(self) -> dict[str, Any]:
        """Only the items survive pickling; locks and listeners do not."""
        with self._lock:
            return {"_items": list(self._items)}

    def __setstate__(self, state: dict[str, Any]) -> None:
        self._items = list(state.get("_items", []))
        self._listeners = []
        self._lock = threading.RLock()

    # Observers

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception as e:
                logger.exception("Cart listener %r failed: %s", listener, e)

    # Mutations

    def add(self, dessert: Dessert) -> None:
        """Append the dessert unless a matching one is already in the cart."""
        with self._lock:
            if self._index_of(dessert) is not None:
                return
            self._items.append(dessert)
            logger.debug("Cart add: %s (%d items)", dessert.name, len(self._items))
            self._notify()

    def remove(self, dessert: Dessert) -> None:
        """Remove the first matching dessert; no-op when absent."""
        with self._lock:
            idx = self._index_of(dessert)
            if idx is None:
                return
            del self._items[idx]
            logger.debug("Cart remove: %s (%d items)", dessert.name, len(self._items))
            self._notify()

    def clear(self) -> None:
        with self._lock:
            if not self._items:
                return
            self._items.clear()
            logger.debug("Cart cleared")
            self._notify()

    def confirm(self) -> CartSnapshot:
        """
        Confirm the order. This empties the cart and nothing else: no order
        record is kept or sent anywhere. Returns what was confirmed.
        """
        with self._lock:
            confirmed = self.snapshot()
            logger.info("Order confirmed: %d items, total %.2f", confirmed.count, confirmed.total)
            self.clear()
            return confirmed

    # Queries

    def _index_of(self, dessert: Dessert) -> int | None:
        for i, item in enumerate(self._items):
            if item.matches(dessert):
                return i
        return None

    def contains(self, dessert: Dessert) -> bool:
        with self._lock:
            return self._index_of(dessert) is not None

    def total(self) -> float:
        """Sum of prices of the current items; 0 for an empty cart."""
        with self._lock:
            return sum((d.price for d in self._items), 0.0)

    @property
    def items(self) -> tuple[Dessert, ...]:
        with self._lock:
            return tuple(self._items)

    @property
    def count(self) -> int:
        return len(self)

    def snapshot(self) -> CartSnapshot:
        with self._lock:
            return CartSnapshot(items=tuple(self._items), total=self.total())

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __repr__(self) -> str:
        return f"CartStore(items={len(self)}, total={self.total():.2f})"
