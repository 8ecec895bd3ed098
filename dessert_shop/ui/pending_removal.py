"""
Pending removals: cart lines the user removed but that are still shown
(struck through) for a short delay before they leave the cart.

This is view state only. The cart store keeps the dessert until commit_due()
actually removes it.
"""

from __future__ import annotations

import time
from typing import Callable

from dessert_shop.domain.cart import CartStore
from dessert_shop.domain.models import Dessert


class PendingRemovals:
    def __init__(
        self,
        delay_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._delay = max(delay_seconds, 0.0)
        self._clock = clock
        # dessert id -> (dessert, due time)
        self._pending: dict[str, tuple[Dessert, float]] = {}

    def __getstate__(self) -> dict:
        return {"_delay": self._delay, "_pending": dict(self._pending)}

    def __setstate__(self, state: dict) -> None:
        self._delay = state.get("_delay", 0.0)
        self._pending = dict(state.get("_pending", {}))
        self._clock = time.monotonic

    @property
    def delay_seconds(self) -> float:
        return self._delay

    def mark(self, dessert: Dessert) -> None:
        """Flag a dessert for removal. Marking it again keeps the first deadline."""
        if dessert.id not in self._pending:
            self._pending[dessert.id] = (dessert, self._clock() + self._delay)

    def is_pending(self, dessert: Dessert) -> bool:
        return dessert.id in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def seconds_until_next(self) -> float | None:
        """Time left before the earliest pending removal is due, or None."""
        if not self._pending:
            return None
        earliest = min(due for _, due in self._pending.values())
        return max(earliest - self._clock(), 0.0)

    def commit_due(self, cart: CartStore) -> list[Dessert]:
        """Remove every due dessert from the cart; returns the removed ones."""
        now = self._clock()
        due = [d for d, at in self._pending.values() if at <= now]
        for dessert in due:
            del self._pending[dessert.id]
            cart.remove(dessert)
        return due

    def discard(self) -> None:
        """Forget all pending removals (used when the whole cart is cleared)."""
        self._pending.clear()
