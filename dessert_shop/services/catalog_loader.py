"""
Catalog loader: fetch product records once, map them to desserts, and expose
a loading / ready / failed state to the UI.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol

from dessert_shop.domain.errors import CatalogError
from dessert_shop.domain.models import Dessert, map_products
from dessert_shop.utils.logger import get_logger

logger = get_logger()

DEFAULT_LIMIT = 6


class CatalogSource(Protocol):
    def fetch_products(self) -> list[Any]: ...


class CatalogStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class CatalogSnapshot:
    status: CatalogStatus
    desserts: tuple[Dessert, ...] = ()
    error: CatalogError | None = None


CatalogListener = Callable[[CatalogSnapshot], None]


class CatalogLoader:
    """
    Loads the dessert catalog from a source (remote API client or static
    repository) and tracks its state.

    Failures never escape: InvalidEndpoint, TransportFailure and DecodeFailure
    all end in the FAILED state with an empty dessert list. There is no retry;
    call reset() and load() again to recover.

    The fetch itself runs without holding the state lock, so a second load()
    issued while one is in flight sees the in-flight flag and returns the
    current desserts without another request.
    """

    def __init__(self, source: CatalogSource | None, limit: int | None = DEFAULT_LIMIT) -> None:
        self._source = source
        self._limit = limit
        self._status = CatalogStatus.LOADING
        self._desserts: list[Dessert] = []
        self._error: CatalogError | None = None
        self._in_flight = False
        self._listeners: list[CatalogListener] = []
        self._lock = threading.RLock()

    def __getstate__(self) -> dict[str, Any]:
        """Keep loaded state; the source, lock and listeners are recreated."""
        with self._lock:
            ready = self._status is CatalogStatus.READY
            return {
                "_limit": self._limit,
                "_status": self._status if ready else CatalogStatus.LOADING,
                "_desserts": list(self._desserts) if ready else [],
            }

    def __setstate__(self, state: dict[str, Any]) -> None:
        self._source = None
        self._limit = state.get("_limit", DEFAULT_LIMIT)
        self._status = state.get("_status", CatalogStatus.LOADING)
        self._desserts = list(state.get("_desserts", []))
        self._error = None
        self._in_flight = False
        self._listeners = []
        self._lock = threading.RLock()

    @property
    def source(self) -> CatalogSource | None:
        return self._source

    def attach_source(self, source: CatalogSource) -> None:
        with self._lock:
            self._source = source

    # State

    @property
    def status(self) -> CatalogStatus:
        with self._lock:
            return self._status

    @property
    def desserts(self) -> tuple[Dessert, ...]:
        with self._lock:
            return tuple(self._desserts)

    @property
    def error(self) -> CatalogError | None:
        with self._lock:
            return self._error

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._in_flight

    def snapshot(self) -> CatalogSnapshot:
        with self._lock:
            return CatalogSnapshot(self._status, tuple(self._desserts), self._error)

    def subscribe(self, listener: CatalogListener) -> Callable[[], None]:
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
                logger.exception("Catalog listener %r failed: %s", listener, e)

    def _transition(
        self,
        status: CatalogStatus,
        desserts: list[Dessert],
        error: CatalogError | None,
    ) -> None:
        self._status = status
        self._desserts = desserts
        self._error = error
        self._notify()

    def reset(self) -> None:
        """Go back to LOADING with no desserts, so a fresh load() can run."""
        with self._lock:
            if self._in_flight:
                return
            self._transition(CatalogStatus.LOADING, [], None)

    # Loading

    def _begin(self) -> bool:
        with self._lock:
            if self._in_flight:
                logger.info("Catalog load already in flight; ignoring duplicate request")
                return False
            self._in_flight = True
            if self._status is not CatalogStatus.LOADING:
                self._transition(CatalogStatus.LOADING, [], None)
            return True

    def _fetch(self) -> tuple[list[Dessert], CatalogError | None]:
        source = self._source
        try:
            if source is None:
                raise CatalogError("No catalog source attached")
            records = source.fetch_products()
            limit = self._limit if self._limit is not None else len(records)
            return map_products(records, limit), None
        except CatalogError as e:
            return [], e
        except Exception as e:
            logger.exception("Catalog source raised unexpectedly: %s", e)
            return [], CatalogError(f"Unexpected catalog failure: {type(e).__name__}: {e}", original=e)

    def _finish(self, desserts: list[Dessert], error: CatalogError | None) -> list[Dessert]:
        with self._lock:
            self._in_flight = False
            if error is not None:
                logger.error("Catalog load failed (%s): %s", type(error).__name__, error)
                self._transition(CatalogStatus.FAILED, [], error)
                return []
            logger.info("Catalog ready with %d desserts", len(desserts))
            self._transition(CatalogStatus.READY, desserts, None)
            return list(desserts)

    def _abort(self) -> None:
        with self._lock:
            self._in_flight = False

    def load(self) -> list[Dessert]:
        """
        Fetch and map the catalog on the calling thread.

        Returns:
            The mapped desserts, or [] when the load failed (see `error`).
        """
        if not self._begin():
            return list(self.desserts)
        try:
            desserts, error = self._fetch()
        except BaseException:
            self._abort()
            raise
        return self._finish(desserts, error)

    async def load_async(self) -> list[Dessert]:
        """
        Same as load(), but the fetch runs on a worker thread and the state
        change is applied back on the awaiting event loop.
        """
        if not self._begin():
            return list(self.desserts)
        try:
            desserts, error = await asyncio.to_thread(self._fetch)
        except BaseException:
            self._abort()
            raise
        return self._finish(desserts, error)
