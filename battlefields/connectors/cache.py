"""In-memory TTL cache sitting in front of every Battlefields API call.

Each logical request is identified by a *field* (endpoint name plus encoded
query string). Successful results are kept for ``ttl`` seconds; when
``cache_errors`` is enabled a failed fetch also leaves a marker behind so the
same field is not retried until the cooldown has elapsed.

Individual map operations are atomic. ``retrieve`` itself is not serialized
per field: two workers missing the same field at the same time will both
fetch, and whichever finishes last owns the cached value.
"""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

ErrorSink = Callable[[Exception], None]


@dataclass(frozen=True)
class CacheConfig:
    ttl: float = 60.0
    cache_errors: bool = True

    @property
    def enabled(self) -> bool:
        return self.ttl > 0


class RetrievalCache(Generic[T]):
    """Field-keyed TTL cache with optional error cooldown.

    Args:
        config: TTL and error caching switch. ``ttl <= 0`` turns caching off.
        on_error: called once with every exception swallowed by ``retrieve``.
        clock: monotonic time source in seconds, injectable for tests.
    """

    def __init__(
        self,
        config: CacheConfig,
        on_error: ErrorSink,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self._on_error = on_error
        self._clock = clock
        self._lock = threading.Lock()
        self._values: Dict[str, Tuple[float, T]] = {}
        self._errors: Dict[str, float] = {}

    def _lookup(self, field: str) -> Tuple[Optional[Tuple[float, T]], Optional[float]]:
        with self._lock:
            return self._values.get(field), self._errors.get(field)

    def _store(self, field: str, value: T) -> None:
        with self._lock:
            self._values[field] = (self._clock(), value)
            self._errors.pop(field, None)

    def _store_error(self, field: str) -> None:
        with self._lock:
            now = self._clock()
            entry = self._values.get(field)
            # a fresh success stored by a concurrent fetch wins over the failure
            if entry is not None and now - entry[0] < self.config.ttl:
                return
            self._values.pop(field, None)
            self._errors[field] = now

    def retrieve(self, field: str, fetch: Callable[[], T], default: Callable[[], T]) -> T:
        """Return the cached value for ``field`` or fetch a fresh one.

        Never raises for a failing ``fetch``: the exception goes to the error
        sink and ``default()`` is returned instead.
        """
        if self.config.enabled:
            entry, failed_at = self._lookup(field)
            now = self._clock()
            if entry is not None:
                stored_at, value = entry
                if now - stored_at < self.config.ttl:
                    logger.debug("cache hit for %s", field)
                    return value
            elif self.config.cache_errors and failed_at is not None:
                if now - failed_at < self.config.ttl:
                    logger.debug("%s is cooling down after a failure", field)
                    return default()

        try:
            value = fetch()
        except Exception as exc:
            self._on_error(exc)
            if self.config.enabled and self.config.cache_errors:
                self._store_error(field)
            return default()

        if self.config.enabled:
            self._store(field, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._values.clear()
            self._errors.clear()

    def cache_info(self) -> Dict[str, Any]:
        """Age in seconds of every cached success, keyed by field."""
        now = self._clock()
        with self._lock:
            return {k: now - ts for k, (ts, _) in self._values.items()}

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
