"""
Output-format cache.

Holds the full output-format name -> content mapping so that a templating
pass does not hit the store once per placeholder. The mapping is reloaded
when older than the TTL or after invalidate(), which the output-format
write paths call on every create, update and delete.

Concurrent callers share one instance. Refreshes are not deduplicated:
two callers finding the cache stale may both reload, which is harmless
because a reload is a single bulk read.
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Callable

from slidecreator.models import NamedKind

if TYPE_CHECKING:
    from slidecreator.storage import ContentStore

logger = logging.getLogger(__name__)

DEFAULT_FORMAT_CACHE_TTL = 30.0  # seconds


class OutputFormatCache:
    """TTL cache of output-format contents keyed by name."""

    def __init__(
        self,
        store: "ContentStore",
        ttl_seconds: float = DEFAULT_FORMAT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store = store
        self._ttl = ttl_seconds
        self._clock = clock
        self._formats: dict[str, str] | None = None
        self._loaded_at = 0.0

    @property
    def is_loaded(self) -> bool:
        return self._formats is not None

    async def get_formats(self) -> dict[str, str]:
        """Return the name -> content mapping, reloading it when stale."""
        now = self._clock()
        if self._formats is not None and now - self._loaded_at < self._ttl:
            return self._formats

        records = await self._store.list_named(NamedKind.OUTPUT_FORMAT)
        self._formats = {record.name: record.content for record in records}
        self._loaded_at = now
        logger.debug(f"Output-format cache refreshed: {len(self._formats)} formats")
        return self._formats

    def invalidate(self) -> None:
        """Drop the cached mapping; the next lookup reloads it."""
        self._formats = None
