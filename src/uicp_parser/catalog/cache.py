"""Time-boxed cache of loaded catalogs.

Entries are keyed by the literal source identifier string; two identifiers
pointing at identical documents are cached separately.
"""

import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from uicp_parser.catalog.loader import CatalogLoader, CatalogSource
from uicp_parser.config import DEFAULT_CATALOG_TTL_SECONDS
from uicp_parser.models.catalog import Catalog
from uicp_parser.observability.logging import get_logger


logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    catalog: Catalog
    loaded_at: float


class CatalogCache:
    """Caches catalogs per source identifier for a limited time.

    Each instance owns its entries, so tests and independent hosts can use
    isolated caches. Insertions and evictions are serialized with a lock;
    the lock is never held while a catalog is being loaded.
    """

    def __init__(
        self,
        loader: Optional[CatalogLoader] = None,
        default_ttl: float = DEFAULT_CATALOG_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initializes an empty cache.

        Args:
            loader: Loader used on cache misses.
            default_ttl: TTL in seconds used when load_cached gets none.
            clock: Monotonic time source in seconds.
        """
        self.loader = loader or CatalogLoader()
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    async def load(self, source: CatalogSource) -> Catalog:
        """Loads a fresh catalog, bypassing the cache."""
        return await self.loader.load(source)

    async def load_cached(
        self, source: CatalogSource, ttl: Optional[float] = None
    ) -> Catalog:
        """Returns a cached catalog if it is young enough, else reloads it.

        Args:
            source: Catalog source. Only string identifiers are cached.
            ttl: Maximum entry age in seconds; 0 disables caching.

        Returns:
            The cached or freshly loaded Catalog.

        Raises:
            CatalogLoadError: If a reload is needed and fails.
        """
        ttl = self.default_ttl if ttl is None else ttl
        if not isinstance(source, str) or ttl <= 0:
            return await self.load(source)

        with self._lock:
            entry = self._entries.get(source)
        if entry is not None and self._clock() - entry.loaded_at < ttl:
            return entry.catalog

        catalog = await self.load(source)
        with self._lock:
            self._entries[source] = CacheEntry(
                catalog=catalog, loaded_at=self._clock()
            )
        logger.debug(
            f"Cached catalog for {source}",
            extra={"extra_fields": {"event": "uicp.catalog.cached"}},
        )
        return catalog

    def invalidate(self, source: Optional[str] = None):
        """Drops one entry, or every entry when no source is given."""
        with self._lock:
            if source is None:
                self._entries.clear()
            else:
                self._entries.pop(source, None)

    def cached_sources(self) -> list[str]:
        with self._lock:
            return list(self._entries)
