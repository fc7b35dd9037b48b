"""
1.0 Local Cache Module
Read-through file cache for the generated sitemap.

The cache file holds the raw bytes of the last generated document. Its own
modification time is the cache timestamp: the file is fresh while
mtime + ttl >= now. Nothing is kept in memory between calls.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Callable, Optional

from xml_sitemap.config import SitemapConfig

logger = logging.getLogger(__name__)

CACHE_HIT = "HIT"
CACHE_MISS = "MISS"


@dataclass
class CacheOutcome:
    """Document bytes plus how they were obtained (None when caching is off)."""

    body: bytes
    status: Optional[str] = None

    @property
    def hit(self) -> bool:
        return self.status == CACHE_HIT


class LocalCache:
    """
    2.0 LocalCache Class
    Decides between serving the stored document and building a new one.
    """

    def __init__(
        self,
        path: str,
        ttl_seconds: int,
        enabled: bool = True,
        clock: Callable[[], float] = time.time,
    ):
        """
        2.1 Initialize the cache gate.

        Args:
            path: Cache file location.
            ttl_seconds: How long a written file stays fresh.
            enabled: When False the cache file is never read or written.
            clock: Returns the current time in epoch seconds.
        """
        self.path = path
        self.ttl_seconds = ttl_seconds
        self.enabled = enabled
        self.clock = clock

    @classmethod
    def from_config(cls, config: SitemapConfig, clock: Callable[[], float] = time.time) -> "LocalCache":
        return cls(
            path=config.localcache_file,
            ttl_seconds=config.localcache_expire,
            enabled=config.localcache,
            clock=clock,
        )

    def is_fresh(self) -> bool:
        """2.2 True when the cache file exists and has not outlived its TTL."""
        try:
            mod_time = os.stat(self.path).st_mtime
        except OSError:
            return False
        return mod_time + self.ttl_seconds >= self.clock()

    def read(self) -> Optional[bytes]:
        """2.3 Stored document, or None if it cannot be read."""
        try:
            with open(self.path, "rb") as f:
                return f.read()
        except OSError as e:
            logger.warning(f"Cache file {self.path} could not be read, rebuilding: {e}")
            return None

    def write(self, body: bytes) -> bool:
        """2.4 Overwrite the cache file with body. Returns False on failure."""
        try:
            with open(self.path, "wb") as f:
                f.write(body)
        except OSError as e:
            logger.warning(f"Cache file {self.path} could not be written: {e}")
            return False
        logger.debug(f"Wrote {len(body)} bytes to cache file {self.path}")
        return True

    def get_or_build(self, build: Callable[[], bytes]) -> CacheOutcome:
        """
        2.5 Serve from the cache file when fresh, otherwise build and store.

        Args:
            build: Produces a fresh document; only called on a miss or when
                caching is disabled.

        Returns:
            CacheOutcome tagged HIT, MISS, or None when disabled.
        """
        if not self.enabled:
            return CacheOutcome(body=build())

        if self.is_fresh():
            cached = self.read()
            if cached is not None:
                logger.info(f"Cache hit: serving {self.path}")
                return CacheOutcome(body=cached, status=CACHE_HIT)

        logger.info(f"Cache miss: rebuilding {self.path}")
        body = build()
        self.write(body)
        return CacheOutcome(body=body, status=CACHE_MISS)
