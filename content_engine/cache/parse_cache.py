#!/usr/bin/env python3
"""
Parse Cache - LRU memoization of parsed message content

Message views re-render the same unchanged text many times, so the block
list for a given content string is cached. Entries are keyed by a hash of
the content and every hit is re-validated against the literal string, so a
hash collision can never return another message's blocks.
"""

import time
import threading
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from ..schemas.blocks import ContentBlock

logger = logging.getLogger(__name__)


class CacheEntry(NamedTuple):
    """Immutable cache entry: the exact content and the blocks parsed from it"""
    content: str
    blocks: List[ContentBlock]
    stored_at: float


@dataclass(frozen=True)
class ParseCacheConfig:
    """Immutable configuration for the parse cache"""
    max_size: int = 100
    enabled: bool = True

    def __post_init__(self):
        if self.max_size < 0:
            raise ValueError("max_size must be non-negative")


class ParseCache:
    """
    Thread-safe LRU cache from message content to parsed blocks.

    - Capacity fixed at construction; the least recently used entry is
      evicted before inserting into a full cache
    - ``get`` promotes the entry to most recently used
    - Access is serialized with an RLock
    """

    def __init__(
        self,
        config: Optional[ParseCacheConfig] = None,
        key_func: Callable[[str], Any] = hash,
    ):
        self.config = config or ParseCacheConfig()
        self._key = key_func
        self._cache: "OrderedDict[Any, CacheEntry]" = OrderedDict()
        self._lock = threading.RLock()

        self._stats = {
            'hits': 0,
            'misses': 0,
            'evictions': 0,
            'collisions': 0,
            'total_requests': 0
        }

    @property
    def active(self) -> bool:
        return self.config.enabled and self.config.max_size > 0

    def get(self, content: str) -> Optional[List[ContentBlock]]:
        """
        Get the cached block list for ``content``.

        Args:
            content: Exact message text

        Returns:
            Blocks stored for exactly this content, None otherwise
        """
        if not self.active:
            return None

        with self._lock:
            self._stats['total_requests'] += 1
            key = self._key(content)

            entry = self._cache.get(key)
            if entry is None:
                self._stats['misses'] += 1
                return None

            if entry.content != content:
                logger.debug("CACHE: Key collision, treating as miss")
                self._stats['collisions'] += 1
                self._stats['misses'] += 1
                return None

            self._cache.move_to_end(key)
            self._stats['hits'] += 1
            return list(entry.blocks)

    def set(self, content: str, blocks: List[ContentBlock]) -> None:
        """
        Store the block list parsed from ``content``.

        Args:
            content: Exact message text
            blocks: Blocks produced for it
        """
        if not self.active:
            return

        with self._lock:
            key = self._key(content)
            if key in self._cache:
                self._cache.move_to_end(key)
            else:
                self._evict_if_necessary()

            self._cache[key] = CacheEntry(
                content=content,
                blocks=list(blocks),
                stored_at=time.time()
            )

    def clear(self) -> None:
        """Clear all cached entries"""
        with self._lock:
            self._cache.clear()
            self._reset_stats()
        logger.info("CACHE: Cleared")

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    def __contains__(self, content: str) -> bool:
        """Membership check without touching recency or stats"""
        with self._lock:
            entry = self._cache.get(self._key(content))
            return entry is not None and entry.content == content

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics for monitoring"""
        with self._lock:
            total_requests = self._stats['total_requests']
            hit_rate = (self._stats['hits'] / total_requests * 100) if total_requests > 0 else 0.0

            oldest_age = 0.0
            if self._cache:
                oldest_age = time.time() - min(entry.stored_at for entry in self._cache.values())

            return {
                **self._stats.copy(),
                'cache_size': len(self._cache),
                'hit_rate_percent': round(hit_rate, 2),
                'oldest_entry_age_seconds': round(oldest_age, 3)
            }

    def _evict_if_necessary(self) -> None:
        """Evict least recently used entries until there is room for one more"""
        while len(self._cache) >= self.config.max_size:
            self._cache.popitem(last=False)
            self._stats['evictions'] += 1
            logger.debug("CACHE: Evicted least recently used entry")

    def _reset_stats(self) -> None:
        for key in self._stats:
            self._stats[key] = 0
