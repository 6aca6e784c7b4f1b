from .parse_cache import CacheEntry, ParseCache, ParseCacheConfig

__all__ = ["CacheEntry", "ParseCache", "ParseCacheConfig"]
