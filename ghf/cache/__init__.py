"""
Cache package for GitHub API responses.

- cache_keys.py:     deterministic `::`-joined keys from ordered query parameters
- cache_base.py:     JSON-document disk cache (atomic writes, hit/miss/write stats)
- response_cache.py: 5-minute TTL response cache used by paginated commands
"""

from .cache_keys import CACHE_KEY_SEP, cache_key  # noqa: F401
from .response_cache import DEFAULT_RESPONSE_TTL_S, ResponseCache  # noqa: F401

__all__ = [
    "CACHE_KEY_SEP",
    "DEFAULT_RESPONSE_TTL_S",
    "ResponseCache",
    "cache_key",
]
