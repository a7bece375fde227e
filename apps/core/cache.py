"""
Response cache for anonymous catalog reads

This module implements:
1. A process-lifetime TTL cache of GET response payloads keyed by URL
2. Substring-based invalidation used after promotion/product writes
3. A view decorator that only serves/stores anonymous GET requests

The cache instance lives on the core app config (see CoreConfig.ready) and
is passed around explicitly; nothing here is a module-level singleton.
"""
import copy
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from functools import wraps
from typing import Any, Dict, Optional

from django.apps import apps

logger = logging.getLogger(__name__)


@dataclass
class CachedResponse:
    """Cached response payload."""
    data: Any
    status_code: int
    timestamp: datetime
    ttl_seconds: int = 300

    def is_expired(self) -> bool:
        return datetime.utcnow() - self.timestamp > timedelta(seconds=self.ttl_seconds)


class ResponseCache:
    """
    TTL cache for serialized GET responses.
    Oldest entry is evicted when ``max_size`` is reached.
    """

    def __init__(self, ttl_seconds: int = 300, max_size: int = 500):
        self._cache: Dict[str, CachedResponse] = {}
        self._ttl_seconds = ttl_seconds
        self._max_size = max_size
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    @staticmethod
    def make_key(full_path: str) -> str:
        return f"__cache__{full_path}"

    def get(self, full_path: str) -> Optional[CachedResponse]:
        """Get cached response if it exists and has not expired."""
        key = self.make_key(full_path)
        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                if not cached.is_expired():
                    self._hits += 1
                    logger.debug(f"Cache hit for: {full_path}")
                    return cached
                del self._cache[key]
            self._misses += 1
        logger.debug(f"Cache miss for: {full_path}")
        return None

    def set(self, full_path: str, data: Any, status_code: int = 200, ttl_seconds: int = None):
        """Cache a response payload."""
        key = self.make_key(full_path)
        with self._lock:
            if key not in self._cache and len(self._cache) >= self._max_size:
                oldest_key = min(self._cache, key=lambda k: self._cache[k].timestamp)
                del self._cache[oldest_key]

            self._cache[key] = CachedResponse(
                data=copy.deepcopy(data),
                status_code=status_code,
                timestamp=datetime.utcnow(),
                ttl_seconds=ttl_seconds or self._ttl_seconds,
            )

    def invalidate(self, pattern: str) -> int:
        """Drop every entry whose key contains ``pattern``."""
        with self._lock:
            matching_keys = [key for key in self._cache if pattern in key]
            for key in matching_keys:
                del self._cache[key]
        logger.debug(f"Invalidated {len(matching_keys)} cache entries matching: {pattern}")
        return len(matching_keys)

    def clear(self):
        with self._lock:
            self._cache.clear()
            self._hits = 0
            self._misses = 0

    def get_stats(self) -> Dict:
        """Get cache statistics."""
        total = self._hits + self._misses
        hit_rate = (self._hits / total * 100) if total > 0 else 0
        return {
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": f"{hit_rate:.1f}%",
            "size": len(self._cache),
            "max_size": self._max_size,
            "ttl_seconds": self._ttl_seconds,
        }

    def __len__(self) -> int:
        return len(self._cache)


def get_response_cache() -> ResponseCache:
    """The process-wide cache owned by the core app config."""
    return apps.get_app_config('core').response_cache


def cache_anonymous_get(ttl_seconds: int = None):
    """
    Decorator for APIView ``get`` handlers.

    Authenticated requests bypass the cache entirely so user-specific
    payloads are never shared.
    """
    def decorator(view_method):
        @wraps(view_method)
        def wrapper(view, request, *args, **kwargs):
            from rest_framework.response import Response

            user = getattr(request, 'user', None)
            if request.method != 'GET' or (user is not None and user.is_authenticated):
                return view_method(view, request, *args, **kwargs)

            cache = getattr(view, 'response_cache', None) or get_response_cache()
            full_path = request.get_full_path()
            cached = cache.get(full_path)
            if cached is not None:
                return Response(copy.deepcopy(cached.data), status=cached.status_code)

            response = view_method(view, request, *args, **kwargs)
            if response.status_code == 200:
                cache.set(full_path, response.data, response.status_code, ttl_seconds)
            return response
        return wrapper
    return decorator
