"""
Process-wide query cache with a single mutation -> query invalidation table.

Keys are tuples whose first element is the query name, e.g.
("user-projects", user_id). A mutation invalidates every cached key whose
query name is listed for it in INVALIDATES.
"""

import threading
import time
import logging
from typing import Any, Callable, Dict, Hashable, Tuple
from app.config import settings

logger = logging.getLogger(__name__)

QueryKey = Tuple[Hashable, ...]

USER_PROJECTS = "user-projects"
PROJECT = "project"
ANALYTICS = "analytics"
DASHBOARD = "dashboard"
PUBLIC_PROJECTS = "public-projects"
PUBLIC_SVGS = "public-svgs"
PROFILE = "profile"

INVALIDATES: Dict[str, Tuple[str, ...]] = {
    "project.create": (USER_PROJECTS, ANALYTICS, DASHBOARD, PUBLIC_PROJECTS),
    "project.update": (PROJECT, USER_PROJECTS, DASHBOARD, PUBLIC_PROJECTS, PUBLIC_SVGS),
    "project.delete": (PROJECT, USER_PROJECTS, ANALYTICS, DASHBOARD, PUBLIC_PROJECTS, PUBLIC_SVGS),
    "project.fork": (USER_PROJECTS, ANALYTICS, DASHBOARD),
    "svg.create": (USER_PROJECTS, ANALYTICS, DASHBOARD, PUBLIC_PROJECTS, PUBLIC_SVGS),
    "svg.update": (USER_PROJECTS, ANALYTICS, DASHBOARD, PUBLIC_PROJECTS, PUBLIC_SVGS),
    "svg.favorite": (ANALYTICS, DASHBOARD, PUBLIC_PROJECTS, PUBLIC_SVGS),
    "svg.view": (ANALYTICS, PUBLIC_PROJECTS, PUBLIC_SVGS),
    "svg.download": (ANALYTICS, PUBLIC_PROJECTS, PUBLIC_SVGS),
    "profile.update": (PROFILE, PROJECT, PUBLIC_PROJECTS, PUBLIC_SVGS),
    "account.delete": (
        PROFILE, PROJECT, USER_PROJECTS, ANALYTICS, DASHBOARD, PUBLIC_PROJECTS, PUBLIC_SVGS,
    ),
}


class QueryCache:
    def __init__(self, ttl_seconds: int, max_size: int):
        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self._entries: Dict[QueryKey, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: QueryKey) -> Any:
        now = time.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expiry = entry
            if now >= expiry:
                del self._entries[key]
                return None
            return value

    def set(self, key: QueryKey, value: Any) -> None:
        if self.ttl_seconds <= 0:
            return
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                self._evict_expired()
                if len(self._entries) >= self.max_size:
                    return
            self._entries[key] = (value, time.monotonic() + self.ttl_seconds)

    def get_or_load(self, key: QueryKey, loader: Callable[[], Any]) -> Any:
        cached = self.get(key)
        if cached is not None:
            return cached
        value = loader()
        self.set(key, value)
        return value

    def invalidate(self, query_name: str) -> int:
        """Drop every key for query_name. Returns how many entries were dropped."""
        with self._lock:
            stale = [k for k in self._entries if k and k[0] == query_name]
            for k in stale:
                del self._entries[k]
            return len(stale)

    def apply_mutation(self, mutation: str) -> None:
        if mutation not in INVALIDATES:
            raise KeyError(f"Unknown mutation: {mutation}")
        dropped = sum(self.invalidate(name) for name in INVALIDATES[mutation])
        if dropped:
            logger.debug(f"{mutation} invalidated {dropped} cached queries")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _evict_expired(self) -> None:
        now = time.monotonic()
        for k in [k for k, (_, expiry) in self._entries.items() if now >= expiry]:
            del self._entries[k]


query_cache = QueryCache(settings.query_cache_ttl_seconds, settings.query_cache_max_size)
