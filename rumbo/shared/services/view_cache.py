from typing import Any, Callable, Dict, Optional, Tuple
import logging
import threading
import time

from rumbo.config.settings import settings

logger = logging.getLogger(__name__)

ROUTE_LIST_PREFIX = "routes:list:"


def route_list_key(**filters) -> str:
    parts = [f"{name}={value}" for name, value in sorted(filters.items())]
    return ROUTE_LIST_PREFIX + "&".join(parts)


def route_report_key(route_id: int) -> str:
    return f"routes:report:{route_id}"


class ViewCache:
    """Cache en memoria (por proceso) para listados de repartos y reportes"""

    def __init__(self, ttl_seconds: int):
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at < time.monotonic():
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: Any) -> None:
        if self.ttl_seconds <= 0:
            return
        with self._lock:
            self._entries[key] = (time.monotonic() + self.ttl_seconds, value)

    def get_or_build(self, key: str, builder: Callable[[], Any]) -> Any:
        value = self.get(key)
        if value is None:
            value = builder()
            self.set(key, value)
        return value

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def invalidate_prefix(self, prefix: str) -> None:
        with self._lock:
            for key in [k for k in self._entries if k.startswith(prefix)]:
                del self._entries[key]

    def invalidate_route(self, route_id: Optional[int]) -> None:
        """Invalidar listados y el reporte de un reparto tras una escritura"""
        self.invalidate_prefix(ROUTE_LIST_PREFIX)
        if route_id is not None:
            self.invalidate(route_report_key(route_id))
        logger.debug(f"Cache invalidado para reparto {route_id}")

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


view_cache = ViewCache(settings.view_cache_ttl_seconds)
