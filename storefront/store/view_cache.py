import json
from typing import Any, Optional
from redis import Redis
from redis.exceptions import RedisError
import structlog
from storefront.core.config import settings

logger = structlog.get_logger(__name__)

def view_key(path: str) -> str:
    return f"view:{path}"

class ViewCache:
    """Cached renderings of storefront views, keyed by path.

    ``invalidate("/cart")`` drops ``view:/cart`` and every per-user variant
    stored under ``view:/cart:<suffix>``. Redis outages degrade to cache misses.
    """

    def __init__(self, client: Redis, ttl: Optional[int] = None):
        self.client = client
        self.ttl = ttl or settings.CACHE_TTL_SECONDS

    def get(self, path: str) -> Optional[Any]:
        try:
            raw = self.client.get(view_key(path))
        except RedisError:
            logger.warning("view_cache_unavailable", path=path)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            return None

    def set(self, path: str, value: Any) -> None:
        try:
            self.client.set(view_key(path), json.dumps(value, default=str), ex=self.ttl)
        except RedisError:
            logger.warning("view_cache_unavailable", path=path)

    def invalidate(self, *paths: str) -> None:
        for path in paths:
            try:
                keys = [view_key(path)] + list(self.client.scan_iter(match=f"{view_key(path)}:*"))
                self.client.delete(*keys)
            except RedisError:
                logger.warning("view_cache_invalidate_failed", path=path)
