import json
import hashlib
import logging
from typing import Optional
from app.core.redis import get_redis
from app.core.config import settings
from app.core.metrics import cache_hits, cache_misses

logger = logging.getLogger(__name__)

QUOTE_KEY_PREFIX = "price"


def quote_cache_key(tenant_id: str, params: dict) -> str:
    params_str = json.dumps(params, sort_keys=True, default=str)
    return f"{QUOTE_KEY_PREFIX}:{tenant_id}:{hashlib.sha256(params_str.encode()).hexdigest()}"


async def get_cached_quote(key: str) -> Optional[dict]:
    redis = get_redis()
    if redis is None:
        return None
    try:
        cached = await redis.get(key)
    except Exception as e:
        logger.warning(f"Cache retrieval failed: {e}")
        return None

    if not cached:
        cache_misses.labels(cache_key=QUOTE_KEY_PREFIX).inc()
        return None
    cache_hits.labels(cache_key=QUOTE_KEY_PREFIX).inc()
    return json.loads(cached)


async def set_cached_quote(key: str, value: dict) -> None:
    redis = get_redis()
    if redis is None:
        return
    try:
        await redis.set(key, json.dumps(value, default=str), ex=settings.PRICE_CACHE_TTL)
    except Exception as e:
        logger.warning(f"Cache write failed: {e}")


async def invalidate_tenant_quotes(tenant_id: str) -> int:
    """Drop every cached quote of a tenant; returns the number of keys removed."""
    redis = get_redis()
    if redis is None:
        return 0
    removed = 0
    try:
        async for key in redis.scan_iter(match=f"{QUOTE_KEY_PREFIX}:{tenant_id}:*"):
            removed += await redis.delete(key)
    except Exception as e:
        logger.warning(f"Cache invalidation failed for tenant {tenant_id}: {e}")
    return removed
