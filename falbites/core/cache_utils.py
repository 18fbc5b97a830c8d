"""
Caching helpers for list endpoints that are read far more than written.
Backed by django.core.cache (Redis via django-redis in production).
"""
from django.core.cache import cache
import logging

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
LIST_CACHE_TTL = 3600  # 1 hour

CATEGORY_LIST_CACHE_KEY = 'categories:list'
DAILY_TIPS_CACHE_KEY = 'dailyTipsCache'
SETTINGS_CACHE_KEY = 'settings'


def cached_list(key, builder, ttl=LIST_CACHE_TTL):
    """Return the cached value for ``key``, building and storing it on a miss."""
    data = cache.get(key)
    if data is not None:
        logger.debug(f"Cache HIT: {key}")
        return data
    logger.debug(f"Cache MISS: {key}")
    data = builder()
    cache.set(key, data, ttl)
    return data


def invalidate(*keys):
    cache.delete_many(list(keys))
    logger.info(f"Cache invalidated: {', '.join(keys)}")
