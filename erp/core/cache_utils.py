"""
Caching utilities for expensive report queries
Uses Redis (django-redis) in production, any Django cache backend otherwise
"""
from django.core.cache import cache
from functools import wraps
import hashlib
import logging

logger = logging.getLogger(__name__)

# Cache TTLs (in seconds)
INVENTORY_SUMMARY_CACHE_TTL = 180  # 3 minutes
HELPDESK_REPORT_CACHE_TTL = 300  # 5 minutes

# Cache key prefixes, tracked so they can be invalidated without SCAN
CACHE_PREFIXES = ('inventory_summary', 'helpdesk_report')


def make_cache_key(prefix, *args, **kwargs):
    """Generate a unique cache key from arguments"""
    key_data = f"{prefix}:{args}:{sorted(kwargs.items())}"
    key_hash = hashlib.md5(key_data.encode()).hexdigest()
    return f"{prefix}:v{get_prefix_version(prefix)}:{key_hash}"


def get_prefix_version(prefix):
    return cache.get(f"{prefix}:version", 1)


def cached_query(cache_ttl=60, key_prefix="query"):
    """
    Decorator to cache expensive queries

    Usage:
        @cached_query(cache_ttl=120, key_prefix="helpdesk_report")
        def get_expensive_data(company_id):
            return data
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = make_cache_key(key_prefix, *args, **kwargs)

            cached_data = cache.get(cache_key)
            if cached_data is not None:
                logger.debug(f"Cache HIT for {key_prefix}: {cache_key}")
                return cached_data

            logger.debug(f"Cache MISS for {key_prefix}: {cache_key}")
            result = func(*args, **kwargs)
            cache.set(cache_key, result, cache_ttl)
            return result
        return wrapper
    return decorator


def invalidate_prefix(prefix):
    """
    Invalidate every cached entry for a prefix by bumping its version.
    Works on all cache backends; old keys expire on their own TTL.
    """
    version_key = f"{prefix}:version"
    try:
        cache.incr(version_key)
    except ValueError:
        cache.set(version_key, 2, None)
    logger.debug(f"Invalidated cache prefix: {prefix}")


def invalidate_inventory_cache():
    invalidate_prefix('inventory_summary')


def invalidate_helpdesk_cache():
    invalidate_prefix('helpdesk_report')
