from django.core.cache import cache
from functools import wraps
import hashlib
import json
import time

ANALYTICS_VERSION_KEY = 'analytics:version'


def _analytics_version():
    version = cache.get(ANALYTICS_VERSION_KEY)
    if version is None:
        cache.add(ANALYTICS_VERSION_KEY, int(time.time() * 1000), None)
        version = cache.get(ANALYTICS_VERSION_KEY)
    return version


def cache_analytics(timeout=300):
    """
    Decorator to cache dashboard statistics responses.

    Args:
        timeout: Cache timeout in seconds (default 300 = 5 minutes)
    """
    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            cache_key = get_cache_key_for_analytics(
                view_func.__name__,
                query=dict(request.query_params),
                args=list(args),
                kwargs=kwargs
            )

            cached_response = cache.get(cache_key)
            if cached_response is not None:
                return cached_response

            response = view_func(request, *args, **kwargs)

            # Only successful responses are cached
            if response.status_code == 200:
                # Render the response before caching to avoid pickle errors
                response.render()
                cache.set(cache_key, response, timeout)

            return response

        return wrapper
    return decorator


def invalidate_analytics_cache():
    """
    Invalidate every statistics entry by moving to a new key version.
    Called on each order status change and order create/delete.
    """
    try:
        cache.incr(ANALYTICS_VERSION_KEY)
    except ValueError:
        cache.set(ANALYTICS_VERSION_KEY, int(time.time() * 1000), None)
    return True


def get_cache_key_for_analytics(view_name, **params):
    """
    Generate a cache key for statistics data.

    Args:
        view_name: Name of the statistics view
        **params: Query parameters

    Returns:
        str: Cache key
    """
    cache_key_data = {
        'view': view_name,
        'params': params
    }
    cache_key_str = json.dumps(cache_key_data, sort_keys=True, default=str)
    cache_key_hash = hashlib.md5(cache_key_str.encode()).hexdigest()
    return f'analytics:{_analytics_version()}:{view_name}:{cache_key_hash}'
