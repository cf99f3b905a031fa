"""
Health check endpoint for monitoring and load balancers
"""
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.utils import timezone
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods
import logging
import time

import psutil

logger = logging.getLogger(__name__)

start_time = time.time()

MEMORY_WARNING_MB = 400


def _memory_usage_mb():
    """RSS of this process plus its sibling workers, in megabytes"""
    process = psutil.Process()
    total = process.memory_info().rss

    parent = process.parent()
    if parent:
        try:
            for child in parent.children(recursive=True):
                if child.pid == process.pid:
                    continue
                try:
                    total += child.memory_info().rss
                except (psutil.NoSuchProcess, psutil.AccessDenied):
                    pass
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            total = process.memory_info().rss

    return total / 1024 / 1024


@csrf_exempt
@require_http_methods(["GET", "HEAD"])
def health_check(request):
    """
    Returns:
        - 200 OK: database reachable
        - 503 Service Unavailable: database unreachable

    Response format:
        {
            "status": "healthy" | "unhealthy",
            "service": "transport-office-api",
            "database": "connected" | "disconnected",
            "memory_mb": 150.25,
            "memory_warning": false,
            "uptime_seconds": 3600,
            "timestamp": "2026-10-19T14:23:45Z"
        }
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as e:
        logger.error(f"Health check failed - database error: {e}", exc_info=True)
        return JsonResponse({
            'status': 'unhealthy',
            'service': 'transport-office-api',
            'database': 'disconnected',
            'error': str(e),
            'timestamp': timezone.now().isoformat()
        }, status=503)

    memory_mb = _memory_usage_mb()
    memory_warning = memory_mb > MEMORY_WARNING_MB

    if memory_warning:
        logger.warning(f"Health check - memory warning: {memory_mb:.2f}MB exceeds {MEMORY_WARNING_MB}MB threshold")
    else:
        logger.info(f"Health check passed - memory: {memory_mb:.2f}MB")

    return JsonResponse({
        'status': 'healthy',
        'service': 'transport-office-api',
        'database': 'connected',
        'memory_mb': round(memory_mb, 2),
        'memory_warning': memory_warning,
        'uptime_seconds': int(time.time() - start_time),
        'timestamp': timezone.now().isoformat()
    }, status=200)
