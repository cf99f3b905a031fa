"""
Custom middleware for handling rate limiting
"""

from django.http import JsonResponse
from django_ratelimit.exceptions import Ratelimited
from django.utils.deprecation import MiddlewareMixin
import logging

logger = logging.getLogger(__name__)


class RateLimitMiddleware(MiddlewareMixin):
    """
    Turn Ratelimited exceptions into 429 JSON responses instead of 403
    """

    def process_exception(self, request, exception):
        if isinstance(exception, Ratelimited):
            user = getattr(request, 'user', None)
            logger.warning(
                f"Rate limit exceeded for {request.path} from IP: {request.META.get('REMOTE_ADDR')} "
                f"User: {user.id if user is not None and user.is_authenticated else 'Anonymous'}"
            )

            return JsonResponse({
                'success': False,
                'message': 'Too many requests. Please try again later.',
                'detail': 'Rate limit exceeded'
            }, status=429)

        return None
