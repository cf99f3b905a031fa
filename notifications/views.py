"""
Notification endpoints.

Per-source endpoints act on one store directly. The feed endpoints merge
every source of the caller's role and route actions by category.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
import logging

from .aggregator import NotificationAggregator
from .exceptions import NotificationError
from .serializers import FeedActionSerializer
from .sources import ROLE_SOURCES, get_source

logger = logging.getLogger(__name__)


def _error_response(error):
    return Response({
        'success': False,
        'message': error.message
    }, status=error.status_code)


def _source_for_request(request, source_name):
    """Resolve a source the caller's role may use, or return an error Response"""
    try:
        source = get_source(source_name)
    except NotificationError as e:
        return None, _error_response(e)

    if source_name not in ROLE_SOURCES.get(request.user.role, []):
        return None, Response({
            'success': False,
            'message': 'You do not have access to these notifications'
        }, status=status.HTTP_403_FORBIDDEN)

    return source, None


# ============================================================================
# MERGED FEED
# ============================================================================

@api_view(['GET'])
@permission_classes([IsAuthenticated])
def notification_feed(request):
    """
    GET /api/notifications/feed/?refresh=true
    Merged feed for the caller's role, newest first, with the polling interval
    """
    use_cache = request.query_params.get('refresh', 'false').lower() != 'true'
    aggregator = NotificationAggregator(request.user.role, request.user)
    return Response(aggregator.fetch_all(use_cache=use_cache))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def feed_mark_read(request):
    """
    POST /api/notifications/feed/read/
    Body: { "id": 12, "category": "order" }
    """
    serializer = FeedActionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            'success': False,
            'errors': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    aggregator = NotificationAggregator(request.user.role, request.user)
    try:
        result = aggregator.mark_read(serializer.validated_data['id'], serializer.validated_data['category'])
    except NotificationError as e:
        return _error_response(e)

    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def feed_delete(request):
    """
    POST /api/notifications/feed/delete/
    Body: { "id": 12, "category": "supplier_order" }
    """
    serializer = FeedActionSerializer(data=request.data)
    if not serializer.is_valid():
        return Response({
            'success': False,
            'errors': serializer.errors
        }, status=status.HTTP_400_BAD_REQUEST)

    aggregator = NotificationAggregator(request.user.role, request.user)
    try:
        result = aggregator.delete(serializer.validated_data['id'], serializer.validated_data['category'])
    except NotificationError as e:
        return _error_response(e)

    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def feed_mark_all_read(request):
    """
    POST /api/notifications/feed/mark-all-read/
    """
    aggregator = NotificationAggregator(request.user.role, request.user)
    result = aggregator.mark_all_read()
    response_status = status.HTTP_200_OK if result['success'] else status.HTTP_207_MULTI_STATUS
    return Response(result, status=response_status)


@api_view(['DELETE', 'POST'])
@permission_classes([IsAuthenticated])
def feed_clear_all(request):
    """
    DELETE /api/notifications/feed/clear-all/
    Clears every source of the role; reports the outcome per source
    """
    aggregator = NotificationAggregator(request.user.role, request.user)
    result = aggregator.clear_all()
    response_status = status.HTTP_200_OK if result['success'] else status.HTTP_207_MULTI_STATUS
    return Response(result, status=response_status)


# ============================================================================
# PER SOURCE
# ============================================================================

@api_view(['GET'])
@permission_classes([IsAuthenticated])
def source_list(request, source_name):
    """
    GET /api/notifications/{source}/?unread_only=true
    """
    source, error = _source_for_request(request, source_name)
    if error:
        return error

    unread_only = request.query_params.get('unread_only', 'false').lower() == 'true'
    notifications = source.list(request.user, unread_only=unread_only)

    return Response({
        'notifications': notifications,
        'total': len(notifications),
        'unread_count': source.unread_count(request.user)
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def source_count(request, source_name):
    """
    GET /api/notifications/{source}/count/
    """
    source, error = _source_for_request(request, source_name)
    if error:
        return error

    return Response({'unread_count': source.unread_count(request.user)})


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated])
def source_mark_read(request, source_name, notification_id):
    """
    POST /api/notifications/{source}/{id}/read/
    """
    source, error = _source_for_request(request, source_name)
    if error:
        return error

    try:
        source.mark_read(notification_id, request.user)
    except NotificationError as e:
        return _error_response(e)

    return Response({
        'success': True,
        'message': 'Notification marked as read'
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def source_mark_all_read(request, source_name):
    """
    POST /api/notifications/{source}/mark-all-read/
    """
    source, error = _source_for_request(request, source_name)
    if error:
        return error

    count = source.mark_all_read(request.user)
    return Response({
        'success': True,
        'message': f'{count} notifications marked as read',
        'count': count
    })


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def source_delete(request, source_name, notification_id):
    """
    DELETE /api/notifications/{source}/{id}/
    """
    source, error = _source_for_request(request, source_name)
    if error:
        return error

    try:
        source.delete(notification_id, request.user)
    except NotificationError as e:
        return _error_response(e)

    return Response({
        'success': True,
        'message': 'Notification deleted'
    })


@api_view(['DELETE', 'POST'])
@permission_classes([IsAuthenticated])
def source_clear_all(request, source_name):
    """
    DELETE /api/notifications/{source}/clear-all/
    """
    source, error = _source_for_request(request, source_name)
    if error:
        return error

    deleted = source.clear_all(request.user)
    return Response({
        'success': True,
        'message': f'{deleted} notifications cleared',
        'deleted': deleted
    })
