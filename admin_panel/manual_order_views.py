"""
Manual Order Creation and Management Views

Manual orders come in by phone or WhatsApp and are entered by the office.
They have no buyer account behind them, are numbered MO-<n>, and are closed
by the office once the trip is done.
"""
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.db.models import Count
import logging

from authentication.permissions import IsAdmin
from orders.exceptions import OrderError
from orders.serializers import ManualOrderSerializer
from orders.transitions import StatusTransitionController
from orders.views import error_response, validation_error_response
from .cache_utils import invalidate_analytics_cache
from .serializers import AdminOrderListSerializer
from .views import admin_order_queryset

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def manual_orders(request):
    """
    GET  /api/admin/orders/manual/?status=pending
    POST /api/admin/orders/manual/

    Body:
    {
      "load_type": 2,
      "estimated_tons": "12.5",
      "from_state": "Karnataka", "from_district": 4, "from_place": "Mandya",
      "to_state": "Tamil Nadu", "to_district": 9, "to_place": "Hosur",
      "required_date": "2026-10-24",
      "admin_notes": "Called in by Ramesh Traders"
    }
    """
    if request.method == 'GET':
        queryset = admin_order_queryset().filter(order_type='manual_order').annotate(
            submissions_total=Count('submissions', distinct=True)
        ).order_by('-created_at')

        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        return Response(AdminOrderListSerializer(queryset, many=True).data)

    serializer = ManualOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    order = serializer.save(
        order_type='manual_order',
        status='pending',
        created_by=request.user,
    )

    invalidate_analytics_cache()
    logger.info(f"Manual order {order.order_number} created by {request.user.username}")

    order = admin_order_queryset().get(id=order.id)
    return Response({
        'success': True,
        'message': f'Manual order {order.order_number} created',
        'order': AdminOrderListSerializer(order).data
    }, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def complete_order(request, order_id):
    """
    POST /api/admin/orders/<id>/complete/
    Manual orders only, from assigned or confirmed
    """
    try:
        order = StatusTransitionController(request.user).mark_complete(order_id)
    except OrderError as e:
        return error_response(e)

    order = admin_order_queryset().get(id=order.id)
    return Response({
        'success': True,
        'message': f'Order {order.order_number} marked complete',
        'order': AdminOrderListSerializer(order).data
    })
