from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from django.db import transaction
from django.shortcuts import get_object_or_404
from django_ratelimit.decorators import ratelimit
import logging

from authentication.permissions import IsBuyer, IsSupplier
from admin_panel.cache_utils import invalidate_analytics_cache
from notifications.services import NotificationService
from transport_office.db_retry import retry_on_transient_error
from .exceptions import OrderError
from .models import Order, OrderSubmission, AcceptedRequest
from .serializers import (
    OrderSerializer,
    OrderDetailSerializer,
    TransportRequestSerializer,
    CancelOrderSerializer,
    SupplierSubmissionSerializer,
    ConfirmSubmissionSerializer,
    ProgressUpdateSerializer,
    AcceptedRequestSerializer,
)
from .transitions import StatusTransitionController

logger = logging.getLogger(__name__)

# Buyers may withdraw a request until a supplier has confirmed it
BUYER_CANCELLABLE_STATUSES = ['draft', 'pending', 'submitted']


def error_response(error):
    """Response for an OrderError in the project's shape"""
    return Response({
        'success': False,
        'message': error.message
    }, status=error.status_code)


def validation_error_response(serializer):
    return Response({
        'success': False,
        'errors': serializer.errors
    }, status=status.HTTP_400_BAD_REQUEST)


ORDER_RELATED = ['load_type', 'from_district', 'to_district', 'buyer', 'assigned_supplier', 'driver', 'vehicle']


# ============================================================================
# BUYER
# ============================================================================

@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsBuyer])
@ratelimit(key='user', rate='30/h', method='POST', block=True)
def my_orders(request):
    """
    GET  /api/orders/?status=pending
    POST /api/orders/  create a transport request (draft with "save_as_draft": true)
    """
    if request.method == 'GET':
        orders = _buyer_orders(request.user, request.query_params.get('status'))
        serializer = OrderSerializer(orders, many=True)
        return Response(serializer.data)

    serializer = TransportRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    save_as_draft = serializer.validated_data.pop('save_as_draft', False)

    with transaction.atomic():
        order = serializer.save(
            buyer=request.user,
            created_by=request.user,
            order_type='buyer_request',
            status='draft' if save_as_draft else 'pending',
        )
        if not save_as_draft:
            NotificationService.notify_admins_new_transport_request(order)

    invalidate_analytics_cache()
    logger.info(f"Transport request {order.order_number} created by {request.user.username} ({order.status})")

    return Response({
        'success': True,
        'message': f'Transport request {order.order_number} created',
        'order': OrderSerializer(order).data
    }, status=status.HTTP_201_CREATED)


@retry_on_transient_error
def _buyer_orders(buyer, status_filter=None):
    orders = Order.objects.filter(buyer=buyer).select_related(*ORDER_RELATED)
    if status_filter:
        orders = orders.filter(status=status_filter)
    return list(orders)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsBuyer])
def order_detail(request, order_id):
    """GET /api/orders/<id>/"""
    order = get_object_or_404(
        Order.objects.select_related(*ORDER_RELATED).prefetch_related('status_history'),
        id=order_id,
        buyer=request.user
    )
    data = OrderSerializer(order).data
    data['status_history'] = [
        {
            'old_status': entry.old_status,
            'new_status': entry.new_status,
            'changed_at': entry.changed_at,
            'reason': entry.reason,
        }
        for entry in order.status_history.all()
    ]
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsBuyer])
def submit_order(request, order_id):
    """POST /api/orders/<id>/submit/  draft -> pending"""
    order = get_object_or_404(Order, id=order_id, buyer=request.user)

    try:
        order = StatusTransitionController(request.user).submit_request(order.id)
    except OrderError as e:
        return error_response(e)

    return Response({
        'success': True,
        'message': f'Transport request {order.order_number} submitted',
        'order': OrderSerializer(order).data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsBuyer])
def cancel_order(request, order_id):
    """
    POST /api/orders/<id>/cancel/
    Body: { "reason": "Load postponed" }
    """
    order = get_object_or_404(Order, id=order_id, buyer=request.user)

    serializer = CancelOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    if order.status not in BUYER_CANCELLABLE_STATUSES:
        return Response({
            'success': False,
            'message': f'Order {order.order_number} is {order.get_status_label().lower()} and can no longer be cancelled'
        }, status=status.HTTP_400_BAD_REQUEST)

    try:
        order = StatusTransitionController(request.user).cancel(
            order.id, reason=serializer.validated_data.get('reason') or 'Cancelled by buyer'
        )
    except OrderError as e:
        return error_response(e)

    return Response({
        'success': True,
        'message': f'Order {order.order_number} cancelled',
        'order': OrderSerializer(order).data
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsBuyer])
def accepted_requests(request):
    """GET /api/orders/accepted/  confirmed orders the office forwarded to this buyer"""
    accepted = AcceptedRequest.objects.filter(buyer=request.user).select_related(
        'order__load_type', 'order__from_district', 'order__to_district',
        'submission__supplier', 'submission__driver', 'submission__vehicle'
    )
    serializer = AcceptedRequestSerializer(accepted, many=True)
    return Response(serializer.data)


# ============================================================================
# SUPPLIER SUBMISSIONS
# ============================================================================

@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSupplier])
def my_submissions(request):
    """
    GET /api/supplier/submissions/?status=submitted
    Orders broadcast to this supplier, newest first
    """
    submissions = _supplier_submissions(request.user, request.query_params.get('status'))
    serializer = SupplierSubmissionSerializer(submissions, many=True)
    return Response(serializer.data)


@retry_on_transient_error
def _supplier_submissions(supplier, status_filter=None):
    submissions = OrderSubmission.objects.filter(supplier=supplier).select_related(
        'supplier', 'driver', 'vehicle',
        *[f'order__{field}' for field in ORDER_RELATED]
    )
    if status_filter:
        submissions = submissions.filter(status=status_filter)
    return list(submissions)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSupplier])
def submission_detail(request, submission_id):
    """GET /api/supplier/submissions/<id>/  also marks the submission viewed"""
    try:
        submission = StatusTransitionController(request.user).mark_viewed(submission_id, request.user)
    except OrderError as e:
        return error_response(e)

    return Response(SupplierSubmissionSerializer(submission).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSupplier])
def confirm_submission(request, submission_id):
    """
    POST /api/supplier/submissions/<id>/confirm/
    Body: { "driver_id": 3, "vehicle_id": 5, "driver_mobile": "9876543210" }
    """
    serializer = ConfirmSubmissionSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    try:
        submission = StatusTransitionController(request.user).confirm_submission(
            submission_id,
            request.user,
            driver_id=serializer.validated_data['driver_id'],
            vehicle_id=serializer.validated_data['vehicle_id'],
            driver_mobile=serializer.validated_data.get('driver_mobile', ''),
        )
    except OrderError as e:
        return error_response(e)

    submission.refresh_from_db()
    return Response({
        'success': True,
        'message': f'Order {submission.order.order_number} confirmed',
        'submission': SupplierSubmissionSerializer(submission).data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSupplier])
def decline_submission(request, submission_id):
    """POST /api/supplier/submissions/<id>/decline/"""
    try:
        submission = StatusTransitionController(request.user).decline_submission(submission_id, request.user)
    except OrderError as e:
        return error_response(e)

    return Response({
        'success': True,
        'message': 'Order declined',
        'submission': SupplierSubmissionSerializer(submission).data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSupplier])
def update_progress(request, order_id):
    """
    POST /api/supplier/orders/<id>/progress/
    Body: { "status": "picked_up" | "in_transit" | "delivered" }
    """
    serializer = ProgressUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    try:
        order = StatusTransitionController(request.user).update_progress(
            order_id, serializer.validated_data['status'], supplier=request.user
        )
    except OrderError as e:
        return error_response(e)

    return Response({
        'success': True,
        'message': f'Order {order.order_number} is now {order.get_status_label().lower()}',
        'order': OrderSerializer(order).data
    })
