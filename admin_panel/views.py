from rest_framework import status, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from django.db import IntegrityError, transaction
from django.db.models import Count, Prefetch, Q
from django.utils import timezone
from datetime import datetime, timedelta
import logging

from authentication.models import CustomUser
from authentication.permissions import IsAdmin
from notifications.services import NotificationService
from orders.exceptions import OrderError
from orders.models import Order, OrderSubmission, AcceptedRequest
from orders.serializers import OrderDetailSerializer, OrderSubmissionSerializer, UserSummarySerializer
from orders.transitions import StatusTransitionController
from orders.views import error_response, validation_error_response
from suppliers.models import SupplierDocument
from .analytics_service import AnalyticsService
from .cache_utils import cache_analytics, invalidate_analytics_cache
from .serializers import (
    AdminOrderListSerializer,
    AvailableSupplierSerializer,
    ConfirmedSubmissionSerializer,
    SupplierDocumentReviewListSerializer,
    AssignSupplierSerializer,
    RejectOrderSerializer,
    OrderStatusUpdateSerializer,
    SendToSuppliersSerializer,
    SubmissionStatusSerializer,
    SendToBuyerSerializer,
    DocumentReviewSerializer,
)

logger = logging.getLogger(__name__)

DATE_RANGES = {
    'today': timedelta(days=1),
    'week': timedelta(days=7),
    'month': timedelta(days=30),
}


def admin_order_queryset():
    return Order.objects.select_related(
        'load_type', 'from_district', 'to_district', 'buyer', 'assigned_supplier', 'driver', 'vehicle'
    ).prefetch_related(
        Prefetch('submissions', queryset=OrderSubmission.objects.select_related('supplier'))
    )


def _range_start(date_range, now=None):
    """Start of a named range; 'today' starts at local midnight"""
    now = now or timezone.now()
    if date_range == 'today':
        return timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
    return now - DATE_RANGES[date_range]


# ============================================================================
# BUYERS ORDERS
# ============================================================================

class AdminOrderListView(generics.ListAPIView):
    """
    GET /api/admin/orders/
    Filters: status, order_type, search, date_range (today|week|month), start_date, end_date
    """
    serializer_class = AdminOrderListSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    pagination_class = None  # Disable pagination

    def get_queryset(self):
        queryset = admin_order_queryset().annotate(
            submissions_total=Count('submissions', distinct=True)
        ).order_by('-created_at')

        status_filter = self.request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status__in=status_filter.split(','))

        order_type = self.request.query_params.get('order_type', None)
        if order_type:
            queryset = queryset.filter(order_type=order_type)

        # Search by order number, buyer, load type or places
        search = self.request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(order_number__icontains=search) |
                Q(buyer__username__icontains=search) |
                Q(buyer__first_name__icontains=search) |
                Q(buyer__last_name__icontains=search) |
                Q(buyer__company_name__icontains=search) |
                Q(load_type__name__icontains=search) |
                Q(from_place__icontains=search) |
                Q(to_place__icontains=search)
            )

        date_range = self.request.query_params.get('date_range', None)
        if date_range in DATE_RANGES:
            queryset = queryset.filter(created_at__gte=_range_start(date_range))

        start_date = self._parse_date('start_date')
        if start_date:
            queryset = queryset.filter(created_at__date__gte=start_date)
        end_date = self._parse_date('end_date')
        if end_date:
            queryset = queryset.filter(created_at__date__lte=end_date)

        return queryset

    def _parse_date(self, name):
        value = self.request.query_params.get(name, None)
        if not value:
            return None
        try:
            return datetime.strptime(value, '%Y-%m-%d').date()
        except ValueError:
            return None


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
@cache_analytics(timeout=300)  # Cache for 5 minutes
def get_order_statistics(request):
    """
    GET /api/admin/orders/statistics/
    Order counts per status and broadcast progress for the dashboard
    """
    return Response({
        'success': True,
        'data': AnalyticsService.get_dashboard_statistics()
    })


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdmin])
def order_detail(request, order_id):
    """
    GET    /api/admin/orders/<id>/  order with submissions and history
    DELETE /api/admin/orders/<id>/
    """
    order = get_object_or_404(
        admin_order_queryset().prefetch_related('status_history__changed_by'),
        id=order_id
    )

    if request.method == 'GET':
        return Response(OrderDetailSerializer(order).data)

    order_number = order.order_number
    order.delete()
    invalidate_analytics_cache()
    logger.info(f"Order {order_number} deleted by {request.user.username}")

    return Response({
        'success': True,
        'message': f'Order {order_number} deleted'
    })


# ============================================================================
# ORDER ASSIGNMENT
# ============================================================================

@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def assign_order(request, order_id):
    """
    POST /api/admin/orders/<id>/assign/
    Body: { "supplier_id": 7, "notes": "Regular rice route" }
    """
    serializer = AssignSupplierSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    try:
        order = StatusTransitionController(request.user).assign(
            order_id,
            serializer.validated_data['supplier_id'],
            notes=serializer.validated_data.get('notes', '')
        )
    except OrderError as e:
        return error_response(e)

    order = admin_order_queryset().get(id=order.id)
    return Response({
        'success': True,
        'message': f'Order {order.order_number} assigned to {order.assigned_supplier.get_display_name()}',
        'order': AdminOrderListSerializer(order).data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def reject_order(request, order_id):
    """
    POST /api/admin/orders/<id>/reject/
    Body: { "notes": "No trucks on this route" }
    """
    serializer = RejectOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    try:
        order = StatusTransitionController(request.user).reject(
            order_id, notes=serializer.validated_data.get('notes', '')
        )
    except OrderError as e:
        return error_response(e)

    order = admin_order_queryset().get(id=order.id)
    return Response({
        'success': True,
        'message': f'Order {order.order_number} rejected',
        'order': AdminOrderListSerializer(order).data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def update_order_status(request, order_id):
    """
    POST /api/admin/orders/<id>/update-status/
    Body: { "status": "in_transit", "reason": "Driver called in" }
    """
    serializer = OrderStatusUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    try:
        order = StatusTransitionController(request.user).update_status(
            order_id,
            serializer.validated_data['status'],
            reason=serializer.validated_data.get('reason', '')
        )
    except OrderError as e:
        return error_response(e)

    order = admin_order_queryset().get(id=order.id)
    return Response({
        'success': True,
        'message': f'Order {order.order_number} is now {order.get_status_label().lower()}',
        'order': AdminOrderListSerializer(order).data
    })


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def send_to_suppliers(request, order_id):
    """
    POST /api/admin/orders/<id>/send-to-suppliers/
    Body: { "supplier_ids": [3, 7, 9] }

    Returns one outcome per supplier (created, skipped, failed) and the
    wa.me links for suppliers notified by this call.
    """
    serializer = SendToSuppliersSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    try:
        result = StatusTransitionController(request.user).send_to_suppliers(
            order_id, serializer.validated_data['supplier_ids']
        )
    except OrderError as e:
        return error_response(e)

    if result.created:
        response_status = status.HTTP_201_CREATED
    elif result.failed:
        response_status = status.HTTP_207_MULTI_STATUS
    else:
        response_status = status.HTTP_200_OK

    return Response(result.to_dict(), status=response_status)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdmin])
def order_submissions(request, order_id):
    """GET /api/admin/orders/<id>/submissions/"""
    order = get_object_or_404(Order, id=order_id)
    submissions = order.submissions.select_related('supplier', 'driver', 'vehicle')
    return Response({
        'order_id': order.id,
        'order_number': order.order_number,
        'order_status': order.status,
        'submissions': OrderSubmissionSerializer(submissions, many=True).data
    })


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdmin])
def update_submission(request, submission_id):
    """
    PATCH /api/admin/submissions/<id>/
    Body: { "status": "responded" | "rejected" | "ignored" }
    """
    serializer = SubmissionStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    try:
        submission = StatusTransitionController(request.user).set_submission_status(
            submission_id, serializer.validated_data['status']
        )
    except OrderError as e:
        return error_response(e)

    return Response({
        'success': True,
        'message': f'Submission marked {submission.get_status_display().lower()}',
        'submission': OrderSubmissionSerializer(submission).data
    })


class AvailableSupplierListView(generics.ListAPIView):
    """
    GET /api/admin/suppliers/available/?order_id=12&search=kumar
    Active supplier accounts; with order_id, the ones already sent that order are flagged
    """
    serializer_class = AvailableSupplierSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    pagination_class = None  # Disable pagination

    def get_queryset(self):
        queryset = CustomUser.objects.filter(role='supplier', is_active=True).annotate(
            active_vehicles=Count('vehicles', filter=Q(vehicles__is_active=True))
        ).order_by('company_name', 'username')

        search = self.request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(username__icontains=search) |
                Q(company_name__icontains=search) |
                Q(first_name__icontains=search) |
                Q(phone_number__icontains=search) |
                Q(city__icontains=search)
            )
        return queryset

    def get_serializer_context(self):
        context = super().get_serializer_context()
        order_id = self.request.query_params.get('order_id', None)
        notified_ids = set()
        if order_id and order_id.isdigit():
            notified_ids = set(
                OrderSubmission.objects.filter(order_id=int(order_id)).values_list('supplier_id', flat=True)
            )
        context['notified_ids'] = notified_ids
        return context


class BuyerListView(generics.ListAPIView):
    """GET /api/admin/buyers/  buyers an accepted request can be forwarded to"""
    serializer_class = UserSummarySerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    pagination_class = None  # Disable pagination

    def get_queryset(self):
        queryset = CustomUser.objects.filter(role='buyer', is_active=True).order_by('username')
        search = self.request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(username__icontains=search) |
                Q(company_name__icontains=search) |
                Q(phone_number__icontains=search)
            )
        return queryset


# ============================================================================
# SUPPLIERS CONFIRMED
# ============================================================================

class SuppliersConfirmedListView(generics.ListAPIView):
    """
    GET /api/admin/suppliers-confirmed/?order_type=manual_order&pending=true
    Submissions a supplier confirmed, newest response first
    """
    serializer_class = ConfirmedSubmissionSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    pagination_class = None  # Disable pagination

    def get_queryset(self):
        queryset = OrderSubmission.objects.filter(
            status__in=OrderSubmission.CONFIRMED_STATUSES
        ).select_related(
            'supplier', 'driver', 'vehicle',
            'order__load_type', 'order__from_district', 'order__to_district',
            'order__buyer', 'order__assigned_supplier', 'order__driver', 'order__vehicle'
        ).prefetch_related('accepted_requests__buyer').order_by('-responded_at')

        order_type = self.request.query_params.get('order_type', None)
        if order_type:
            queryset = queryset.filter(order__order_type=order_type)

        if self.request.query_params.get('pending', 'false').lower() == 'true':
            queryset = queryset.filter(sent_to_buyer_at__isnull=True)

        return queryset


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def send_to_buyer(request, submission_id):
    """
    POST /api/admin/suppliers-confirmed/<submission_id>/send-to-buyer/
    Body: { "buyer_id": 4 }
    Forwarding the same confirmation to the same buyer twice is a conflict.
    """
    submission = get_object_or_404(
        OrderSubmission.objects.select_related('order', 'supplier', 'driver', 'vehicle'),
        id=submission_id,
        status__in=OrderSubmission.CONFIRMED_STATUSES
    )

    serializer = SendToBuyerSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    buyer = CustomUser.objects.get(id=serializer.validated_data['buyer_id'])

    try:
        with transaction.atomic():
            accepted = AcceptedRequest.objects.create(
                submission=submission,
                order=submission.order,
                buyer=buyer,
                sent_by=request.user,
            )
            submission.sent_to_buyer_at = accepted.sent_at
            submission.save(update_fields=['sent_to_buyer_at', 'updated_at'])
            NotificationService.notify_buyer_order_sent(accepted)
    except IntegrityError:
        return Response({
            'success': False,
            'message': f'Order {submission.order.order_number} has already been sent to {buyer.get_display_name()}'
        }, status=status.HTTP_409_CONFLICT)

    logger.info(f"Order {submission.order.order_number} sent to buyer {buyer.username} by {request.user.username}")
    return Response({
        'success': True,
        'message': f'Order {submission.order.order_number} sent to {buyer.get_display_name()}',
        'accepted_request_id': accepted.id,
        'sent_at': accepted.sent_at
    }, status=status.HTTP_201_CREATED)


# ============================================================================
# DOCUMENT VERIFICATION
# ============================================================================

class SupplierDocumentListView(generics.ListAPIView):
    """
    GET /api/admin/documents/?status=pending&document_type=vehicle_rc
    """
    serializer_class = SupplierDocumentReviewListSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    pagination_class = None  # Disable pagination

    def get_queryset(self):
        queryset = SupplierDocument.objects.select_related('supplier', 'vehicle', 'driver', 'reviewed_by')

        status_filter = self.request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)

        document_type = self.request.query_params.get('document_type', None)
        if document_type:
            queryset = queryset.filter(document_type=document_type)

        return queryset


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdmin])
def verify_document(request, document_id):
    """
    POST /api/admin/documents/<id>/verify/
    Body: { "status": "approved" | "rejected", "review_notes": "..." }
    """
    document = get_object_or_404(
        SupplierDocument.objects.select_related('supplier', 'vehicle', 'driver'),
        id=document_id
    )

    serializer = DocumentReviewSerializer(data=request.data)
    if not serializer.is_valid():
        return validation_error_response(serializer)

    with transaction.atomic():
        document.status = serializer.validated_data['status']
        document.review_notes = serializer.validated_data.get('review_notes', '')
        document.reviewed_by = request.user
        document.reviewed_at = timezone.now()
        document.save()
        NotificationService.notify_supplier_document_reviewed(document)

    return Response({
        'success': True,
        'message': f'Document {document.status}',
        'document': SupplierDocumentReviewListSerializer(document).data
    })
