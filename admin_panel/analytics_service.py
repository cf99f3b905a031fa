from django.db.models import Count, Q
from django.utils import timezone
from datetime import timedelta
from orders.models import Order, OrderSubmission
from suppliers.models import SupplierDocument, VehicleLocation


class AnalyticsService:
    """Dashboard statistics for the transport office"""

    @staticmethod
    def get_order_status_distribution(start_date=None, end_date=None):
        """
        Count orders per status.

        Args:
            start_date: Only orders created on or after this datetime
            end_date: Only orders created on or before this datetime

        Returns:
            dict: Every status with its count (zero when absent), plus total
        """
        queryset = Order.objects.all()
        if start_date:
            queryset = queryset.filter(created_at__gte=start_date)
        if end_date:
            queryset = queryset.filter(created_at__lte=end_date)

        counts = {row['status']: row['count'] for row in queryset.values('status').annotate(count=Count('id'))}
        distribution = {code: counts.get(code, 0) for code, _ in Order.STATUS_CHOICES}
        distribution['total'] = sum(counts.values())
        return distribution

    @staticmethod
    def get_order_type_counts():
        aggregates = Order.objects.aggregate(
            buyer_requests=Count('id', filter=Q(order_type='buyer_request')),
            manual_orders=Count('id', filter=Q(order_type='manual_order')),
        )
        return aggregates

    @staticmethod
    def get_submission_metrics():
        """
        How broadcasts are going: open copies waiting on suppliers, confirmed
        copies, and confirmed copies not yet forwarded to a buyer.
        """
        return OrderSubmission.objects.aggregate(
            open=Count('id', filter=Q(status__in=OrderSubmission.OPEN_STATUSES)),
            confirmed=Count('id', filter=Q(status__in=OrderSubmission.CONFIRMED_STATUSES)),
            awaiting_buyer=Count(
                'id',
                filter=Q(status__in=OrderSubmission.CONFIRMED_STATUSES, sent_to_buyer_at__isnull=True)
            ),
        )

    @staticmethod
    def get_recent_activity(days=7):
        since = timezone.now() - timedelta(days=days)
        return {
            'days': days,
            'orders_created': Order.objects.filter(created_at__gte=since).count(),
            'orders_confirmed': Order.objects.filter(confirmed_at__gte=since).count(),
            'vehicle_locations_posted': VehicleLocation.objects.filter(created_at__gte=since).count(),
        }

    @staticmethod
    def get_pending_documents_count():
        return SupplierDocument.objects.filter(status='pending').count()

    @staticmethod
    def get_dashboard_statistics():
        """Everything the admin dashboard header shows, in one call"""
        return {
            'orders': AnalyticsService.get_order_status_distribution(),
            'order_types': AnalyticsService.get_order_type_counts(),
            'submissions': AnalyticsService.get_submission_metrics(),
            'recent': AnalyticsService.get_recent_activity(),
            'pending_documents': AnalyticsService.get_pending_documents_count(),
        }
