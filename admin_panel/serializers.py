from rest_framework import serializers
from authentication.models import CustomUser
from orders.models import Order, OrderSubmission
from orders.serializers import OrderSerializer, UserSummarySerializer
from orders.transitions import ADMIN_SUBMISSION_STATUSES
from suppliers.models import SupplierDocument


class AdminOrderListSerializer(OrderSerializer):
    """Order row for the admin tables, with broadcast progress"""
    submissions_count = serializers.SerializerMethodField()
    confirmed_by = serializers.SerializerMethodField()

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ['admin_notes', 'submissions_count', 'confirmed_by']
        read_only_fields = fields

    def get_submissions_count(self, obj):
        # Annotated by the list view; falls back to a query for single objects
        count = getattr(obj, 'submissions_total', None)
        return count if count is not None else obj.submissions.count()

    def get_confirmed_by(self, obj):
        submission = next(
            (s for s in obj.submissions.all() if s.status in OrderSubmission.CONFIRMED_STATUSES),
            None
        )
        if submission is None:
            return None
        return {
            'submission_id': submission.id,
            'supplier_id': submission.supplier_id,
            'supplier_name': submission.supplier.get_display_name(),
        }


class AvailableSupplierSerializer(serializers.ModelSerializer):
    """Supplier account as shown in the send-to-suppliers picker"""
    name = serializers.CharField(source='get_display_name', read_only=True)
    active_vehicles = serializers.IntegerField(read_only=True)
    already_notified = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = [
            'id', 'username', 'name', 'phone_number', 'company_name', 'city', 'state',
            'active_vehicles', 'already_notified'
        ]

    def get_already_notified(self, obj):
        return obj.id in self.context.get('notified_ids', set())


class ConfirmedSubmissionSerializer(serializers.ModelSerializer):
    """A supplier-confirmed order with everything the office forwards to a buyer"""
    order = OrderSerializer(read_only=True)
    supplier = UserSummarySerializer(read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    driver_name = serializers.CharField(source='driver.driver_name', read_only=True, default=None)
    vehicle_number = serializers.CharField(source='vehicle.vehicle_number', read_only=True, default=None)
    vehicle_body_type = serializers.CharField(source='vehicle.get_body_type_display', read_only=True, default=None)
    sent_to_buyers = serializers.SerializerMethodField()

    class Meta:
        model = OrderSubmission
        fields = [
            'id', 'order', 'supplier', 'status', 'status_display',
            'driver', 'driver_name', 'driver_mobile', 'vehicle', 'vehicle_number', 'vehicle_body_type',
            'submitted_at', 'responded_at', 'sent_to_buyer_at', 'sent_to_buyers'
        ]

    def get_sent_to_buyers(self, obj):
        return [
            {'buyer_id': accepted.buyer_id, 'buyer_name': accepted.buyer.get_display_name(), 'sent_at': accepted.sent_at}
            for accepted in obj.accepted_requests.all()
        ]


class SupplierDocumentReviewListSerializer(serializers.ModelSerializer):
    supplier = UserSummarySerializer(read_only=True)
    document_type_display = serializers.CharField(source='get_document_type_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    vehicle_number = serializers.CharField(source='vehicle.vehicle_number', read_only=True, default=None)
    driver_name = serializers.CharField(source='driver.driver_name', read_only=True, default=None)
    reviewed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = SupplierDocument
        fields = [
            'id', 'supplier', 'document_type', 'document_type_display', 'document_url',
            'vehicle', 'vehicle_number', 'driver', 'driver_name',
            'status', 'status_display', 'review_notes', 'reviewed_by_name', 'reviewed_at', 'submitted_at'
        ]

    def get_reviewed_by_name(self, obj):
        return obj.reviewed_by.get_display_name() if obj.reviewed_by else None


# ============================================================================
# REQUEST BODIES
# ============================================================================

class AssignSupplierSerializer(serializers.Serializer):
    supplier_id = serializers.IntegerField()
    notes = serializers.CharField(required=False, allow_blank=True, max_length=2000)


class RejectOrderSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, allow_blank=True, max_length=2000)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=1000)


class SendToSuppliersSerializer(serializers.Serializer):
    supplier_ids = serializers.ListField(
        child=serializers.IntegerField(min_value=1),
        allow_empty=False
    )


class SubmissionStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ADMIN_SUBMISSION_STATUSES)


class SendToBuyerSerializer(serializers.Serializer):
    buyer_id = serializers.IntegerField()

    def validate_buyer_id(self, value):
        if not CustomUser.objects.filter(id=value, role='buyer', is_active=True).exists():
            raise serializers.ValidationError('Buyer not found')
        return value


class DocumentReviewSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['approved', 'rejected'])
    review_notes = serializers.CharField(required=False, allow_blank=True, max_length=2000)

    def validate(self, data):
        if data['status'] == 'rejected' and not data.get('review_notes', '').strip():
            raise serializers.ValidationError({'review_notes': 'A reason is required when rejecting a document'})
        return data
