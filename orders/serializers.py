from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers
from authentication.models import CustomUser
from .models import Order, OrderSubmission, OrderStatusHistory, AcceptedRequest
from .transitions import PROGRESS_STATUSES
from .validators import validate_load_quantity, validate_phone_number


class UserSummarySerializer(serializers.ModelSerializer):
    """Who placed, handles or receives an order"""
    name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'username', 'name', 'phone_number', 'company_name', 'role']


class OrderSerializer(serializers.ModelSerializer):
    status_label = serializers.CharField(source='get_status_label', read_only=True)
    order_type_display = serializers.CharField(source='get_order_type_display', read_only=True)
    load_type_name = serializers.CharField(source='load_type.name', read_only=True)
    from_district_name = serializers.CharField(source='from_district.name', read_only=True)
    to_district_name = serializers.CharField(source='to_district.name', read_only=True)
    quantity_display = serializers.CharField(source='get_quantity_display', read_only=True)
    route_display = serializers.CharField(source='get_route_display', read_only=True)
    buyer = UserSummarySerializer(read_only=True)
    assigned_supplier = UserSummarySerializer(read_only=True)
    driver_name = serializers.SerializerMethodField()
    vehicle_number = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'order_type', 'order_type_display', 'status', 'status_label',
            'buyer', 'load_type', 'load_type_name', 'estimated_tons', 'number_of_goods', 'quantity_display',
            'from_state', 'from_district', 'from_district_name', 'from_place', 'from_taluk',
            'to_state', 'to_district', 'to_district_name', 'to_place', 'to_taluk', 'delivery_place',
            'route_display', 'required_date', 'special_instructions', 'rate', 'distance_km',
            'assigned_supplier', 'driver', 'driver_name', 'vehicle', 'vehicle_number', 'driver_mobile',
            'created_at', 'updated_at', 'assigned_at', 'confirmed_at', 'completed_at'
        ]
        read_only_fields = fields

    def get_driver_name(self, obj):
        return obj.driver.driver_name if obj.driver else None

    def get_vehicle_number(self, obj):
        return obj.vehicle.vehicle_number if obj.vehicle else None


class OrderWriteSerializer(serializers.ModelSerializer):
    """
    Validates a new transport request (or manual order) before it is saved.

    Load type and districts must be active, and the order needs estimated tons,
    a number of goods, or both.
    """

    class Meta:
        model = Order
        fields = [
            'load_type', 'estimated_tons', 'number_of_goods',
            'from_state', 'from_district', 'from_place', 'from_taluk',
            'to_state', 'to_district', 'to_place', 'to_taluk', 'delivery_place',
            'required_date', 'special_instructions', 'rate', 'distance_km'
        ]

    def validate_load_type(self, value):
        if not value.is_active:
            raise serializers.ValidationError(f'Load type "{value.name}" is no longer available')
        return value

    def validate_from_district(self, value):
        if not value.is_active:
            raise serializers.ValidationError(f'District "{value.name}" is no longer available')
        return value

    def validate_to_district(self, value):
        if not value.is_active:
            raise serializers.ValidationError(f'District "{value.name}" is no longer available')
        return value

    def validate(self, data):
        try:
            validate_load_quantity(data.get('estimated_tons'), data.get('number_of_goods'))
        except DjangoValidationError as e:
            if hasattr(e, 'error_dict'):
                raise serializers.ValidationError(e.message_dict)
            raise serializers.ValidationError({'non_field_errors': e.messages})
        return data


class TransportRequestSerializer(OrderWriteSerializer):
    """Buyer form. ``save_as_draft`` keeps the request out of the admin queue."""
    save_as_draft = serializers.BooleanField(default=False, write_only=True)

    class Meta(OrderWriteSerializer.Meta):
        fields = OrderWriteSerializer.Meta.fields + ['save_as_draft']


class ManualOrderSerializer(OrderWriteSerializer):
    """Office-entered order, no buyer account behind it"""

    class Meta(OrderWriteSerializer.Meta):
        fields = OrderWriteSerializer.Meta.fields + ['admin_notes']


class OrderStatusHistorySerializer(serializers.ModelSerializer):
    changed_by_name = serializers.SerializerMethodField()

    class Meta:
        model = OrderStatusHistory
        fields = ['id', 'old_status', 'new_status', 'changed_by', 'changed_by_name', 'changed_at', 'reason']

    def get_changed_by_name(self, obj):
        return obj.changed_by.get_display_name() if obj.changed_by else None


class OrderSubmissionSerializer(serializers.ModelSerializer):
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    supplier = UserSummarySerializer(read_only=True)
    driver_name = serializers.SerializerMethodField()
    vehicle_number = serializers.SerializerMethodField()

    class Meta:
        model = OrderSubmission
        fields = [
            'id', 'order', 'supplier', 'status', 'status_display',
            'notification_sent', 'whatsapp_sent',
            'driver', 'driver_name', 'vehicle', 'vehicle_number', 'driver_mobile',
            'submitted_at', 'responded_at', 'sent_to_buyer_at', 'updated_at'
        ]
        read_only_fields = fields

    def get_driver_name(self, obj):
        return obj.driver.driver_name if obj.driver else None

    def get_vehicle_number(self, obj):
        return obj.vehicle.vehicle_number if obj.vehicle else None


class SupplierSubmissionSerializer(OrderSubmissionSerializer):
    """A supplier's view of a submission, with the order spelled out"""
    order = OrderSerializer(read_only=True)


class OrderDetailSerializer(OrderSerializer):
    submissions = OrderSubmissionSerializer(many=True, read_only=True)
    status_history = OrderStatusHistorySerializer(many=True, read_only=True)
    created_by = UserSummarySerializer(read_only=True)

    class Meta(OrderSerializer.Meta):
        fields = OrderSerializer.Meta.fields + ['admin_notes', 'created_by', 'submissions', 'status_history']
        read_only_fields = fields


class AcceptedRequestSerializer(serializers.ModelSerializer):
    order = OrderSerializer(read_only=True)
    submission = OrderSubmissionSerializer(read_only=True)

    class Meta:
        model = AcceptedRequest
        fields = ['id', 'order', 'submission', 'sent_at']


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=1000)


class ConfirmSubmissionSerializer(serializers.Serializer):
    driver_id = serializers.IntegerField()
    vehicle_id = serializers.IntegerField()
    driver_mobile = serializers.CharField(max_length=15, required=False, allow_blank=True)

    def validate_driver_mobile(self, value):
        validate_phone_number(value)
        return value


class ProgressUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=PROGRESS_STATUSES)
