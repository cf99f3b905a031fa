from rest_framework import serializers
from .models import Driver, Vehicle, VehicleLocation, SupplierDocument


class DriverSerializer(serializers.ModelSerializer):
    class Meta:
        model = Driver
        fields = [
            'id', 'driver_name', 'mobile', 'license_number', 'license_document_url',
            'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_driver_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError('Driver name is required')
        return value


class VehicleSerializer(serializers.ModelSerializer):
    body_type_display = serializers.CharField(source='get_body_type_display', read_only=True)

    class Meta:
        model = Vehicle
        fields = [
            'id', 'vehicle_number', 'body_type', 'body_type_display', 'capacity_tons',
            'number_of_wheels', 'document_url', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_vehicle_number(self, value):
        normalized = value.replace(' ', '').upper()
        if not normalized:
            raise serializers.ValidationError('Vehicle number is required')

        existing = Vehicle.objects.filter(vehicle_number=normalized)
        if self.instance is not None:
            existing = existing.exclude(id=self.instance.id)
        if existing.exists():
            raise serializers.ValidationError(f'Vehicle {normalized} is already registered')
        return normalized

    def validate_capacity_tons(self, value):
        if value is not None and value <= 0:
            raise serializers.ValidationError('Capacity must be greater than zero')
        return value


class VehicleLocationSerializer(serializers.ModelSerializer):
    vehicle_number = serializers.CharField(source='vehicle.vehicle_number', read_only=True)
    driver_name = serializers.SerializerMethodField()
    district_name = serializers.CharField(source='district.name', read_only=True)
    supplier_name = serializers.CharField(source='supplier.get_display_name', read_only=True)

    class Meta:
        model = VehicleLocation
        fields = [
            'id', 'supplier_name', 'vehicle', 'vehicle_number', 'driver', 'driver_name',
            'state', 'district', 'district_name', 'place', 'taluk', 'recommended_location',
            'available_from', 'status', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_driver_name(self, obj):
        return obj.driver.driver_name if obj.driver else None

    def validate(self, data):
        supplier = self.context['supplier']

        vehicle = data.get('vehicle')
        if vehicle is not None and vehicle.supplier_id != supplier.id:
            raise serializers.ValidationError({'vehicle': 'Vehicle not found or does not belong to you'})

        driver = data.get('driver')
        if driver is not None and driver.supplier_id != supplier.id:
            raise serializers.ValidationError({'driver': 'Driver not found or does not belong to you'})

        district = data.get('district')
        if district is not None and not district.is_active:
            raise serializers.ValidationError({'district': f'District "{district.name}" is no longer available'})

        return data


class SupplierDocumentSerializer(serializers.ModelSerializer):
    document_type_display = serializers.CharField(source='get_document_type_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = SupplierDocument
        fields = [
            'id', 'document_type', 'document_type_display', 'document_url', 'vehicle', 'driver',
            'status', 'status_display', 'review_notes', 'reviewed_at', 'submitted_at'
        ]
        read_only_fields = ['id', 'status', 'review_notes', 'reviewed_at', 'submitted_at']

    def validate(self, data):
        supplier = self.context['supplier']

        vehicle = data.get('vehicle')
        if vehicle is not None and vehicle.supplier_id != supplier.id:
            raise serializers.ValidationError({'vehicle': 'Vehicle not found or does not belong to you'})

        driver = data.get('driver')
        if driver is not None and driver.supplier_id != supplier.id:
            raise serializers.ValidationError({'driver': 'Driver not found or does not belong to you'})

        return data
