from django.contrib import admin
from .models import Driver, Vehicle, VehicleLocation, SupplierDocument


@admin.register(Driver)
class DriverAdmin(admin.ModelAdmin):
    list_display = ['driver_name', 'mobile', 'supplier', 'license_number', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['driver_name', 'mobile', 'license_number', 'supplier__username']


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ['vehicle_number', 'supplier', 'body_type', 'capacity_tons', 'is_active', 'created_at']
    list_filter = ['body_type', 'is_active']
    search_fields = ['vehicle_number', 'supplier__username', 'supplier__company_name']


@admin.register(VehicleLocation)
class VehicleLocationAdmin(admin.ModelAdmin):
    list_display = ['vehicle', 'supplier', 'place', 'district', 'state', 'available_from', 'status', 'created_at']
    list_filter = ['status', 'state', 'district']
    search_fields = ['vehicle__vehicle_number', 'place', 'supplier__username']


@admin.register(SupplierDocument)
class SupplierDocumentAdmin(admin.ModelAdmin):
    list_display = ['supplier', 'document_type', 'status', 'reviewed_by', 'submitted_at', 'reviewed_at']
    list_filter = ['status', 'document_type', 'submitted_at']
    search_fields = ['supplier__username', 'supplier__company_name', 'review_notes']
    readonly_fields = ['submitted_at', 'reviewed_at']
