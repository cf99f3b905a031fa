from django.contrib import admin
from .models import Order, OrderSubmission, OrderStatusHistory, AcceptedRequest


class OrderSubmissionInline(admin.TabularInline):
    model = OrderSubmission
    fk_name = 'order'
    extra = 0
    readonly_fields = ['supplier', 'status', 'notification_sent', 'whatsapp_sent', 'submitted_at', 'responded_at']


class OrderStatusHistoryInline(admin.TabularInline):
    model = OrderStatusHistory
    extra = 0
    readonly_fields = ['old_status', 'new_status', 'changed_by', 'changed_at', 'reason']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'order_type', 'buyer', 'load_type', 'from_place', 'to_place', 'status', 'assigned_supplier', 'created_at']
    list_filter = ['status', 'order_type', 'load_type', 'created_at']
    search_fields = ['order_number', 'buyer__username', 'buyer__company_name', 'from_place', 'to_place']
    inlines = [OrderSubmissionInline, OrderStatusHistoryInline]
    readonly_fields = ['order_number', 'created_by', 'created_at', 'updated_at', 'assigned_at', 'confirmed_at', 'completed_at']


@admin.register(OrderSubmission)
class OrderSubmissionAdmin(admin.ModelAdmin):
    list_display = ['order', 'supplier', 'status', 'notification_sent', 'whatsapp_sent', 'submitted_at', 'responded_at']
    list_filter = ['status', 'whatsapp_sent', 'submitted_at']
    search_fields = ['order__order_number', 'supplier__username', 'supplier__company_name']
    readonly_fields = ['submitted_at', 'updated_at']


@admin.register(OrderStatusHistory)
class OrderStatusHistoryAdmin(admin.ModelAdmin):
    list_display = ['order', 'old_status', 'new_status', 'changed_by', 'changed_at']
    list_filter = ['new_status', 'changed_at']
    search_fields = ['order__order_number', 'reason']
    readonly_fields = ['changed_at']


@admin.register(AcceptedRequest)
class AcceptedRequestAdmin(admin.ModelAdmin):
    list_display = ['order', 'buyer', 'sent_by', 'sent_at']
    search_fields = ['order__order_number', 'buyer__username']
    readonly_fields = ['sent_at']
