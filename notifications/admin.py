from django.contrib import admin
from .models import (
    AdminNotification,
    TransportRequestNotification,
    VehicleLocationNotification,
    SupplierNotification,
    BuyerNotification,
)


class NotificationAdmin(admin.ModelAdmin):
    list_display = ['title', 'category', 'priority', 'notification_type', 'is_read', 'created_at']
    list_filter = ['category', 'priority', 'is_read', 'created_at']
    search_fields = ['title', 'message', 'order__order_number']
    readonly_fields = ['created_at', 'read_at']


class RecipientNotificationAdmin(NotificationAdmin):
    list_display = ['title', 'recipient', 'category', 'priority', 'is_read', 'created_at']
    search_fields = ['title', 'message', 'recipient__username', 'order__order_number']


admin.site.register(AdminNotification, NotificationAdmin)
admin.site.register(TransportRequestNotification, NotificationAdmin)
admin.site.register(VehicleLocationNotification, NotificationAdmin)
admin.site.register(SupplierNotification, RecipientNotificationAdmin)
admin.site.register(BuyerNotification, RecipientNotificationAdmin)
