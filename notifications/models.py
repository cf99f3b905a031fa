"""
Notification stores, one table per origin.

Admins read three of them (transport requests, supplier vehicle locations and
general admin notices), suppliers and buyers one each. Ids are only unique
within a table, which is why the merged feed routes actions by category.
"""
from django.db import models
from django.utils import timezone
from authentication.models import CustomUser


class BaseNotification(models.Model):
    TYPE_CHOICES = [
        ('success', 'Success'),
        ('warning', 'Warning'),
        ('error', 'Error'),
        ('info', 'Info'),
    ]

    CATEGORY_CHOICES = [
        ('order', 'Order'),
        ('document', 'Document'),
        ('user', 'User'),
        ('system', 'System'),
        ('driver', 'Driver'),
        ('vehicle', 'Vehicle'),
        ('payment', 'Payment'),
        ('supplier_order', 'Supplier Order'),
        ('order_management', 'Order Management'),
    ]

    PRIORITY_CHOICES = [
        ('low', 'Low'),
        ('medium', 'Medium'),
        ('high', 'High'),
    ]

    notification_type = models.CharField(max_length=10, choices=TYPE_CHOICES, default='info')
    title = models.CharField(max_length=200)
    message = models.TextField()
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='system')
    priority = models.CharField(max_length=10, choices=PRIORITY_CHOICES, default='medium')
    is_read = models.BooleanField(default=False)

    order = models.ForeignKey('orders.Order', related_name='+', on_delete=models.CASCADE, null=True, blank=True)
    supplier = models.ForeignKey(CustomUser, related_name='+', on_delete=models.SET_NULL, null=True, blank=True)
    driver = models.ForeignKey('suppliers.Driver', related_name='+', on_delete=models.SET_NULL, null=True, blank=True)
    vehicle = models.ForeignKey('suppliers.Vehicle', related_name='+', on_delete=models.SET_NULL, null=True, blank=True)

    created_at = models.DateTimeField(default=timezone.now)
    read_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.category} - {self.title}"


class AdminNotification(BaseNotification):
    """General admin notices: supplier confirmations, documents, system events."""

    class Meta(BaseNotification.Meta):
        indexes = [
            models.Index(fields=['is_read'], name='admin_notif_read_idx'),
        ]


class TransportRequestNotification(BaseNotification):
    """Raised for admins whenever a buyer creates a transport request."""
    buyer = models.ForeignKey(CustomUser, related_name='+', on_delete=models.SET_NULL, null=True, blank=True)

    class Meta(BaseNotification.Meta):
        indexes = [
            models.Index(fields=['is_read'], name='request_notif_read_idx'),
        ]


class VehicleLocationNotification(BaseNotification):
    """Raised for admins when a supplier posts a free vehicle."""
    vehicle_location = models.ForeignKey(
        'suppliers.VehicleLocation',
        related_name='notifications',
        on_delete=models.CASCADE,
        null=True,
        blank=True
    )

    class Meta(BaseNotification.Meta):
        indexes = [
            models.Index(fields=['is_read'], name='location_notif_read_idx'),
        ]


class SupplierNotification(BaseNotification):
    recipient = models.ForeignKey(CustomUser, related_name='supplier_notifications', on_delete=models.CASCADE)

    class Meta(BaseNotification.Meta):
        indexes = [
            models.Index(fields=['recipient', 'is_read'], name='supplier_notif_read_idx'),
        ]


class BuyerNotification(BaseNotification):
    recipient = models.ForeignKey(CustomUser, related_name='buyer_notifications', on_delete=models.CASCADE)

    class Meta(BaseNotification.Meta):
        indexes = [
            models.Index(fields=['recipient', 'is_read'], name='buyer_notif_read_idx'),
        ]
