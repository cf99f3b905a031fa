"""
Registry of notification sources.

A source is one notification table as seen by one role: how to read it, how
to mark its entries read, delete them and clear it, and how its timestamps are
displayed. Per-user sources (supplier, buyer) only ever touch the requesting
user's rows.
"""
import logging

from django.utils import timezone

from .exceptions import NotificationNotFound, UnknownNotificationSource
from .models import (
    AdminNotification,
    TransportRequestNotification,
    VehicleLocationNotification,
    SupplierNotification,
    BuyerNotification,
)
from .signals import announce_change
from .timestamps import format_timestamp

logger = logging.getLogger(__name__)


class NotificationSource:
    def __init__(self, name, model, label, timestamp_style='relative', per_user=False):
        self.name = name
        self.model = model
        self.label = label
        self.timestamp_style = timestamp_style
        self.per_user = per_user

    def __repr__(self):
        return f"<NotificationSource {self.name}>"

    def queryset(self, user=None):
        queryset = self.model.objects.select_related('order')
        if self.per_user:
            queryset = queryset.filter(recipient=user)
        return queryset

    def get(self, notification_id, user=None):
        try:
            return self.queryset(user).get(id=notification_id)
        except self.model.DoesNotExist:
            raise NotificationNotFound(f'Notification {notification_id} not found in {self.label}')

    def serialize(self, notification, now=None):
        order = notification.order
        return {
            'id': notification.id,
            'type': notification.notification_type,
            'title': notification.title,
            'message': notification.message,
            'timestamp': format_timestamp(notification.created_at, self.timestamp_style, now=now),
            'created_at': notification.created_at.isoformat(),
            'is_read': notification.is_read,
            'category': notification.category,
            'priority': notification.priority,
            'order_id': notification.order_id,
            'order_number': order.order_number if order else None,
            'supplier_id': notification.supplier_id,
            'driver_id': notification.driver_id,
            'vehicle_id': notification.vehicle_id,
            'source': self.name,
        }

    def list(self, user=None, unread_only=False, now=None):
        queryset = self.queryset(user)
        if unread_only:
            queryset = queryset.filter(is_read=False)
        now = now or timezone.now()
        return [self.serialize(notification, now=now) for notification in queryset]

    def unread_count(self, user=None):
        return self.queryset(user).filter(is_read=False).count()

    def mark_read(self, notification_id, user=None):
        notification = self.get(notification_id, user)
        if not notification.is_read:
            notification.is_read = True
            notification.read_at = timezone.now()
            notification.save(update_fields=['is_read', 'read_at'])
        return notification

    def mark_all_read(self, user=None):
        count = self.queryset(user).filter(is_read=False).update(is_read=True, read_at=timezone.now())
        if count:
            announce_change(self.model, recipient=user if self.per_user else None)
        return count

    def delete(self, notification_id, user=None):
        notification = self.get(notification_id, user)
        notification.delete()

    def clear_all(self, user=None):
        deleted, _ = self.queryset(user).delete()
        logger.info(f"Cleared {deleted} notification(s) from {self.name}")
        return deleted


SOURCES = {
    'transport-requests': NotificationSource(
        'transport-requests', TransportRequestNotification, 'transport request notifications'
    ),
    'vehicle-locations': NotificationSource(
        'vehicle-locations', VehicleLocationNotification, 'supplier vehicle location notifications'
    ),
    'general': NotificationSource(
        'general', AdminNotification, 'admin notifications', timestamp_style='absolute'
    ),
    'supplier': NotificationSource(
        'supplier', SupplierNotification, 'supplier notifications', per_user=True
    ),
    'buyer': NotificationSource(
        'buyer', BuyerNotification, 'buyer notifications', per_user=True
    ),
}

# Sources merged into each role's feed, in fetch order
ROLE_SOURCES = {
    'admin': ['transport-requests', 'vehicle-locations', 'general'],
    'supplier': ['supplier'],
    'buyer': ['buyer'],
}

# Which source persists a mark-read for a category. Roles with a single
# source route every category there.
READ_ROUTES = {
    'admin': {
        'supplier_order': 'vehicle-locations',
        'order': 'transport-requests',
        'order_management': 'general',
    },
}

# Admin deletes are only backed for these categories
DELETE_ROUTES = {
    'admin': {
        'supplier_order': 'vehicle-locations',
        'order': 'transport-requests',
    },
}


def get_source(name):
    try:
        return SOURCES[name]
    except KeyError:
        raise UnknownNotificationSource(f'Unknown notification source "{name}"')


def sources_for_role(role):
    return [SOURCES[name] for name in ROLE_SOURCES.get(role, [])]


def _route(routes, role, category):
    names = ROLE_SOURCES.get(role, [])
    if len(names) == 1:
        return SOURCES[names[0]]
    name = routes.get(role, {}).get(category)
    return SOURCES[name] if name else None


def read_route(role, category):
    """Source that persists mark-read for this category, or None"""
    return _route(READ_ROUTES, role, category)


def delete_route(role, category):
    """Source that persists deletes for this category, or None"""
    return _route(DELETE_ROUTES, role, category)
