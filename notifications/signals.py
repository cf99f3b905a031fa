"""
Refresh channel for notification feeds.

``notifications_changed`` is sent after any write to a notification store.
The feed cache subscribes in ``NotificationsConfig.ready()``; other components
can ``connect`` / ``disconnect`` their own receivers the usual Django way.
"""
from django.db.models.signals import post_delete, post_save
from django.dispatch import Signal, receiver

from .models import (
    AdminNotification,
    TransportRequestNotification,
    VehicleLocationNotification,
    SupplierNotification,
    BuyerNotification,
)

# Sent with sender=<notification model>, plus recipient=<user or None>
notifications_changed = Signal()

NOTIFICATION_MODELS = (
    AdminNotification,
    TransportRequestNotification,
    VehicleLocationNotification,
    SupplierNotification,
    BuyerNotification,
)


def announce_change(model, recipient=None):
    """Call after bulk writes (bulk_create, update) that skip model signals"""
    notifications_changed.send(sender=model, recipient=recipient)


@receiver(post_save)
@receiver(post_delete)
def notification_written(sender, instance, **kwargs):
    if sender not in NOTIFICATION_MODELS:
        return
    notifications_changed.send(sender=sender, recipient=getattr(instance, 'recipient', None))
