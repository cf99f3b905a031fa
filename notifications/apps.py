from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'notifications'

    def ready(self):
        from .aggregator import invalidate_feed_cache
        from .signals import notifications_changed

        notifications_changed.connect(invalidate_feed_cache, dispatch_uid='notifications.feed_cache')
