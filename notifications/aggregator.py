"""
Merged notification feed.

Reads every source registered for a role, drops duplicates, orders the result
by recency and caches it per (role, user). Any notification write sends
``notifications_changed``, which bumps the feed cache version so the next read
comes from the stores.
"""
import logging
import time

from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError
from django.utils import timezone

from transport_office.db_retry import retry_on_transient_error
from .exceptions import NotificationSourceError
from .sources import SOURCES, delete_route, read_route, sources_for_role
from .timestamps import effective_timestamp, format_timestamp

logger = logging.getLogger(__name__)

FEED_VERSION_KEY = 'notifications:feed:version'


def deduplicate(notifications):
    """Keep the first entry for each (id, title) pair"""
    seen = set()
    unique = []
    for notification in notifications:
        key = (notification.get('id'), notification.get('title'))
        if key in seen:
            continue
        seen.add(key)
        unique.append(notification)
    return unique


def sort_by_recency(notifications, now=None):
    """
    Newest first. ``created_at`` is used when present, otherwise the display
    ``timestamp``; entries whose time can't be read go last in their original
    order.
    """
    now = now or timezone.now()

    def sort_key(notification):
        moment = (
            effective_timestamp(notification.get('created_at'), now)
            or effective_timestamp(notification.get('timestamp'), now)
        )
        if moment is None:
            return (1, 0)
        return (0, -moment.timestamp())

    return sorted(notifications, key=sort_key)


def feed_version():
    version = cache.get(FEED_VERSION_KEY)
    if version is None:
        # Seeded from the clock so an evicted counter never revives old feeds
        cache.add(FEED_VERSION_KEY, int(time.time() * 1000), None)
        version = cache.get(FEED_VERSION_KEY)
    return version


def invalidate_feed_cache(sender=None, **kwargs):
    """Receiver for notifications_changed"""
    try:
        cache.incr(FEED_VERSION_KEY)
    except ValueError:
        cache.set(FEED_VERSION_KEY, int(time.time() * 1000), None)


class NotificationAggregator:
    def __init__(self, role, user=None):
        self.role = role
        self.user = user
        self.sources = sources_for_role(role)

    def _cache_key(self):
        user_id = self.user.id if self.user is not None else 'all'
        return f'notifications:feed:{feed_version()}:{self.role}:{user_id}'

    @retry_on_transient_error
    def _read_source(self, source, now):
        return source.list(self.user, now=now)

    def _refresh_timestamps(self, notifications, now):
        # Cached relative strings ("2 minutes ago") go stale; recompute them
        for notification in notifications:
            source = SOURCES.get(notification.get('source'))
            created_at = effective_timestamp(notification.get('created_at'), now)
            if source is not None and created_at is not None:
                notification['timestamp'] = format_timestamp(created_at, source.timestamp_style, now=now)
        return notifications

    def _build_response(self, notifications, failed_sources, cached):
        return {
            'notifications': notifications,
            'total': len(notifications),
            'unread_count': sum(1 for n in notifications if not n.get('is_read')),
            'failed_sources': failed_sources,
            'poll_interval': settings.NOTIFICATION_POLL_INTERVAL_SECONDS,
            'cached': cached,
        }

    def fetch_all(self, use_cache=True):
        """
        Merged, de-duplicated feed for the role, newest first.

        A source that fails to load is logged and listed in
        ``failed_sources``; the others are still returned.
        """
        now = timezone.now()
        cache_key = self._cache_key()

        if use_cache:
            cached = cache.get(cache_key)
            if cached is not None:
                notifications = self._refresh_timestamps(cached['notifications'], now)
                return self._build_response(notifications, cached['failed_sources'], cached=True)

        merged = []
        failed_sources = []
        for source in self.sources:
            try:
                merged.extend(self._read_source(source, now))
            except (DatabaseError, NotificationSourceError) as e:
                logger.error(f"Failed to load {source.name} notifications for {self.role}: {e}", exc_info=True)
                failed_sources.append(source.name)

        notifications = sort_by_recency(deduplicate(merged), now=now)

        # A partial feed is not cached so the next poll retries the failed source
        if not failed_sources:
            cache.set(
                cache_key,
                {'notifications': notifications, 'failed_sources': failed_sources},
                settings.NOTIFICATION_FEED_CACHE_TIMEOUT
            )

        return self._build_response(notifications, failed_sources, cached=False)

    def _update_cached_feed(self, notification_id, category, mark_read=False, remove=False):
        """Apply a change to the cached feed only. Returns True if an entry matched."""
        cache_key = self._cache_key()
        cached = cache.get(cache_key)
        if cached is None:
            return False

        matched = False
        kept = []
        for notification in cached['notifications']:
            if notification.get('id') == notification_id and notification.get('category') == category:
                matched = True
                if remove:
                    continue
                if mark_read:
                    notification['is_read'] = True
            kept.append(notification)

        cached['notifications'] = kept
        cache.set(cache_key, cached, settings.NOTIFICATION_FEED_CACHE_TIMEOUT)
        return matched

    def mark_read(self, notification_id, category):
        """
        Mark one entry read in the store its category maps to.

        Categories without a backing store are only marked read in the cached
        feed; the result says so with ``persisted: False``.
        """
        source = read_route(self.role, category)
        if source is None:
            matched = self._update_cached_feed(notification_id, category, mark_read=True)
            logger.info(f"Notification {notification_id} ({category}) marked read in cached {self.role} feed only")
            return {
                'success': True,
                'persisted': False,
                'source': None,
                'matched': matched,
                'message': f'No store handles "{category}" notifications; marked read in this feed only'
            }

        source.mark_read(notification_id, self.user)
        return {
            'success': True,
            'persisted': True,
            'source': source.name,
            'message': 'Notification marked as read'
        }

    def delete(self, notification_id, category):
        """Delete one entry; categories without a backing delete only leave the cached feed."""
        source = delete_route(self.role, category)
        if source is None:
            matched = self._update_cached_feed(notification_id, category, remove=True)
            logger.info(f"Notification {notification_id} ({category}) removed from cached {self.role} feed only")
            return {
                'success': True,
                'persisted': False,
                'source': None,
                'matched': matched,
                'message': f'"{category}" notifications cannot be deleted; removed from this feed only'
            }

        source.delete(notification_id, self.user)
        return {
            'success': True,
            'persisted': True,
            'source': source.name,
            'message': 'Notification deleted'
        }

    def mark_all_read(self):
        """Mark every source of the role read, one outcome per source"""
        results = []
        for source in self.sources:
            try:
                updated = source.mark_all_read(self.user)
                results.append({'source': source.name, 'success': True, 'updated': updated})
            except (DatabaseError, NotificationSourceError) as e:
                logger.error(f"Failed to mark {source.name} notifications read for {self.role}: {e}", exc_info=True)
                results.append({'source': source.name, 'success': False, 'updated': 0, 'error': str(e)})

        invalidate_feed_cache()

        success = all(result['success'] for result in results)
        return {
            'success': success,
            'updated': sum(result['updated'] for result in results),
            'results': results,
            'message': 'All notifications marked as read' if success else 'Some notifications could not be marked as read'
        }

    def clear_all(self):
        """
        Clear every source of the role, collecting one outcome per source.

        The feed cache is dropped whatever happens so the next read reflects
        what the stores actually hold.
        """
        results = []
        for source in self.sources:
            try:
                deleted = source.clear_all(self.user)
                results.append({'source': source.name, 'success': True, 'deleted': deleted})
            except (DatabaseError, NotificationSourceError) as e:
                logger.error(f"Failed to clear {source.name} notifications for {self.role}: {e}", exc_info=True)
                results.append({'source': source.name, 'success': False, 'deleted': 0, 'error': str(e)})

        invalidate_feed_cache()

        success = all(result['success'] for result in results)
        return {
            'success': success,
            'cleared': sum(result['deleted'] for result in results),
            'results': results,
            'message': 'All notifications cleared' if success else 'Some notifications could not be cleared'
        }
