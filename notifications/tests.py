from datetime import datetime, timedelta, timezone as dt_timezone
from unittest.mock import patch

from django.core.cache import cache
from django.db import DatabaseError
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from authentication.models import CustomUser
from .aggregator import NotificationAggregator, deduplicate, sort_by_recency
from .models import (
    AdminNotification,
    BuyerNotification,
    SupplierNotification,
    TransportRequestNotification,
    VehicleLocationNotification,
)
from .signals import notifications_changed
from .sources import SOURCES, delete_route, read_route
from .timestamps import effective_timestamp, format_absolute, format_relative

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=dt_timezone.utc)


class TimestampTests(SimpleTestCase):
    def test_relative_formatting(self):
        self.assertEqual(format_relative(NOW - timedelta(seconds=30), now=NOW), 'Just now')
        self.assertEqual(format_relative(NOW - timedelta(minutes=1), now=NOW), '1 minute ago')
        self.assertEqual(format_relative(NOW - timedelta(minutes=5), now=NOW), '5 minutes ago')
        self.assertEqual(format_relative(NOW - timedelta(hours=3), now=NOW), '3 hours ago')
        self.assertEqual(format_relative(NOW - timedelta(days=2), now=NOW), '2 days ago')

    def test_old_entries_fall_back_to_absolute(self):
        old = NOW - timedelta(days=8)

        self.assertEqual(format_relative(old, now=NOW), format_absolute(old))

    def test_relative_strings_resolve_against_now(self):
        self.assertEqual(effective_timestamp('Just now', NOW), NOW)
        self.assertEqual(effective_timestamp('5 minutes ago', NOW), NOW - timedelta(minutes=5))
        self.assertEqual(effective_timestamp('1 hour ago', NOW), NOW - timedelta(hours=1))
        self.assertEqual(
            effective_timestamp('2 hours ago (Oct 19, 2026, 03:30 PM)', NOW),
            NOW - timedelta(hours=2)
        )

    def test_absolute_display_round_trips_to_the_minute(self):
        value = datetime(2026, 10, 9, 14, 23, 45, tzinfo=dt_timezone.utc)

        parsed = effective_timestamp(format_absolute(value), NOW)

        self.assertEqual(parsed, value.replace(second=0))

    def test_iso_strings(self):
        self.assertEqual(effective_timestamp('2026-10-19T10:00:00+00:00', NOW), NOW - timedelta(hours=2))

    def test_unreadable_values(self):
        self.assertIsNone(effective_timestamp('sometime last week', NOW))
        self.assertIsNone(effective_timestamp('', NOW))
        self.assertIsNone(effective_timestamp(None, NOW))
        self.assertIsNone(effective_timestamp(42, NOW))


class FeedOrderingTests(SimpleTestCase):
    def test_sort_by_recency_mixes_styles(self):
        notifications = [
            {'id': 1, 'created_at': (NOW - timedelta(hours=2)).isoformat()},
            {'id': 2, 'timestamp': 'Just now'},
            {'id': 3, 'timestamp': 'not a date'},
            {'id': 4, 'timestamp': '5 minutes ago'},
            {'id': 5, 'timestamp': format_absolute(NOW - timedelta(minutes=30))},
        ]

        ordered = sort_by_recency(notifications, now=NOW)

        self.assertEqual([n['id'] for n in ordered], [2, 4, 5, 1, 3])

    def test_unreadable_entries_keep_their_order(self):
        notifications = [
            {'id': 1, 'timestamp': 'unknown'},
            {'id': 2, 'timestamp': '1 day ago'},
            {'id': 3, 'timestamp': 'also unknown'},
        ]

        ordered = sort_by_recency(notifications, now=NOW)

        self.assertEqual([n['id'] for n in ordered], [2, 1, 3])

    def test_deduplicate_keeps_first_per_id_and_title(self):
        notifications = [
            {'id': 1, 'title': 'New Transport Request', 'source': 'transport-requests'},
            {'id': 1, 'title': 'New Transport Request', 'source': 'general'},
            {'id': 1, 'title': 'Order Confirmed by Supplier', 'source': 'general'},
        ]

        unique = deduplicate(notifications)

        self.assertEqual(len(unique), 2)
        self.assertEqual(unique[0]['source'], 'transport-requests')


class CategoryRoutingTests(SimpleTestCase):
    def test_admin_categories(self):
        self.assertIs(read_route('admin', 'order'), SOURCES['transport-requests'])
        self.assertIs(read_route('admin', 'supplier_order'), SOURCES['vehicle-locations'])
        self.assertIs(read_route('admin', 'order_management'), SOURCES['general'])
        self.assertIsNone(read_route('admin', 'document'))
        self.assertIsNone(delete_route('admin', 'order_management'))

    def test_single_source_roles_route_everything(self):
        self.assertIs(read_route('supplier', 'document'), SOURCES['supplier'])
        self.assertIs(delete_route('buyer', 'order_management'), SOURCES['buyer'])


class NotificationAggregatorTests(TestCase):
    def setUp(self):
        cache.clear()
        self.admin = CustomUser.objects.create_user(username='office', password='test-pass-123', role='admin')
        now = timezone.now()
        self.request = TransportRequestNotification.objects.create(
            title='New Transport Request', message='ORD-1 from buyer', category='order',
            created_at=now - timedelta(minutes=10)
        )
        self.location = VehicleLocationNotification.objects.create(
            title='New Vehicle Location Request', message='KA01AB0001 at Hosur', category='supplier_order',
            created_at=now - timedelta(minutes=2)
        )
        self.general = AdminNotification.objects.create(
            title='Document Submitted', message='GST certificate uploaded', category='document',
            created_at=now - timedelta(hours=1)
        )
        self.aggregator = NotificationAggregator('admin', self.admin)

    def test_admin_feed_merges_all_sources_newest_first(self):
        feed = self.aggregator.fetch_all()

        self.assertEqual(feed['total'], 3)
        self.assertEqual(feed['unread_count'], 3)
        self.assertEqual(feed['failed_sources'], [])
        self.assertEqual(
            [n['source'] for n in feed['notifications']],
            ['vehicle-locations', 'transport-requests', 'general']
        )

    def test_feed_is_cached_until_a_notification_changes(self):
        self.assertFalse(self.aggregator.fetch_all()['cached'])
        self.assertTrue(self.aggregator.fetch_all()['cached'])

        AdminNotification.objects.create(title='System', message='Backup finished')

        feed = self.aggregator.fetch_all()
        self.assertFalse(feed['cached'])
        self.assertEqual(feed['total'], 4)

    def test_change_signal_reaches_other_receivers(self):
        received = []

        def receiver(sender, **kwargs):
            received.append(sender)

        notifications_changed.connect(receiver)
        try:
            AdminNotification.objects.create(title='System', message='Backup finished')
        finally:
            notifications_changed.disconnect(receiver)

        self.assertEqual(received, [AdminNotification])

    def test_failing_source_is_reported_and_others_returned(self):
        with patch.object(SOURCES['vehicle-locations'], 'list', side_effect=DatabaseError('connection lost')):
            feed = self.aggregator.fetch_all(use_cache=False)

        self.assertEqual(feed['failed_sources'], ['vehicle-locations'])
        self.assertEqual({n['source'] for n in feed['notifications']}, {'transport-requests', 'general'})
        self.assertFalse(self.aggregator.fetch_all()['cached'])

    def test_mark_read_persists_for_routed_category(self):
        result = self.aggregator.mark_read(self.request.id, 'order')

        self.assertTrue(result['persisted'])
        self.assertEqual(result['source'], 'transport-requests')
        self.request.refresh_from_db()
        self.assertTrue(self.request.is_read)
        self.assertIsNotNone(self.request.read_at)

    def test_mark_read_for_unrouted_category_only_touches_the_feed(self):
        self.aggregator.fetch_all()

        result = self.aggregator.mark_read(self.general.id, 'document')

        self.assertFalse(result['persisted'])
        self.assertTrue(result['matched'])
        self.general.refresh_from_db()
        self.assertFalse(self.general.is_read)

        feed = self.aggregator.fetch_all()
        entry = next(n for n in feed['notifications'] if n['source'] == 'general')
        self.assertTrue(entry['is_read'])

    def test_delete_without_backing_store_keeps_the_row(self):
        result = self.aggregator.delete(self.general.id, 'order_management')

        self.assertFalse(result['persisted'])
        self.assertTrue(AdminNotification.objects.filter(id=self.general.id).exists())

    def test_delete_vehicle_location_notification(self):
        result = self.aggregator.delete(self.location.id, 'supplier_order')

        self.assertTrue(result['persisted'])
        self.assertFalse(VehicleLocationNotification.objects.exists())

    def test_clear_all_reports_per_source(self):
        with patch.object(SOURCES['general'], 'clear_all', side_effect=DatabaseError('locked')):
            result = self.aggregator.clear_all()

        self.assertFalse(result['success'])
        self.assertEqual(result['cleared'], 2)
        outcome = {r['source']: r['success'] for r in result['results']}
        self.assertEqual(outcome, {'transport-requests': True, 'vehicle-locations': True, 'general': False})

        feed = self.aggregator.fetch_all()
        self.assertEqual([n['source'] for n in feed['notifications']], ['general'])

    def test_mark_all_read(self):
        result = self.aggregator.mark_all_read()

        self.assertTrue(result['success'])
        self.assertEqual(result['updated'], 3)
        self.assertEqual(self.aggregator.fetch_all()['unread_count'], 0)

    def test_mark_all_read_reports_per_source(self):
        with patch.object(SOURCES['vehicle-locations'], 'mark_all_read', side_effect=DatabaseError('locked')):
            result = self.aggregator.mark_all_read()

        self.assertFalse(result['success'])
        self.assertEqual(result['updated'], 2)
        outcome = {r['source']: r['success'] for r in result['results']}
        self.assertEqual(outcome, {'transport-requests': True, 'vehicle-locations': False, 'general': True})

        feed = self.aggregator.fetch_all()
        self.assertEqual(feed['unread_count'], 1)
        unread = [n['source'] for n in feed['notifications'] if not n['is_read']]
        self.assertEqual(unread, ['vehicle-locations'])

    def test_mark_all_read_endpoint_reports_partial_failure(self):
        client = APIClient()
        client.force_authenticate(user=self.admin)

        with patch.object(SOURCES['general'], 'mark_all_read', side_effect=DatabaseError('locked')):
            response = client.post('/api/notifications/feed/mark-all-read/')

        self.assertEqual(response.status_code, 207)
        self.assertFalse(response.json()['success'])


class NotificationApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.supplier = CustomUser.objects.create_user(
            username='supplier1', password='test-pass-123', role='supplier', phone_number='9000000001'
        )
        self.other_supplier = CustomUser.objects.create_user(
            username='supplier2', password='test-pass-123', role='supplier', phone_number='9000000002'
        )
        self.buyer = CustomUser.objects.create_user(username='buyer1', password='test-pass-123')
        SupplierNotification.objects.create(recipient=self.supplier, title='Mine', message='For supplier1')
        SupplierNotification.objects.create(recipient=self.other_supplier, title='Theirs', message='For supplier2')

    def test_supplier_feed_contains_only_own_notifications(self):
        self.client.force_authenticate(user=self.supplier)

        response = self.client.get('/api/notifications/feed/')

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual([n['title'] for n in data['notifications']], ['Mine'])
        self.assertIn('poll_interval', data)

    def test_supplier_cannot_read_admin_sources(self):
        self.client.force_authenticate(user=self.supplier)

        response = self.client.get('/api/notifications/general/')

        self.assertEqual(response.status_code, 403)

    def test_unknown_source(self):
        self.client.force_authenticate(user=self.supplier)

        response = self.client.get('/api/notifications/invoices/')

        self.assertEqual(response.status_code, 404)

    def test_supplier_cannot_touch_another_suppliers_notification(self):
        theirs = SupplierNotification.objects.get(recipient=self.other_supplier)
        self.client.force_authenticate(user=self.supplier)

        response = self.client.post(f'/api/notifications/supplier/{theirs.id}/read/')

        self.assertEqual(response.status_code, 404)
        theirs.refresh_from_db()
        self.assertFalse(theirs.is_read)

    def test_buyer_clear_all(self):
        BuyerNotification.objects.create(recipient=self.buyer, title='Order Confirmed', message='ORD-1 confirmed')
        self.client.force_authenticate(user=self.buyer)

        response = self.client.delete('/api/notifications/feed/clear-all/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['cleared'], 1)
        self.assertFalse(BuyerNotification.objects.exists())

    def test_feed_requires_authentication(self):
        response = self.client.get('/api/notifications/feed/')

        self.assertIn(response.status_code, [401, 403])
