from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient

from notifications.models import BuyerNotification, SupplierNotification
from orders.fanout import SubmissionFanoutService
from orders.models import AcceptedRequest, Order, OrderSubmission
from orders.tests import create_fleet, create_order, create_reference_data, create_user
from orders.transitions import StatusTransitionController
from suppliers.models import SupplierDocument
from .cache_utils import get_cache_key_for_analytics, invalidate_analytics_cache


class AdminApiTestCase(TestCase):
    def setUp(self):
        cache.clear()
        self.cotton, self.bangalore, self.chennai = create_reference_data()
        self.admin = create_user('office', role='admin')
        self.buyer = create_user('buyer1')
        self.s1 = create_user('s1', role='supplier', phone_number='9000000001', company_name='Kaveri Roadways')
        self.s2 = create_user('s2', role='supplier', phone_number='9000000002')
        self.client = APIClient()
        self.client.force_authenticate(user=self.admin)


class AdminOrderTests(AdminApiTestCase):
    def test_only_admins(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.get('/api/admin/orders/')

        self.assertEqual(response.status_code, 403)

    def test_order_list_filters(self):
        pending = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer)
        create_order(self.cotton, self.bangalore, self.chennai, status='cancelled')
        manual = create_order(self.cotton, self.bangalore, self.chennai, order_type='manual_order')

        response = self.client.get('/api/admin/orders/', {'status': 'pending,submitted'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual({row['id'] for row in response.json()}, {pending.id, manual.id})

        response = self.client.get('/api/admin/orders/', {'order_type': 'manual_order'})

        self.assertEqual([row['order_number'] for row in response.json()], ['MO-1'])

        response = self.client.get('/api/admin/orders/', {'search': 'buyer1'})

        self.assertEqual([row['id'] for row in response.json()], [pending.id])

    def test_send_to_suppliers(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer)
        url = f'/api/admin/orders/{order.id}/send-to-suppliers/'

        response = self.client.post(url, {'supplier_ids': [self.s1.id, self.s2.id]}, format='json')

        self.assertEqual(response.status_code, 201)
        data = response.json()
        self.assertEqual(data['order_status'], 'submitted')
        self.assertEqual(len(data['created']), 2)
        self.assertEqual(len(data['whatsapp_links']), 2)

        response = self.client.post(url, {'supplier_ids': [self.s1.id, self.s2.id]}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['message'], 'All selected suppliers have already been notified.')
        self.assertEqual(SupplierNotification.objects.filter(order=order).count(), 2)

    def test_send_to_suppliers_needs_a_supplier(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)

        response = self.client.post(
            f'/api/admin/orders/{order.id}/send-to-suppliers/', {'supplier_ids': []}, format='json'
        )

        self.assertEqual(response.status_code, 400)

    def test_send_to_suppliers_partial_failure(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)
        SubmissionFanoutService(self.admin).send(order.id, [self.s1.id])

        response = self.client.post(
            f'/api/admin/orders/{order.id}/send-to-suppliers/',
            {'supplier_ids': [self.s1.id, self.buyer.id]},
            format='json'
        )

        self.assertEqual(response.status_code, 207)
        self.assertEqual(len(response.json()['failed']), 1)

    def test_send_unknown_order(self):
        response = self.client.post(
            '/api/admin/orders/999999/send-to-suppliers/', {'supplier_ids': [self.s1.id]}, format='json'
        )

        self.assertEqual(response.status_code, 404)

    def test_assign_and_conflicts(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer)

        response = self.client.post(
            f'/api/admin/orders/{order.id}/assign/', {'supplier_id': self.s1.id, 'notes': 'Regular route'}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['order']['status'], 'confirmed')

        response = self.client.post(
            f'/api/admin/orders/{order.id}/assign/', {'supplier_id': self.s2.id}, format='json'
        )

        self.assertEqual(response.status_code, 400)

        response = self.client.post(
            f'/api/admin/orders/{order.id}/send-to-suppliers/', {'supplier_ids': [self.s2.id]}, format='json'
        )

        self.assertEqual(response.status_code, 409)

    def test_assign_broadcast_order_conflicts(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)
        SubmissionFanoutService(self.admin).send(order.id, [self.s1.id])

        response = self.client.post(
            f'/api/admin/orders/{order.id}/assign/', {'supplier_id': self.s2.id}, format='json'
        )

        self.assertEqual(response.status_code, 409)

    def test_reject_and_update_status(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer)

        response = self.client.post(
            f'/api/admin/orders/{order.id}/update-status/', {'status': 'delivered'}, format='json'
        )
        self.assertEqual(response.status_code, 400)

        response = self.client.post(f'/api/admin/orders/{order.id}/reject/', {'notes': 'No trucks'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['order']['status'], 'rejected')
        self.assertTrue(BuyerNotification.objects.filter(recipient=self.buyer, order=order).exists())

    def test_order_detail_and_delete(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)
        SubmissionFanoutService(self.admin).send(order.id, [self.s1.id])

        response = self.client.get(f'/api/admin/orders/{order.id}/')

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(len(data['submissions']), 1)
        self.assertEqual(data['status_history'][0]['new_status'], 'submitted')

        response = self.client.delete(f'/api/admin/orders/{order.id}/')

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Order.objects.filter(id=order.id).exists())

    def test_update_submission(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)
        SubmissionFanoutService(self.admin).send(order.id, [self.s1.id])
        submission = OrderSubmission.objects.get(order=order)

        response = self.client.patch(f'/api/admin/submissions/{submission.id}/', {'status': 'confirmed'}, format='json')
        self.assertEqual(response.status_code, 400)

        response = self.client.patch(f'/api/admin/submissions/{submission.id}/', {'status': 'ignored'}, format='json')

        self.assertEqual(response.status_code, 200)
        submission.refresh_from_db()
        self.assertEqual(submission.status, 'ignored')

    def test_available_suppliers_flag_already_notified(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)
        SubmissionFanoutService(self.admin).send(order.id, [self.s1.id])
        create_fleet(self.s1, '1')

        response = self.client.get('/api/admin/suppliers/available/', {'order_id': order.id})

        self.assertEqual(response.status_code, 200)
        rows = {row['id']: row for row in response.json()}
        self.assertTrue(rows[self.s1.id]['already_notified'])
        self.assertEqual(rows[self.s1.id]['active_vehicles'], 1)
        self.assertFalse(rows[self.s2.id]['already_notified'])
        self.assertNotIn(self.buyer.id, rows)


class OrderStatisticsTests(AdminApiTestCase):
    def test_statistics_are_cached_until_invalidated(self):
        create_order(self.cotton, self.bangalore, self.chennai)

        response = self.client.get('/api/admin/orders/statistics/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['data']['orders']['pending'], 1)

        # Created without going through a view, so the cached numbers stay
        create_order(self.cotton, self.bangalore, self.chennai)
        response = self.client.get('/api/admin/orders/statistics/')
        self.assertEqual(response.json()['data']['orders']['pending'], 1)

        invalidate_analytics_cache()
        response = self.client.get('/api/admin/orders/statistics/')
        data = response.json()['data']
        self.assertEqual(data['orders']['pending'], 2)
        self.assertEqual(data['orders']['total'], 2)
        self.assertEqual(data['order_types']['buyer_requests'], 2)

    def test_cache_key_changes_with_version(self):
        before = get_cache_key_for_analytics('get_order_statistics', query={})
        self.assertEqual(before, get_cache_key_for_analytics('get_order_statistics', query={}))

        invalidate_analytics_cache()

        self.assertNotEqual(before, get_cache_key_for_analytics('get_order_statistics', query={}))

    def test_status_change_refreshes_statistics(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)
        self.client.get('/api/admin/orders/statistics/')

        StatusTransitionController(self.admin).reject(order.id)

        data = self.client.get('/api/admin/orders/statistics/').json()['data']
        self.assertEqual(data['orders']['pending'], 0)
        self.assertEqual(data['orders']['rejected'], 1)


class SuppliersConfirmedTests(AdminApiTestCase):
    def setUp(self):
        super().setUp()
        self.order = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer)
        SubmissionFanoutService(self.admin).send(self.order.id, [self.s1.id, self.s2.id])
        driver, vehicle = create_fleet(self.s1, '1')
        self.submission = OrderSubmission.objects.get(order=self.order, supplier=self.s1)
        StatusTransitionController(self.s1).confirm_submission(self.submission.id, self.s1, driver.id, vehicle.id)

    def test_confirmed_list(self):
        response = self.client.get('/api/admin/suppliers-confirmed/', {'pending': 'true'})

        self.assertEqual(response.status_code, 200)
        rows = response.json()
        self.assertEqual([row['id'] for row in rows], [self.submission.id])
        self.assertEqual(rows[0]['vehicle_number'], 'KA01AB0001')

    def test_send_to_buyer_once(self):
        url = f'/api/admin/suppliers-confirmed/{self.submission.id}/send-to-buyer/'

        response = self.client.post(url, {'buyer_id': self.buyer.id}, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertTrue(AcceptedRequest.objects.filter(submission=self.submission, buyer=self.buyer).exists())
        self.assertTrue(
            BuyerNotification.objects.filter(recipient=self.buyer, title='Order Sent to You').exists()
        )

        response = self.client.post(url, {'buyer_id': self.buyer.id}, format='json')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(AcceptedRequest.objects.count(), 1)

        buyer_client = APIClient()
        buyer_client.force_authenticate(user=self.buyer)
        response = buyer_client.get('/api/orders/accepted/')
        self.assertEqual(response.json()[0]['submission']['vehicle_number'], 'KA01AB0001')

    def test_send_to_buyer_requires_a_buyer_account(self):
        response = self.client.post(
            f'/api/admin/suppliers-confirmed/{self.submission.id}/send-to-buyer/',
            {'buyer_id': self.s2.id},
            format='json'
        )

        self.assertEqual(response.status_code, 400)

    def test_unconfirmed_submission_cannot_be_forwarded(self):
        other = OrderSubmission.objects.get(order=self.order, supplier=self.s2)

        response = self.client.post(
            f'/api/admin/suppliers-confirmed/{other.id}/send-to-buyer/', {'buyer_id': self.buyer.id}, format='json'
        )

        self.assertEqual(response.status_code, 404)


class ManualOrderTests(AdminApiTestCase):
    def test_create_and_complete_manual_order(self):
        response = self.client.post('/api/admin/orders/manual/', {
            'load_type': self.cotton.id,
            'number_of_goods': 40,
            'from_state': 'Karnataka',
            'from_district': self.bangalore.id,
            'from_place': 'Bangalore',
            'to_state': 'Tamil Nadu',
            'to_district': self.chennai.id,
            'to_place': 'Chennai',
            'admin_notes': 'Called in by Ramesh Traders',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        order_data = response.json()['order']
        self.assertEqual(order_data['order_number'], 'MO-1')
        self.assertEqual(order_data['status'], 'pending')

        complete_url = f"/api/admin/orders/{order_data['id']}/complete/"
        self.assertEqual(self.client.post(complete_url).status_code, 400)

        SubmissionFanoutService(self.admin).send(order_data['id'], [self.s1.id])
        self.assertEqual(self.client.get('/api/admin/orders/manual/').json()[0]['status_label'], 'Sent')

        driver, vehicle = create_fleet(self.s1, '1')
        submission = OrderSubmission.objects.get(order_id=order_data['id'])
        StatusTransitionController(self.s1).confirm_submission(submission.id, self.s1, driver.id, vehicle.id)

        response = self.client.post(complete_url)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['order']['status'], 'completed')


class DocumentVerificationTests(AdminApiTestCase):
    def setUp(self):
        super().setUp()
        self.document = SupplierDocument.objects.create(
            supplier=self.s1, document_type='gst_certificate', document_url='https://files.example.com/gst.pdf'
        )

    def test_reject_requires_notes(self):
        response = self.client.post(
            f'/api/admin/documents/{self.document.id}/verify/', {'status': 'rejected'}, format='json'
        )

        self.assertEqual(response.status_code, 400)

    def test_approve_notifies_supplier(self):
        response = self.client.post(
            f'/api/admin/documents/{self.document.id}/verify/', {'status': 'approved'}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        self.document.refresh_from_db()
        self.assertEqual(self.document.status, 'approved')
        self.assertEqual(self.document.reviewed_by, self.admin)
        self.assertTrue(SupplierNotification.objects.filter(recipient=self.s1, title='Document Approved').exists())

    def test_pending_list(self):
        response = self.client.get('/api/admin/documents/', {'status': 'pending'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([row['id'] for row in response.json()], [self.document.id])
