from decimal import Decimal
from unittest.mock import patch

from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework.test import APIClient

from authentication.models import CustomUser
from notifications.models import AdminNotification, SupplierNotification, TransportRequestNotification
from notifications.services import NotificationService
from reference_data.models import District, LoadType
from suppliers.models import Driver, Vehicle
from .exceptions import (
    AssignmentConflict,
    ExecutionDetailsError,
    FanoutConflict,
    InvalidTransition,
    OrderNotFound,
)
from .fanout import SubmissionFanoutService
from .models import Order, OrderStatusHistory, OrderSubmission
from .transitions import StatusTransitionController
from .validators import validate_load_quantity
from .whatsapp import build_whatsapp_link, normalize_number


def create_user(username, role='buyer', phone_number=None, **extra):
    return CustomUser.objects.create_user(
        username=username,
        password='test-pass-123',
        role=role,
        phone_number=phone_number,
        **extra
    )


def create_reference_data():
    cotton = LoadType.objects.create(name='Cotton')
    bangalore = District.objects.create(name='Bangalore Urban', state='Karnataka')
    chennai = District.objects.create(name='Chennai', state='Tamil Nadu')
    return cotton, bangalore, chennai


def create_order(load_type, from_district, to_district, buyer=None, **fields):
    values = {
        'order_type': 'buyer_request',
        'status': 'pending',
        'buyer': buyer,
        'load_type': load_type,
        'estimated_tons': Decimal('12.00'),
        'from_state': from_district.state,
        'from_district': from_district,
        'from_place': 'Bangalore',
        'to_state': to_district.state,
        'to_district': to_district,
        'to_place': 'Chennai',
    }
    values.update(fields)
    return Order.objects.create(**values)


def create_fleet(supplier, suffix):
    driver = Driver.objects.create(supplier=supplier, driver_name=f'Driver {suffix}', mobile=f'98450000{suffix:0>2}')
    vehicle = Vehicle.objects.create(supplier=supplier, vehicle_number=f'KA01AB00{suffix:0>2}', capacity_tons=Decimal('16'))
    return driver, vehicle


class LoadQuantityValidationTests(SimpleTestCase):
    def test_requires_tons_or_goods(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_load_quantity(None, None)

        self.assertIn('Either estimated tons or number of goods is required', ctx.exception.messages)

    def test_either_value_is_enough(self):
        validate_load_quantity(Decimal('5'), None)
        validate_load_quantity(None, 40)
        validate_load_quantity(Decimal('5'), 40)

    def test_rejects_non_positive_values(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_load_quantity(Decimal('0'), None)

        self.assertIn('estimated_tons', ctx.exception.message_dict)


class WhatsAppLinkTests(SimpleTestCase):
    @override_settings(WHATSAPP_COUNTRY_CODE='91')
    def test_national_number_gets_country_code(self):
        self.assertEqual(normalize_number('98765 43210'), '919876543210')
        self.assertEqual(normalize_number('+91 98765-43210'), '919876543210')

    @override_settings(WHATSAPP_COUNTRY_CODE='91')
    def test_message_is_url_encoded(self):
        link = build_whatsapp_link('9876543210', 'Order ORD-7 & more')

        self.assertEqual(link, 'https://wa.me/919876543210?text=Order%20ORD-7%20%26%20more')

    def test_no_link_without_number(self):
        self.assertIsNone(build_whatsapp_link('', 'hello'))
        self.assertIsNone(build_whatsapp_link(None, 'hello'))


class OrderModelTests(TestCase):
    def setUp(self):
        self.cotton, self.bangalore, self.chennai = create_reference_data()

    def test_order_numbers_follow_prefix_sequence(self):
        first = create_order(self.cotton, self.bangalore, self.chennai)
        second = create_order(self.cotton, self.bangalore, self.chennai)
        manual = create_order(self.cotton, self.bangalore, self.chennai, order_type='manual_order')

        self.assertEqual(first.order_number, 'ORD-1')
        self.assertEqual(second.order_number, 'ORD-2')
        self.assertEqual(manual.order_number, 'MO-1')

    def test_manual_order_labels(self):
        manual = create_order(self.cotton, self.bangalore, self.chennai, order_type='manual_order', status='assigned')
        request = create_order(self.cotton, self.bangalore, self.chennai, status='assigned')

        self.assertEqual(manual.get_status_label(), 'Sent')
        self.assertEqual(request.get_status_label(), 'Assigned')

    def test_quantity_display(self):
        order = create_order(
            self.cotton, self.bangalore, self.chennai,
            estimated_tons=Decimal('12.50'), number_of_goods=40
        )

        self.assertEqual(order.get_quantity_display(), '12.5 tons / 40 units')


class StatusTransitionTests(TestCase):
    def setUp(self):
        self.cotton, self.bangalore, self.chennai = create_reference_data()
        self.admin = create_user('office', role='admin')
        self.buyer = create_user('buyer1')
        self.supplier = create_user('supplier1', role='supplier', phone_number='9000000001')
        self.other_supplier = create_user('supplier2', role='supplier', phone_number='9000000002')
        self.controller = StatusTransitionController(self.admin)

    def test_assign_moves_pending_to_confirmed(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer)

        order = self.controller.assign(order.id, self.supplier.id, notes='Regular route')

        self.assertEqual(order.status, 'confirmed')
        self.assertEqual(order.assigned_supplier, self.supplier)
        self.assertEqual(order.admin_notes, 'Regular route')
        self.assertIsNotNone(order.assigned_at)
        history = OrderStatusHistory.objects.get(order=order)
        self.assertEqual((history.old_status, history.new_status), ('pending', 'confirmed'))
        self.assertEqual(history.changed_by, self.admin)
        self.assertTrue(SupplierNotification.objects.filter(recipient=self.supplier, order=order).exists())

    def test_assign_on_confirmed_order_is_rejected(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, status='confirmed')

        with self.assertRaises(InvalidTransition):
            self.controller.assign(order.id, self.supplier.id)

    def test_assign_to_a_different_supplier_conflicts(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, assigned_supplier=self.other_supplier)

        with self.assertRaises(AssignmentConflict):
            self.controller.assign(order.id, self.supplier.id)

    def test_assign_after_broadcast_conflicts(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)
        SubmissionFanoutService(self.admin).send(order.id, [self.other_supplier.id])

        with self.assertRaises(AssignmentConflict):
            self.controller.assign(order.id, self.supplier.id)

    def test_mark_complete_on_draft_order_is_rejected(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, order_type='manual_order', status='draft')

        with self.assertRaises(InvalidTransition):
            self.controller.mark_complete(order.id)

        order.refresh_from_db()
        self.assertEqual(order.status, 'draft')

    def test_mark_complete_is_for_manual_orders_only(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, status='confirmed')

        with self.assertRaises(InvalidTransition):
            self.controller.mark_complete(order.id)

    def test_mark_complete_closes_confirmed_manual_order(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, order_type='manual_order', status='confirmed')

        order = self.controller.mark_complete(order.id)

        self.assertEqual(order.status, 'completed')
        self.assertIsNotNone(order.completed_at)

    def test_reject_terminal_order_is_rejected(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, status='delivered')

        with self.assertRaises(InvalidTransition):
            self.controller.reject(order.id, notes='Too late')

    def test_update_status_follows_transition_table(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)

        with self.assertRaises(InvalidTransition):
            self.controller.update_status(order.id, 'delivered')

        order = self.controller.update_status(order.id, 'cancelled', reason='Duplicate request')
        self.assertEqual(order.status, 'cancelled')

    def test_update_status_cannot_confirm_without_a_supplier(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)

        with self.assertRaises(InvalidTransition):
            self.controller.update_status(order.id, 'confirmed')

        order.refresh_from_db()
        self.assertEqual(order.status, 'pending')
        self.assertIsNone(order.assigned_supplier)

    def test_update_status_cannot_complete_a_buyer_request(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)
        self.controller.assign(order.id, self.supplier.id)

        with self.assertRaises(InvalidTransition):
            self.controller.update_status(order.id, 'completed')

        order.refresh_from_db()
        self.assertEqual(order.status, 'confirmed')

    def test_update_status_cancel_closes_open_submissions(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer)
        SubmissionFanoutService(self.admin).send(order.id, [self.supplier.id, self.other_supplier.id])

        self.controller.update_status(order.id, 'cancelled', reason='Buyer called off')

        statuses = set(OrderSubmission.objects.filter(order=order).values_list('status', flat=True))
        self.assertEqual(statuses, {'ignored'})

    def test_update_status_reject_closes_open_submissions(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer)
        SubmissionFanoutService(self.admin).send(order.id, [self.supplier.id])

        order = self.controller.update_status(order.id, 'rejected', reason='No trucks on this route')

        self.assertEqual(order.status, 'rejected')
        self.assertEqual(order.admin_notes, 'No trucks on this route')
        self.assertEqual(OrderSubmission.objects.get(order=order).status, 'ignored')

    def test_update_status_marks_broadcast_order_sent(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)

        with self.assertRaises(InvalidTransition):
            self.controller.update_status(order.id, 'assigned')

        SubmissionFanoutService(self.admin).send(order.id, [self.supplier.id])
        order = self.controller.update_status(order.id, 'assigned')

        self.assertEqual(order.status, 'assigned')

    def test_update_status_reports_trip_progress(self):
        order = create_order(self.cotton, self.bangalore, self.chennai)
        self.controller.assign(order.id, self.supplier.id)

        order = self.controller.update_status(order.id, 'picked_up', reason='Driver called in')

        self.assertEqual(order.status, 'picked_up')
        self.assertEqual(order.status_history.get(new_status='picked_up').reason, 'Driver called in')

    def test_update_status_on_missing_order(self):
        with self.assertRaises(OrderNotFound):
            self.controller.update_status(999999, 'confirmed')

    def test_missing_order(self):
        with self.assertRaises(OrderNotFound):
            self.controller.reject(999999)

    def test_submit_request_notifies_admins(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer, status='draft')

        order = StatusTransitionController(self.buyer).submit_request(order.id)

        self.assertEqual(order.status, 'pending')
        self.assertTrue(TransportRequestNotification.objects.filter(order=order).exists())


class SubmissionFanoutTests(TestCase):
    def setUp(self):
        self.cotton, self.bangalore, self.chennai = create_reference_data()
        self.admin = create_user('office', role='admin')
        self.s1 = create_user('s1', role='supplier', phone_number='9000000001')
        self.s2 = create_user('s2', role='supplier', phone_number='9000000002')
        self.s3 = create_user('s3', role='supplier', phone_number='9000000003')
        self.order = create_order(self.cotton, self.bangalore, self.chennai)
        self.service = SubmissionFanoutService(self.admin)

    def test_fanout_creates_submissions_notifications_and_links(self):
        result = self.service.send(self.order.id, [self.s1.id, self.s2.id])

        self.assertEqual(len(result.created), 2)
        self.assertEqual(OrderSubmission.objects.filter(order=self.order).count(), 2)

        notifications = SupplierNotification.objects.filter(order=self.order)
        self.assertEqual(notifications.count(), 2)
        for notification in notifications:
            self.assertEqual(notification.priority, 'high')
            self.assertEqual(notification.category, 'order')

        self.assertEqual(len(result.whatsapp_links), 2)
        for link in result.whatsapp_links:
            self.assertTrue(link['whatsapp_url'].startswith('https://wa.me/91'))
            self.assertIn(self.order.order_number, link['whatsapp_url'])
            self.assertIn('Cotton', link['whatsapp_url'])

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, 'submitted')

    def test_notification_integrity_error_is_a_failure(self):
        notify = NotificationService.notify_supplier_new_order

        def notify_or_fail(order, supplier):
            if supplier.id == self.s1.id:
                raise IntegrityError('null value in column "title"')
            return notify(order, supplier)

        with patch.object(NotificationService, 'notify_supplier_new_order', side_effect=notify_or_fail):
            result = self.service.send(self.order.id, [self.s1.id, self.s2.id])

        self.assertEqual([outcome['supplier_id'] for outcome in result.created], [self.s2.id])
        self.assertEqual(result.skipped, [])
        self.assertEqual(result.failed[0]['supplier_id'], self.s1.id)
        self.assertEqual(result.failed[0]['reason'], 'Could not record the submission')
        self.assertFalse(OrderSubmission.objects.filter(order=self.order, supplier=self.s1).exists())
        self.assertEqual(result.message, f'Order {self.order.order_number} sent to 1 supplier. 1 supplier could not be notified.')

    def test_fanout_twice_notifies_each_supplier_once(self):
        self.service.send(self.order.id, [self.s1.id, self.s2.id])
        result = self.service.send(self.order.id, [self.s2.id, self.s3.id])

        self.assertEqual([outcome['supplier_id'] for outcome in result.created], [self.s3.id])
        self.assertEqual([outcome['supplier_id'] for outcome in result.skipped], [self.s2.id])
        self.assertIn('1 of 2 selected suppliers already notified.', result.message)

        for supplier in [self.s1, self.s2, self.s3]:
            self.assertEqual(
                SupplierNotification.objects.filter(order=self.order, recipient=supplier).count(), 1
            )
        self.assertEqual(OrderSubmission.objects.filter(order=self.order).count(), 3)

    def test_order_with_direct_supplier_rejects_fanout(self):
        self.order.assigned_supplier = self.s3
        self.order.save()

        with self.assertRaises(FanoutConflict):
            self.service.send(self.order.id, [self.s1.id])

        self.assertFalse(OrderSubmission.objects.filter(order=self.order).exists())

    def test_confirmed_order_cannot_be_broadcast(self):
        self.order.status = 'confirmed'
        self.order.save()

        with self.assertRaises(InvalidTransition):
            self.service.send(self.order.id, [self.s1.id])

    @override_settings(ALLOW_INCREMENTAL_FANOUT=False)
    def test_strict_mode_rejects_second_broadcast(self):
        self.service.send(self.order.id, [self.s1.id])

        with self.assertRaises(FanoutConflict):
            self.service.send(self.order.id, [self.s2.id])

    def test_non_supplier_ids_are_reported_failed(self):
        buyer = create_user('buyer1')

        result = self.service.send(self.order.id, [self.s1.id, buyer.id, 424242])

        self.assertEqual(len(result.created), 1)
        self.assertEqual(sorted(outcome['supplier_id'] for outcome in result.failed), sorted([buyer.id, 424242]))

    def test_supplier_without_phone_gets_no_link(self):
        no_phone = create_user('s4', role='supplier')

        result = self.service.send(self.order.id, [no_phone.id])

        self.assertEqual(len(result.created), 1)
        self.assertEqual(result.whatsapp_links, [])
        self.assertFalse(OrderSubmission.objects.get(order=self.order, supplier=no_phone).whatsapp_sent)


class ConfirmSubmissionTests(TestCase):
    def setUp(self):
        self.cotton, self.bangalore, self.chennai = create_reference_data()
        self.admin = create_user('office', role='admin')
        self.buyer = create_user('buyer1')
        self.s1 = create_user('s1', role='supplier', phone_number='9000000001')
        self.s2 = create_user('s2', role='supplier', phone_number='9000000002')
        self.driver, self.vehicle = create_fleet(self.s1, '1')
        self.other_driver, self.other_vehicle = create_fleet(self.s2, '2')
        self.order = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer)
        SubmissionFanoutService(self.admin).send(self.order.id, [self.s1.id, self.s2.id])
        self.submission = OrderSubmission.objects.get(order=self.order, supplier=self.s1)

    def test_confirm_takes_the_order(self):
        controller = StatusTransitionController(self.s1)

        controller.confirm_submission(self.submission.id, self.s1, self.driver.id, self.vehicle.id)

        self.submission.refresh_from_db()
        self.order.refresh_from_db()
        self.assertEqual(self.submission.status, 'confirmed')
        self.assertEqual(self.submission.driver_mobile, self.driver.mobile)
        self.assertEqual(OrderSubmission.objects.get(order=self.order, supplier=self.s2).status, 'accepted_by_other')
        self.assertEqual(self.order.status, 'confirmed')
        self.assertEqual(self.order.driver, self.driver)
        self.assertEqual(self.order.vehicle, self.vehicle)

        confirmed = AdminNotification.objects.get(order=self.order)
        self.assertEqual(confirmed.category, 'order_management')
        self.assertEqual(confirmed.priority, 'high')
        self.assertTrue(
            SupplierNotification.objects.filter(recipient=self.s2, title='Order No Longer Available').exists()
        )

    def test_driver_must_belong_to_supplier(self):
        controller = StatusTransitionController(self.s1)

        with self.assertRaises(ExecutionDetailsError):
            controller.confirm_submission(self.submission.id, self.s1, self.other_driver.id, self.vehicle.id)

        self.submission.refresh_from_db()
        self.assertEqual(self.submission.status, 'submitted')

    def test_second_supplier_cannot_confirm_taken_order(self):
        StatusTransitionController(self.s1).confirm_submission(
            self.submission.id, self.s1, self.driver.id, self.vehicle.id
        )
        taken = OrderSubmission.objects.get(order=self.order, supplier=self.s2)

        with self.assertRaises(InvalidTransition):
            StatusTransitionController(self.s2).confirm_submission(
                taken.id, self.s2, self.other_driver.id, self.other_vehicle.id
            )

    def test_manual_order_submission_is_accepted(self):
        manual = create_order(self.cotton, self.bangalore, self.chennai, order_type='manual_order')
        SubmissionFanoutService(self.admin).send(manual.id, [self.s1.id])
        submission = OrderSubmission.objects.get(order=manual, supplier=self.s1)

        StatusTransitionController(self.s1).confirm_submission(
            submission.id, self.s1, self.driver.id, self.vehicle.id, driver_mobile='9845012345'
        )

        submission.refresh_from_db()
        self.assertEqual(submission.status, 'accepted')
        self.assertEqual(submission.driver_mobile, '9845012345')

    def test_trip_progress_after_confirmation(self):
        controller = StatusTransitionController(self.s1)
        controller.confirm_submission(self.submission.id, self.s1, self.driver.id, self.vehicle.id)

        controller.update_progress(self.order.id, 'picked_up', supplier=self.s1)
        order = controller.update_progress(self.order.id, 'in_transit', supplier=self.s1)

        self.assertEqual(order.status, 'in_transit')
        with self.assertRaises(OrderNotFound):
            StatusTransitionController(self.s2).update_progress(self.order.id, 'delivered', supplier=self.s2)


class BuyerOrderApiTests(TestCase):
    def setUp(self):
        self.cotton, self.bangalore, self.chennai = create_reference_data()
        self.buyer = create_user('buyer1')
        self.client = APIClient()
        self.client.force_authenticate(user=self.buyer)

    def _payload(self, **overrides):
        payload = {
            'load_type': self.cotton.id,
            'from_state': 'Karnataka',
            'from_district': self.bangalore.id,
            'from_place': 'Bangalore',
            'to_state': 'Tamil Nadu',
            'to_district': self.chennai.id,
            'to_place': 'Chennai',
            'estimated_tons': '12.5',
        }
        payload.update(overrides)
        return payload

    def test_create_requires_tons_or_goods(self):
        payload = self._payload()
        del payload['estimated_tons']

        response = self.client.post('/api/orders/', payload, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])
        self.assertFalse(Order.objects.exists())

    def test_create_request_notifies_admins(self):
        response = self.client.post('/api/orders/', self._payload(), format='json')

        self.assertEqual(response.status_code, 201)
        order = Order.objects.get()
        self.assertEqual(order.status, 'pending')
        self.assertEqual(order.buyer, self.buyer)
        self.assertEqual(response.json()['order']['order_number'], order.order_number)
        self.assertTrue(TransportRequestNotification.objects.filter(order=order).exists())

    def test_draft_is_not_announced_until_submitted(self):
        response = self.client.post('/api/orders/', self._payload(save_as_draft=True), format='json')

        self.assertEqual(response.status_code, 201)
        order = Order.objects.get()
        self.assertEqual(order.status, 'draft')
        self.assertFalse(TransportRequestNotification.objects.exists())

        response = self.client.post(f'/api/orders/{order.id}/submit/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['order']['status'], 'pending')
        self.assertTrue(TransportRequestNotification.objects.filter(order=order).exists())

    def test_inactive_load_type_is_rejected(self):
        self.cotton.is_active = False
        self.cotton.save()

        response = self.client.post('/api/orders/', self._payload(), format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('load_type', response.json()['errors'])

    def test_buyer_sees_only_own_orders(self):
        other = create_user('buyer2')
        create_order(self.cotton, self.bangalore, self.chennai, buyer=other)
        mine = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer)

        response = self.client.get('/api/orders/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([row['id'] for row in response.json()], [mine.id])
        self.assertEqual(self.client.get(f'/api/orders/{mine.id + 1000}/').status_code, 404)

    def test_cancel_after_confirmation_is_refused(self):
        order = create_order(self.cotton, self.bangalore, self.chennai, buyer=self.buyer, status='confirmed')

        response = self.client.post(f'/api/orders/{order.id}/cancel/', {'reason': 'Changed plans'}, format='json')

        self.assertEqual(response.status_code, 400)
        order.refresh_from_db()
        self.assertEqual(order.status, 'confirmed')

    def test_suppliers_cannot_create_requests(self):
        supplier = create_user('s1', role='supplier', phone_number='9000000001')
        self.client.force_authenticate(user=supplier)

        response = self.client.post('/api/orders/', self._payload(), format='json')

        self.assertEqual(response.status_code, 403)


class SupplierSubmissionApiTests(TestCase):
    def setUp(self):
        self.cotton, self.bangalore, self.chennai = create_reference_data()
        self.admin = create_user('office', role='admin')
        self.supplier = create_user('s1', role='supplier', phone_number='9000000001')
        self.driver, self.vehicle = create_fleet(self.supplier, '1')
        self.order = create_order(self.cotton, self.bangalore, self.chennai)
        SubmissionFanoutService(self.admin).send(self.order.id, [self.supplier.id])
        self.submission = OrderSubmission.objects.get(order=self.order)
        self.client = APIClient()
        self.client.force_authenticate(user=self.supplier)

    def test_list_and_view_marks_viewed(self):
        response = self.client.get('/api/supplier/submissions/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]['order']['order_number'], self.order.order_number)

        response = self.client.get(f'/api/supplier/submissions/{self.submission.id}/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['status'], 'viewed')

    def test_confirm_via_api(self):
        response = self.client.post(
            f'/api/supplier/submissions/{self.submission.id}/confirm/',
            {'driver_id': self.driver.id, 'vehicle_id': self.vehicle.id},
            format='json'
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['submission']['status'], 'confirmed')

    def test_confirm_with_foreign_vehicle_is_400(self):
        other = create_user('s2', role='supplier', phone_number='9000000002')
        _, foreign_vehicle = create_fleet(other, '2')

        response = self.client.post(
            f'/api/supplier/submissions/{self.submission.id}/confirm/',
            {'driver_id': self.driver.id, 'vehicle_id': foreign_vehicle.id},
            format='json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])

    def test_decline(self):
        response = self.client.post(f'/api/supplier/submissions/{self.submission.id}/decline/')

        self.assertEqual(response.status_code, 200)
        self.submission.refresh_from_db()
        self.assertEqual(self.submission.status, 'rejected')
