from django.test import TestCase
from rest_framework.test import APIClient

from notifications.models import AdminNotification, VehicleLocationNotification
from orders.fanout import SubmissionFanoutService
from orders.models import OrderSubmission
from orders.tests import create_fleet, create_order, create_reference_data, create_user
from orders.transitions import StatusTransitionController
from .models import Driver, Vehicle, VehicleLocation


class SupplierApiTestCase(TestCase):
    def setUp(self):
        self.cotton, self.bangalore, self.chennai = create_reference_data()
        self.supplier = create_user('s1', role='supplier', phone_number='9000000001', company_name='Kaveri Roadways')
        self.other = create_user('s2', role='supplier', phone_number='9000000002')
        self.driver, self.vehicle = create_fleet(self.supplier, '1')
        self.client = APIClient()
        self.client.force_authenticate(user=self.supplier)


class FleetTests(SupplierApiTestCase):
    def test_vehicle_number_is_normalized_and_unique(self):
        response = self.client.post(
            '/api/supplier/vehicles/', {'vehicle_number': 'tn 09 bc 4321', 'capacity_tons': '20'}, format='json'
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['vehicle']['vehicle_number'], 'TN09BC4321')

        self.client.force_authenticate(user=self.other)
        response = self.client.post('/api/supplier/vehicles/', {'vehicle_number': 'TN09BC4321'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('vehicle_number', response.json()['errors'])

    def test_capacity_must_be_positive(self):
        response = self.client.post(
            '/api/supplier/vehicles/', {'vehicle_number': 'KA05MN1111', 'capacity_tons': '0'}, format='json'
        )

        self.assertEqual(response.status_code, 400)

    def test_fleet_is_scoped_to_the_supplier(self):
        create_fleet(self.other, '2')

        response = self.client.get('/api/supplier/drivers/')

        self.assertEqual([row['id'] for row in response.json()], [self.driver.id])

        other_vehicle = Vehicle.objects.get(supplier=self.other)
        self.assertEqual(self.client.get(f'/api/supplier/vehicles/{other_vehicle.id}/').status_code, 404)

    def test_driver_on_running_order_cannot_be_deleted(self):
        create_order(
            self.cotton, self.bangalore, self.chennai,
            status='confirmed', driver=self.driver, vehicle=self.vehicle
        )

        response = self.client.delete(f'/api/supplier/drivers/{self.driver.id}/')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['blocking_orders'], ['ORD-1'])
        self.assertTrue(Driver.objects.filter(id=self.driver.id).exists())

        response = self.client.delete(f'/api/supplier/vehicles/{self.vehicle.id}/')

        self.assertEqual(response.status_code, 409)

    def test_driver_on_finished_order_can_be_deleted(self):
        create_order(self.cotton, self.bangalore, self.chennai, status='delivered', driver=self.driver)

        response = self.client.delete(f'/api/supplier/drivers/{self.driver.id}/')

        self.assertEqual(response.status_code, 200)
        self.assertFalse(Driver.objects.filter(id=self.driver.id).exists())

    def test_buyers_have_no_fleet(self):
        self.client.force_authenticate(user=create_user('buyer1'))

        response = self.client.get('/api/supplier/drivers/')

        self.assertEqual(response.status_code, 403)


class VehicleLocationTests(SupplierApiTestCase):
    def _payload(self, **overrides):
        payload = {
            'vehicle': self.vehicle.id,
            'driver': self.driver.id,
            'state': 'Karnataka',
            'district': self.bangalore.id,
            'place': 'Peenya',
            'recommended_location': 'Chennai',
        }
        payload.update(overrides)
        return payload

    def test_posting_a_location_notifies_admins(self):
        response = self.client.post('/api/supplier/vehicle-locations/', self._payload(), format='json')

        self.assertEqual(response.status_code, 201)
        location = VehicleLocation.objects.get()
        notification = VehicleLocationNotification.objects.get()
        self.assertEqual(notification.vehicle_location, location)
        self.assertEqual(notification.category, 'supplier_order')
        self.assertEqual(notification.supplier, self.supplier)
        self.assertIn('KA01AB0001', notification.message)

    def test_foreign_vehicle_is_rejected(self):
        _, foreign_vehicle = create_fleet(self.other, '2')

        response = self.client.post(
            '/api/supplier/vehicle-locations/', self._payload(vehicle=foreign_vehicle.id), format='json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('vehicle', response.json()['errors'])
        self.assertFalse(VehicleLocationNotification.objects.exists())

    def test_inactive_district_is_rejected(self):
        self.bangalore.is_active = False
        self.bangalore.save()

        response = self.client.post('/api/supplier/vehicle-locations/', self._payload(), format='json')

        self.assertEqual(response.status_code, 400)

    def test_close_a_posting(self):
        self.client.post('/api/supplier/vehicle-locations/', self._payload(), format='json')
        location = VehicleLocation.objects.get()

        response = self.client.patch(
            f'/api/supplier/vehicle-locations/{location.id}/', {'status': 'closed'}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        location.refresh_from_db()
        self.assertEqual(location.status, 'closed')


class DocumentTests(SupplierApiTestCase):
    def test_submitting_a_document_notifies_admins(self):
        response = self.client.post('/api/supplier/documents/', {
            'document_type': 'vehicle_rc',
            'document_url': 'https://files.example.com/rc.pdf',
            'vehicle': self.vehicle.id,
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['document']['status'], 'pending')
        notification = AdminNotification.objects.get()
        self.assertEqual(notification.category, 'document')
        self.assertEqual(notification.vehicle, self.vehicle)


class TripProgressTests(SupplierApiTestCase):
    def setUp(self):
        super().setUp()
        admin = create_user('office', role='admin')
        self.order = create_order(self.cotton, self.bangalore, self.chennai)
        SubmissionFanoutService(admin).send(self.order.id, [self.supplier.id, self.other.id])
        submission = OrderSubmission.objects.get(order=self.order, supplier=self.supplier)
        StatusTransitionController(self.supplier).confirm_submission(
            submission.id, self.supplier, self.driver.id, self.vehicle.id
        )

    def test_executing_supplier_reports_progress(self):
        url = f'/api/supplier/orders/{self.order.id}/progress/'

        self.assertEqual(self.client.post(url, {'status': 'in_transit'}, format='json').status_code, 200)
        response = self.client.post(url, {'status': 'delivered'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['order']['status'], 'delivered')
        self.assertIsNotNone(response.json()['order']['completed_at'])

    def test_progress_cannot_skip_ahead(self):
        response = self.client.post(
            f'/api/supplier/orders/{self.order.id}/progress/', {'status': 'delivered'}, format='json'
        )

        self.assertEqual(response.status_code, 400)

    def test_other_supplier_cannot_report_progress(self):
        self.client.force_authenticate(user=self.other)

        response = self.client.post(
            f'/api/supplier/orders/{self.order.id}/progress/', {'status': 'picked_up'}, format='json'
        )

        self.assertEqual(response.status_code, 404)
