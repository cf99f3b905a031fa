from decimal import Decimal
from django.test import TestCase
from rest_framework.test import APIClient

from authentication.models import CustomUser
from orders.models import Order
from .models import District, LoadType


class ReferenceDataApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = CustomUser.objects.create_user(username='office', password='test-pass-123', role='admin')
        self.buyer = CustomUser.objects.create_user(username='buyer1', password='test-pass-123')
        self.rice = LoadType.objects.create(name='Rice')
        self.cement = LoadType.objects.create(name='Cement', is_active=False)
        self.hosur = District.objects.create(name='Krishnagiri', state='Tamil Nadu')
        self.mysore = District.objects.create(name='Mysuru', state='Karnataka')

    def test_pickers_only_list_active_records(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.get('/api/reference/load-types/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([item['name'] for item in response.json()['load_types']], ['Rice'])

        response = self.client.get('/api/reference/districts/', {'state': 'karnataka'})

        self.assertEqual([item['name'] for item in response.json()['districts']], ['Mysuru'])

    def test_admin_list_includes_inactive(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get('/api/admin/reference/load-types/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['total'], 2)

    def test_buyer_cannot_manage_reference_data(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post('/api/admin/reference/load-types/', {'name': 'Steel'}, format='json')

        self.assertEqual(response.status_code, 403)

    def test_create_and_duplicate(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post('/api/admin/reference/load-types/', {'name': ' Steel '}, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['data']['name'], 'Steel')

        response = self.client.post('/api/admin/reference/load-types/', {'name': 'Steel'}, format='json')

        self.assertEqual(response.status_code, 409)

    def test_district_name_is_unique_per_state(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(
            '/api/admin/reference/districts/', {'name': 'Mysuru', 'state': 'Karnataka'}, format='json'
        )
        self.assertEqual(response.status_code, 409)

        response = self.client.post(
            '/api/admin/reference/districts/', {'name': 'Mysuru', 'state': 'Tamil Nadu'}, format='json'
        )
        self.assertEqual(response.status_code, 201)

    def test_invalid_reference_type(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get('/api/admin/reference/vehicles/')

        self.assertEqual(response.status_code, 400)

    def test_delete_of_referenced_load_type_is_refused(self):
        Order.objects.create(
            load_type=self.rice,
            estimated_tons=Decimal('10'),
            from_state='Tamil Nadu', from_district=self.hosur, from_place='Hosur',
            to_state='Karnataka', to_district=self.mysore, to_place='Mysuru',
        )
        self.client.force_authenticate(user=self.admin)

        response = self.client.delete(f'/api/admin/reference/load-types/{self.rice.id}/')

        self.assertEqual(response.status_code, 409)
        self.assertIn('Deactivate it instead', response.json()['message'])
        self.assertTrue(LoadType.objects.filter(id=self.rice.id).exists())

    def test_delete_unused_load_type(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.delete(f'/api/admin/reference/load-types/{self.cement.id}/')

        self.assertEqual(response.status_code, 200)
        self.assertFalse(LoadType.objects.filter(id=self.cement.id).exists())

    def test_toggle_status(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.post(f'/api/admin/reference/districts/{self.mysore.id}/toggle-status/')

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()['data']['is_active'])
        self.mysore.refresh_from_db()
        self.assertFalse(self.mysore.is_active)
