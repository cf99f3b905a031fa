from django.test import TestCase
from rest_framework.test import APIClient

from .authentication import generate_jwt_token
from .models import CustomUser


class AuthenticationApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.buyer = CustomUser.objects.create_user(
            username='buyer1', password='test-pass-123', company_name='Sri Lakshmi Traders'
        )

    def test_login_returns_token_and_role(self):
        response = self.client.post(
            '/api/auth/login/', {'username': 'buyer1', 'password': 'test-pass-123'}, format='json'
        )

        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data['success'])
        self.assertEqual(data['role'], 'buyer')
        self.assertEqual(data['user']['name'], 'Sri Lakshmi Traders')

    def test_login_with_wrong_password(self):
        response = self.client.post(
            '/api/auth/login/', {'username': 'buyer1', 'password': 'wrong-pass'}, format='json'
        )

        self.assertEqual(response.status_code, 401)

    def test_token_authenticates_profile_requests(self):
        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {generate_jwt_token(self.buyer)}')

        response = self.client.get('/api/auth/me/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['username'], 'buyer1')

    def test_invalid_token_is_rejected(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')

        response = self.client.get('/api/auth/me/')

        self.assertEqual(response.status_code, 401)

    def test_supplier_signup_requires_phone_number(self):
        response = self.client.post(
            '/api/auth/signup/',
            {'username': 'fleet1', 'password': 'long-enough-pass', 'role': 'supplier'},
            format='json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertIn('phone_number', response.json()['errors'])

    def test_supplier_signup(self):
        response = self.client.post(
            '/api/auth/signup/',
            {
                'username': 'fleet1',
                'password': 'long-enough-pass',
                'role': 'supplier',
                'phone_number': '9845012345',
                'company_name': 'Kaveri Roadways',
            },
            format='json'
        )

        self.assertEqual(response.status_code, 201)
        user = CustomUser.objects.get(username='fleet1')
        self.assertTrue(user.is_supplier)
        self.assertTrue(user.check_password('long-enough-pass'))

    def test_admin_role_cannot_be_self_assigned(self):
        response = self.client.post(
            '/api/auth/signup/',
            {'username': 'sneaky', 'password': 'long-enough-pass', 'role': 'admin'},
            format='json'
        )

        self.assertEqual(response.status_code, 400)
        self.assertFalse(CustomUser.objects.filter(username='sneaky').exists())

    def test_profile_update_cannot_change_role(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.patch('/api/auth/me/', {'city': 'Salem', 'role': 'admin'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.buyer.refresh_from_db()
        self.assertEqual(self.buyer.city, 'Salem')
        self.assertEqual(self.buyer.role, 'buyer')

    def test_profile_update_validates_phone_number(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.patch('/api/auth/me/', {'phone_number': 'abc'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('phone_number', response.json()['errors'])
        self.buyer.refresh_from_db()
        self.assertIsNone(self.buyer.phone_number)

    def test_profile_update_rejects_taken_phone_number(self):
        CustomUser.objects.create_user(username='fleet1', password='x', role='supplier', phone_number='9845012345')
        self.client.force_authenticate(user=self.buyer)

        response = self.client.patch('/api/auth/me/', {'phone_number': '9845012345'}, format='json')

        self.assertEqual(response.status_code, 400)
        self.assertIn('phone_number', response.json()['errors'])

    def test_supplier_cannot_clear_phone_number(self):
        supplier = CustomUser.objects.create_user(
            username='fleet1', password='x', role='supplier', phone_number='9845012345'
        )
        self.client.force_authenticate(user=supplier)

        for blank in [None, '']:
            response = self.client.patch('/api/auth/me/', {'phone_number': blank}, format='json')

            self.assertEqual(response.status_code, 400)
            self.assertIn('phone_number', response.json()['errors'])

        supplier.refresh_from_db()
        self.assertEqual(supplier.phone_number, '9845012345')

    def test_buyer_can_clear_phone_number(self):
        self.buyer.phone_number = '9845098450'
        self.buyer.save()
        self.client.force_authenticate(user=self.buyer)

        response = self.client.patch('/api/auth/me/', {'phone_number': ''}, format='json')

        self.assertEqual(response.status_code, 200)
        self.buyer.refresh_from_db()
        self.assertIsNone(self.buyer.phone_number)
