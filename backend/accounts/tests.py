from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User


class AuthApiTests(APITestCase):
    def register(self, **overrides):
        payload = {
            'username': 'rider_one',
            'password': 'secret-pass-1',
            'email': 'rider@example.com',
            'phone_number': '+15550001',
        }
        payload.update(overrides)
        return self.client.post('/api/auth/register/', payload, format='json')

    def test_register_defaults_to_customer(self):
        response = self.register()

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['user']['role'], User.ROLE_CUSTOMER)
        self.assertIn('access', response.data['tokens'])

    def test_register_as_driver(self):
        response = self.register(role=User.ROLE_DRIVER)

        self.assertEqual(response.data['user']['role'], User.ROLE_DRIVER)

    def test_cannot_register_as_admin(self):
        response = self.register(role=User.ROLE_ADMIN)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_email(self):
        self.register()

        response = self.register(username='rider_two')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_login_and_me(self):
        self.register()

        login = self.client.post('/api/auth/login/', {
            'username': 'rider_one', 'password': 'secret-pass-1',
        }, format='json')
        self.assertEqual(login.status_code, status.HTTP_200_OK)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['tokens']['access']}")
        me = self.client.get('/api/auth/me/')
        self.assertEqual(me.status_code, status.HTTP_200_OK)
        self.assertEqual(me.data['username'], 'rider_one')

    def test_login_wrong_password(self):
        self.register()

        response = self.client.post('/api/auth/login/', {
            'username': 'rider_one', 'password': 'nope',
        }, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_refresh(self):
        tokens = self.register().data['tokens']

        response = self.client.post('/api/auth/refresh/', {'refresh': tokens['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

        bad = self.client.post('/api/auth/refresh/', {'refresh': 'garbage'}, format='json')
        self.assertEqual(bad.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_phone_number(self):
        self.register()
        self.client.force_authenticate(user=User.objects.get(username='rider_one'))

        response = self.client.patch('/api/auth/me/', {'phone_number': '+15559999'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(User.objects.get(username='rider_one').phone_number, '+15559999')
