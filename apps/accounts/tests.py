from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from apps.notifications.models import Notification

from .services import AccountService

User = get_user_model()


class AccountServiceTestCase(TestCase):
    """Test cases for AccountService"""

    def test_register_creates_visitor_with_welcome_notification(self):
        user = AccountService.register_user('ada@park.test', 'Sunny-Coaster-2026', 'Ada', 'Lovelace')

        self.assertEqual(user.role, User.Role.USER)
        self.assertFalse(user.is_park_staff)
        self.assertTrue(user.check_password('Sunny-Coaster-2026'))

        welcome = Notification.objects.get(user=user)
        self.assertEqual(welcome.title, 'Welcome!')
        self.assertFalse(welcome.sent)

    def test_create_staff(self):
        staff = User.objects.create_staff(email='staff@park.test', password='Sunny-Coaster-2026')

        self.assertTrue(staff.is_park_staff)


class AccountViewsTestCase(APITestCase):
    """Test cases for registration, login and profile endpoints"""

    def setUp(self):
        self.password = 'Sunny-Coaster-2026'
        self.user = User.objects.create_user(email='visitor@park.test', password=self.password)

    def test_register(self):
        response = self.client.post(
            '/api/accounts/register/',
            {
                'first_name': 'Ada',
                'last_name': 'Lovelace',
                'email': 'Ada@Park.test',
                'password': self.password,
                'role': 'STAFF',
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['email'], 'ada@park.test')
        self.assertEqual(response.data['role'], 'USER')

    def test_register_duplicate_email(self):
        response = self.client.post(
            '/api/accounts/register/',
            {
                'first_name': 'Again',
                'last_name': 'Visitor',
                'email': 'VISITOR@park.test',
                'password': self.password,
            },
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_register_weak_password(self):
        response = self.client.post(
            '/api/accounts/register/',
            {'first_name': 'Ada', 'last_name': 'Lovelace', 'email': 'ada@park.test', 'password': '12345678'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)

    def test_login(self):
        response = self.client.post(
            '/api/accounts/login/',
            {'email': 'visitor@park.test', 'password': self.password},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_login_wrong_password(self):
        response = self.client.post(
            '/api/accounts/login/',
            {'email': 'visitor@park.test', 'password': 'not-the-password'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_profile(self):
        refresh = RefreshToken.for_user(self.user)

        response = self.client.get(
            '/api/accounts/profile/',
            HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'visitor@park.test')

    def test_profile_requires_authentication(self):
        response = self.client.get('/api/accounts/profile/')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class PasswordChangeTestCase(APITestCase):
    """Test cases for changing the password"""

    def setUp(self):
        self.password = 'Sunny-Coaster-2026'
        self.user = User.objects.create_user(email='visitor@park.test', password=self.password)
        self.url = '/api/accounts/profile/password/'

    def get_auth_headers(self):
        refresh = RefreshToken.for_user(self.user)
        return {'HTTP_AUTHORIZATION': f'Bearer {refresh.access_token}'}

    def test_change_password(self):
        response = self.client.put(
            self.url,
            {'current_password': self.password, 'new_password': 'Rainy-Carousel-2027'},
            format='json',
            **self.get_auth_headers()
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('Rainy-Carousel-2027'))
        self.assertFalse(self.user.check_password(self.password))

    def test_wrong_current_password(self):
        response = self.client.put(
            self.url,
            {'current_password': 'not-the-password', 'new_password': 'Rainy-Carousel-2027'},
            format='json',
            **self.get_auth_headers()
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password(self.password))

    def test_missing_fields(self):
        response = self.client.put(self.url, {}, format='json', **self.get_auth_headers())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('current_password', response.data)
        self.assertIn('new_password', response.data)

    def test_weak_new_password(self):
        response = self.client.put(
            self.url,
            {'current_password': self.password, 'new_password': '12345678'},
            format='json',
            **self.get_auth_headers()
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('new_password', response.data)

    def test_requires_authentication(self):
        response = self.client.put(
            self.url,
            {'current_password': self.password, 'new_password': 'Rainy-Carousel-2027'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_service_rejects_wrong_current_password(self):
        self.assertFalse(AccountService.change_password(self.user, 'nope', 'Rainy-Carousel-2027'))
        self.assertTrue(AccountService.change_password(self.user, self.password, 'Rainy-Carousel-2027'))
