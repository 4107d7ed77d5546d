from datetime import datetime, timedelta, timezone as dt_timezone

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from core.errors import NotificationNotFound

from .models import Notification
from .services import NotificationService

User = get_user_model()

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=dt_timezone.utc)


class NotificationServiceTestCase(TestCase):
    """Test cases for NotificationService"""

    def setUp(self):
        self.user = User.objects.create_user(email='visitor@park.test', password='secret-pass-1')
        self.other_user = User.objects.create_user(email='other@park.test', password='secret-pass-1')

    def notify(self, user, send_at, **kwargs):
        return NotificationService.create(user, 'Hello', 'Welcome to the park', send_at, **kwargs)

    def test_dispatch_due_marks_only_due_notifications(self):
        due = self.notify(self.user, NOW - timedelta(minutes=1))
        exactly_now = self.notify(self.user, NOW)
        later = self.notify(self.user, NOW + timedelta(minutes=1))

        self.assertEqual(NotificationService.dispatch_due(NOW), 2)

        for notification, expected in [(due, True), (exactly_now, True), (later, False)]:
            notification.refresh_from_db()
            self.assertEqual(notification.sent, expected)

    def test_dispatch_due_is_idempotent(self):
        self.notify(self.user, NOW - timedelta(minutes=1))

        NotificationService.dispatch_due(NOW)

        self.assertEqual(NotificationService.dispatch_due(NOW), 0)

    def test_list_shows_sent_newest_first(self):
        older = self.notify(self.user, NOW - timedelta(hours=2))
        newer = self.notify(self.user, NOW - timedelta(hours=1))
        self.notify(self.user, NOW + timedelta(hours=1))
        self.notify(self.other_user, NOW - timedelta(hours=1))
        NotificationService.dispatch_due(NOW)

        notifications = list(NotificationService.list_for_user(self.user))

        self.assertEqual([n.pk for n in notifications], [newer.pk, older.pk])

    def test_mark_read(self):
        notification = self.notify(self.user, NOW)

        NotificationService.mark_read(self.user, notification.pk)

        notification.refresh_from_db()
        self.assertTrue(notification.read)

    def test_other_users_notification_is_not_found(self):
        notification = self.notify(self.user, NOW)

        with self.assertRaises(NotificationNotFound):
            NotificationService.mark_read(self.other_user, notification.pk)

        with self.assertRaises(NotificationNotFound):
            NotificationService.delete(self.other_user, notification.pk)

        self.assertTrue(Notification.objects.filter(pk=notification.pk).exists())

    def test_disable_push_marks_everything_read(self):
        self.notify(self.user, NOW)
        self.notify(self.user, NOW + timedelta(hours=1))
        foreign = self.notify(self.other_user, NOW)

        NotificationService.set_push_notifications(self.user, False)

        self.user.refresh_from_db()
        self.assertFalse(self.user.push_notifications)
        self.assertFalse(Notification.objects.filter(user=self.user, read=False).exists())
        foreign.refresh_from_db()
        self.assertFalse(foreign.read)

    def test_enable_push_keeps_unread(self):
        notification = self.notify(self.user, NOW)

        NotificationService.set_push_notifications(self.user, True)

        notification.refresh_from_db()
        self.assertFalse(notification.read)


class NotificationViewsTestCase(APITestCase):
    """Test cases for notification endpoints"""

    def setUp(self):
        self.user = User.objects.create_user(email='visitor@park.test', password='secret-pass-1')
        self.other_user = User.objects.create_user(email='other@park.test', password='secret-pass-1')
        self.url = '/api/notifications/'

        self.notification = NotificationService.create(
            self.user, 'Show Reminder', 'Starts soon', timezone.now() - timedelta(minutes=1)
        )
        NotificationService.dispatch_due()

    def get_auth_headers(self, user=None):
        refresh = RefreshToken.for_user(user or self.user)
        return {'HTTP_AUTHORIZATION': f'Bearer {refresh.access_token}'}

    def test_list(self):
        response = self.client.get(self.url, **self.get_auth_headers())

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['title'], 'Show Reminder')
        self.assertTrue(response.data[0]['sent'])

    def test_list_requires_authentication(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_mark_read(self):
        response = self.client.patch(f'{self.url}{self.notification.pk}/', **self.get_auth_headers())

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['read'])

    def test_delete_other_users_notification(self):
        response = self.client.delete(
            f'{self.url}{self.notification.pk}/',
            **self.get_auth_headers(self.other_user)
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'NOTIFICATION_NOT_FOUND')

    def test_delete(self):
        response = self.client.delete(f'{self.url}{self.notification.pk}/', **self.get_auth_headers())

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Notification.objects.filter(pk=self.notification.pk).exists())

    def test_toggle(self):
        response = self.client.patch(
            f'{self.url}toggle/', {'enabled': False}, format='json', **self.get_auth_headers()
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertFalse(self.user.push_notifications)

    def test_toggle_requires_enabled(self):
        response = self.client.patch(f'{self.url}toggle/', {}, format='json', **self.get_auth_headers())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
