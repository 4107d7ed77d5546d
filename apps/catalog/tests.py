from datetime import datetime, timedelta, timezone as dt_timezone
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import TestCase
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from core.errors import InvalidStatus

from .models import Attraction, Show, Service, TicketType, TicketTypeAttraction
from .services import CatalogService

User = get_user_model()

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=dt_timezone.utc)


class ShowStatusTestCase(TestCase):
    """Test cases for the observed show status"""

    def setUp(self):
        self.show = Show.objects.create(
            title='Parade', location='Main Street',
            start_time=NOW, end_time=NOW + timedelta(hours=1),
        )

    def test_status_follows_clock(self):
        self.assertEqual(self.show.current_status(NOW - timedelta(seconds=1)), Show.Status.SCHEDULED)
        self.assertEqual(self.show.current_status(NOW), Show.Status.ONGOING)
        self.assertEqual(self.show.current_status(NOW + timedelta(hours=1)), Show.Status.ONGOING)
        self.assertEqual(self.show.current_status(NOW + timedelta(hours=2)), Show.Status.FINISHED)

    def test_manual_status_sticks(self):
        CatalogService.set_show_status(self.show.pk, Show.Status.CANCELLED)
        self.show.refresh_from_db()

        self.assertEqual(self.show.current_status(NOW), Show.Status.CANCELLED)

    def test_time_driven_status_cannot_be_set(self):
        with self.assertRaises(InvalidStatus):
            CatalogService.set_show_status(self.show.pk, Show.Status.FINISHED)

        self.show.refresh_from_db()
        self.assertEqual(self.show.status, Show.Status.SCHEDULED)


class CatalogServiceTestCase(TestCase):
    """Test cases for ticket type whitelists"""

    def setUp(self):
        self.ticket_type = TicketType.objects.create(name='Standard', price='39.90')
        self.coaster = Attraction.objects.create(name='Coaster', category='Thrill', location='North')

    def test_link_is_idempotent(self):
        _, created = CatalogService.link('attraction', self.ticket_type.pk, self.coaster.pk)
        _, created_again = CatalogService.link('attraction', self.ticket_type.pk, self.coaster.pk)

        self.assertTrue(created)
        self.assertFalse(created_again)
        self.assertEqual(TicketTypeAttraction.objects.count(), 1)

    def test_seed_park_command(self):
        out = StringIO()

        call_command('seed_park', stdout=out)
        call_command('seed_park', stdout=out)

        standard = TicketType.objects.get(name='Standard')
        self.assertTrue(standard.attraction_links.exists())
        self.assertEqual(TicketType.objects.filter(name='Standard').count(), 1)
        self.assertTrue(User.objects.filter(role=User.Role.STAFF).exists())


class CatalogViewsTestCase(APITestCase):
    """Test cases for catalog endpoints"""

    def setUp(self):
        self.visitor = User.objects.create_user(email='visitor@park.test', password='secret-pass-1')
        self.staff = User.objects.create_staff(email='staff@park.test', password='secret-pass-1')
        self.ticket_type = TicketType.objects.create(name='Standard', price='39.90')
        self.coaster = Attraction.objects.create(name='Coaster', category='Thrill', location='North')
        self.locker = Service.objects.create(name='Locker', location='Entrance', type='Storage')

    def get_auth_headers(self, user):
        refresh = RefreshToken.for_user(user)
        return {'HTTP_AUTHORIZATION': f'Bearer {refresh.access_token}'}

    def test_public_listing(self):
        response = self.client.get('/api/attractions/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['name'], 'Coaster')

    def test_staff_creates_attraction(self):
        response = self.client.post(
            '/api/attractions/',
            {'name': 'Log Flume', 'category': 'Water', 'location': 'West'},
            format='json',
            **self.get_auth_headers(self.staff)
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(Attraction.objects.filter(name='Log Flume').exists())

    def test_visitor_cannot_create_attraction(self):
        response = self.client.post(
            '/api/attractions/',
            {'name': 'Log Flume', 'category': 'Water', 'location': 'West'},
            format='json',
            **self.get_auth_headers(self.visitor)
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_show_end_must_follow_start(self):
        response = self.client.post(
            '/api/shows/',
            {
                'title': 'Backwards',
                'location': 'Lake',
                'start_time': NOW.isoformat(),
                'end_time': (NOW - timedelta(hours=1)).isoformat(),
            },
            format='json',
            **self.get_auth_headers(self.staff)
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_show_status_endpoint(self):
        show = Show.objects.create(
            title='Parade', location='Main Street',
            start_time=NOW, end_time=NOW + timedelta(hours=1),
        )

        response = self.client.put(
            f'/api/shows/{show.pk}/status/',
            {'status': 'DELAYED'},
            format='json',
            **self.get_auth_headers(self.staff)
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'DELAYED')

    def test_show_status_endpoint_rejects_time_driven_status(self):
        show = Show.objects.create(
            title='Parade', location='Main Street',
            start_time=NOW, end_time=NOW + timedelta(hours=1),
        )

        response = self.client.put(
            f'/api/shows/{show.pk}/status/',
            {'status': 'FINISHED'},
            format='json',
            **self.get_auth_headers(self.staff)
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_whitelist_link_and_unlink(self):
        payload = {'ticket_type_id': self.ticket_type.pk, 'item_id': self.locker.pk}
        headers = self.get_auth_headers(self.staff)

        created = self.client.post('/api/ticket-services/', payload, format='json', **headers)
        repeated = self.client.post('/api/ticket-services/', payload, format='json', **headers)
        listed = self.client.get(f'/api/ticket-services/?ticket_type_id={self.ticket_type.pk}')

        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertEqual(repeated.status_code, status.HTTP_200_OK)
        self.assertEqual(listed.data, [created.data])

        deleted = self.client.delete('/api/ticket-services/', payload, format='json', **headers)
        missing = self.client.delete('/api/ticket-services/', payload, format='json', **headers)

        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)

    def test_link_unknown_item(self):
        response = self.client.post(
            '/api/ticket-attractions/',
            {'ticket_type_id': self.ticket_type.pk, 'item_id': 9999},
            format='json',
            **self.get_auth_headers(self.staff)
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'CATALOG_ITEM_NOT_FOUND')

    def test_ticket_types_list_whitelist(self):
        CatalogService.link('attraction', self.ticket_type.pk, self.coaster.pk)

        response = self.client.get('/api/ticket-types/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['attraction_ids'], [self.coaster.pk])
