"""
Tests for planners, the ticket type whitelist and service bookings
"""
from datetime import datetime, timedelta, timezone as dt_timezone

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from apps.catalog.models import (
    Attraction,
    Service,
    Show,
    TicketType,
    TicketTypeAttraction,
    TicketTypeService,
    TicketTypeShow,
)
from apps.notifications.models import Notification
from apps.tickets.models import Ticket
from core.errors import (
    BookingNotFound,
    CatalogItemNotFound,
    ItemNotEligible,
    PermissionDenied,
    PlannerNotFound,
    TicketNotRedeemed,
)

from .eligibility import Whitelist, filter_eligible, select_eligible
from .models import Planner, ServiceBooking
from .serializers import PlannerSerializer
from .services import BookingService, PlannerService

User = get_user_model()

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=dt_timezone.utc)


def auth_headers(user):
    refresh = RefreshToken.for_user(user)
    return {'HTTP_AUTHORIZATION': f'Bearer {refresh.access_token}'}


class FilterEligibleTestCase(SimpleTestCase):
    """Test cases for the whitelist filter"""

    def test_keeps_only_allowed_ids(self):
        self.assertEqual(filter_eligible([1, 2, 3], {1, 2}), [1, 2])
        self.assertEqual(filter_eligible([5, 6], {5}), [5])

    def test_keeps_candidate_order(self):
        self.assertEqual(filter_eligible([3, 1, 2], {1, 2, 3}), [3, 1, 2])

    def test_drops_duplicates(self):
        self.assertEqual(filter_eligible([2, 1, 2, 1], {1, 2}), [2, 1])

    def test_empty_inputs(self):
        self.assertEqual(filter_eligible([], {1}), [])
        self.assertEqual(filter_eligible([1, 2], frozenset()), [])

    def test_select_eligible_per_kind(self):
        whitelist = Whitelist(attractions=frozenset({1, 2}), shows=frozenset(), services=frozenset({5}))

        selection = select_eligible(whitelist, attraction_ids=[1, 2, 3], show_ids=[7], service_ids=[5, 6])

        self.assertEqual(selection.attraction_ids, [1, 2])
        self.assertEqual(selection.show_ids, [])
        self.assertEqual(selection.service_ids, [5])

    def test_allows(self):
        whitelist = Whitelist(attractions=frozenset({1}), shows=frozenset({4}), services=frozenset())

        self.assertTrue(whitelist.allows('attraction', 1))
        self.assertTrue(whitelist.allows('show', 4))
        self.assertFalse(whitelist.allows('service', 1))


class PlannerFixtureMixin:
    """Builds a ticket type whitelisting a subset of the catalog"""

    def setUp(self):
        self.user = User.objects.create_user(email='visitor@park.test', password='secret-pass-1')
        self.other_user = User.objects.create_user(email='other@park.test', password='secret-pass-1')

        self.coaster = Attraction.objects.create(name='Coaster', category='Thrill', location='North')
        self.carousel = Attraction.objects.create(name='Carousel', category='Family', location='South')
        self.drop_tower = Attraction.objects.create(name='Drop Tower', category='Thrill', location='East')

        self.parade = Show.objects.create(
            title='Parade', location='Main Street',
            start_time=NOW + timedelta(hours=2), end_time=NOW + timedelta(hours=3),
        )
        self.night_show = Show.objects.create(
            title='Night Show', location='Lake',
            start_time=NOW + timedelta(hours=8), end_time=NOW + timedelta(hours=9),
        )

        self.locker = Service.objects.create(name='Locker', location='Entrance', type='Storage')
        self.fast_lane = Service.objects.create(name='Fast Lane', location='Everywhere', type='Queue')

        self.ticket_type = TicketType.objects.create(name='Standard', price='39.90')
        TicketTypeAttraction.objects.create(ticket_type=self.ticket_type, attraction=self.coaster)
        TicketTypeAttraction.objects.create(ticket_type=self.ticket_type, attraction=self.carousel)
        TicketTypeShow.objects.create(ticket_type=self.ticket_type, show=self.parade)
        TicketTypeService.objects.create(ticket_type=self.ticket_type, service=self.locker)

        self.ticket = self.make_ticket(self.user, Ticket.Status.USED)

    def make_ticket(self, user, status):
        return Ticket.objects.create(
            user=user,
            ticket_type=self.ticket_type,
            raw_code=Ticket.generate_raw_code(user.pk, self.ticket_type.pk),
            qr_code='data:image/png;base64,',
            valid_for=NOW.date(),
            status=status,
        )

    def make_planner(self, ticket=None, **kwargs):
        return PlannerService.create(
            self.user,
            ticket_id=(ticket or self.ticket).pk,
            title='Day at the park',
            date=NOW,
            now=NOW,
            **kwargs
        )


class PlannerServiceTestCase(PlannerFixtureMixin, TestCase):
    """Test cases for PlannerService"""

    def test_create_filters_items_by_ticket_type(self):
        planner = self.make_planner(
            attraction_ids=[self.coaster.pk, self.carousel.pk, self.drop_tower.pk],
            show_ids=[self.night_show.pk],
            service_ids=[self.locker.pk, self.fast_lane.pk],
        )

        self.assertEqual(
            set(planner.attractions.values_list('pk', flat=True)),
            {self.coaster.pk, self.carousel.pk}
        )
        self.assertFalse(planner.shows.exists())
        self.assertEqual(list(planner.services.values_list('pk', flat=True)), [self.locker.pk])

    def test_create_requires_redeemed_ticket(self):
        active_ticket = self.make_ticket(self.user, Ticket.Status.ACTIVE)

        with self.assertRaises(TicketNotRedeemed):
            self.make_planner(ticket=active_ticket)

        self.assertFalse(Planner.objects.exists())

    def test_create_on_expired_ticket_rejected(self):
        expired_ticket = self.make_ticket(self.user, Ticket.Status.EXPIRED)

        with self.assertRaises(TicketNotRedeemed):
            self.make_planner(ticket=expired_ticket)

    def test_create_on_other_users_ticket(self):
        foreign_ticket = self.make_ticket(self.other_user, Ticket.Status.USED)

        with self.assertRaises(PermissionDenied):
            self.make_planner(ticket=foreign_ticket)

    def test_create_schedules_show_reminder(self):
        self.make_planner(show_ids=[self.parade.pk])

        reminder = Notification.objects.get(user=self.user, show=self.parade)
        self.assertEqual(reminder.title, 'Show Reminder')
        self.assertEqual(reminder.send_at, self.parade.start_time - timedelta(minutes=10))
        self.assertFalse(reminder.sent)

    def test_no_reminder_when_notifications_disallowed(self):
        self.user.allow_notifications = False
        self.user.save()

        self.make_planner(show_ids=[self.parade.pk])

        self.assertFalse(Notification.objects.filter(show=self.parade).exists())

    def test_no_reminder_when_show_starts_too_soon(self):
        self.parade.start_time = NOW + timedelta(minutes=5)
        self.parade.end_time = NOW + timedelta(minutes=50)
        self.parade.save()

        self.make_planner(show_ids=[self.parade.pk])

        self.assertFalse(Notification.objects.filter(show=self.parade).exists())

    def test_update_merges_existing_items(self):
        planner = self.make_planner(attraction_ids=[self.coaster.pk])

        updated = PlannerService.update(
            planner.pk, self.user, {'attraction_ids': [self.carousel.pk]}, now=NOW
        )

        self.assertEqual(
            set(updated.attractions.values_list('pk', flat=True)),
            {self.coaster.pk, self.carousel.pk}
        )

    def test_update_drops_items_removed_from_ticket_type(self):
        planner = self.make_planner(attraction_ids=[self.coaster.pk, self.carousel.pk])
        TicketTypeAttraction.objects.filter(attraction=self.carousel).delete()

        updated = PlannerService.update(planner.pk, self.user, {'title': 'Renamed'}, now=NOW)

        self.assertEqual(updated.title, 'Renamed')
        self.assertEqual(list(updated.attractions.values_list('pk', flat=True)), [self.coaster.pk])

    def test_update_filters_requested_items(self):
        planner = self.make_planner()

        updated = PlannerService.update(
            planner.pk, self.user, {'attraction_ids': [self.drop_tower.pk]}, now=NOW
        )

        self.assertFalse(updated.attractions.exists())

    def test_update_new_items_require_redeemed_ticket(self):
        planner = self.make_planner(attraction_ids=[self.coaster.pk])
        Ticket.objects.filter(pk=self.ticket.pk).update(status=Ticket.Status.EXPIRED)

        with self.assertRaises(TicketNotRedeemed):
            PlannerService.update(planner.pk, self.user, {'attraction_ids': [self.carousel.pk]}, now=NOW)

        # Resubmitting what is already there is not an addition
        updated = PlannerService.update(
            planner.pk, self.user, {'attraction_ids': [self.coaster.pk], 'title': 'Still here'}, now=NOW
        )
        self.assertEqual(updated.title, 'Still here')

    def test_update_schedules_reminders_only_for_new_shows(self):
        planner = self.make_planner(show_ids=[self.parade.pk])
        TicketTypeShow.objects.create(ticket_type=self.ticket_type, show=self.night_show)

        PlannerService.update(
            planner.pk, self.user, {'show_ids': [self.parade.pk, self.night_show.pk]}, now=NOW
        )

        self.assertEqual(Notification.objects.filter(show=self.parade).count(), 1)
        self.assertEqual(Notification.objects.filter(show=self.night_show).count(), 1)

    def test_get_reports_elapsed_ticket_as_expired(self):
        planner = self.make_planner()
        Ticket.objects.filter(pk=self.ticket.pk).update(
            status=Ticket.Status.ACTIVE,
            valid_for=NOW.date() - timedelta(days=1),
        )

        fetched = PlannerService.get(planner.pk, self.user, now=NOW)

        self.assertEqual(fetched.ticket.status, Ticket.Status.EXPIRED)
        self.assertEqual(PlannerSerializer(fetched).data['ticket_status'], 'EXPIRED')
        self.ticket.refresh_from_db()
        self.assertEqual(self.ticket.status, Ticket.Status.EXPIRED)

    def test_list_reports_elapsed_ticket_as_expired(self):
        self.make_planner()
        Ticket.objects.filter(pk=self.ticket.pk).update(
            status=Ticket.Status.ACTIVE,
            valid_for=NOW.date() - timedelta(days=1),
        )

        planners = list(PlannerService.list_for_user(self.user, now=NOW))

        self.assertEqual(planners[0].ticket.status, Ticket.Status.EXPIRED)

    def test_other_users_planner_is_not_found(self):
        planner = self.make_planner()

        with self.assertRaises(PlannerNotFound):
            PlannerService.get(planner.pk, self.other_user)

        with self.assertRaises(PlannerNotFound):
            PlannerService.update(planner.pk, self.other_user, {'title': 'Mine now'}, now=NOW)

    def test_add_item(self):
        planner = self.make_planner()

        updated = PlannerService.add_item(planner.pk, self.user, 'attraction', self.coaster.pk, now=NOW)

        self.assertEqual(list(updated.attractions.values_list('pk', flat=True)), [self.coaster.pk])

    def test_add_item_twice_is_harmless(self):
        planner = self.make_planner()

        PlannerService.add_item(planner.pk, self.user, 'show', self.parade.pk, now=NOW)
        updated = PlannerService.add_item(planner.pk, self.user, 'show', self.parade.pk, now=NOW)

        self.assertEqual(updated.shows.count(), 1)
        self.assertEqual(Notification.objects.filter(show=self.parade).count(), 1)

    def test_add_item_not_in_ticket_type(self):
        planner = self.make_planner()

        with self.assertRaises(ItemNotEligible):
            PlannerService.add_item(planner.pk, self.user, 'attraction', self.drop_tower.pk, now=NOW)

    def test_add_unknown_item(self):
        planner = self.make_planner()

        with self.assertRaises(CatalogItemNotFound):
            PlannerService.add_item(planner.pk, self.user, 'service', 9999, now=NOW)

    def test_add_item_requires_redeemed_ticket(self):
        planner = self.make_planner()
        Ticket.objects.filter(pk=self.ticket.pk).update(status=Ticket.Status.ACTIVE)

        with self.assertRaises(TicketNotRedeemed):
            PlannerService.add_item(planner.pk, self.user, 'attraction', self.coaster.pk, now=NOW)

    def test_delete(self):
        planner = self.make_planner()

        PlannerService.delete(planner.pk, self.user)

        self.assertFalse(Planner.objects.filter(pk=planner.pk).exists())


class BookingServiceTestCase(PlannerFixtureMixin, TestCase):
    """Test cases for BookingService"""

    def setUp(self):
        super().setUp()
        self.planner = self.make_planner()
        self.booking_time = NOW + timedelta(hours=3)

    def test_create_attaches_service_and_schedules_reminder(self):
        booking = BookingService.create(
            self.user, self.planner.pk, self.locker.pk, self.booking_time,
            number_of_people=3, special_requests='  near the exit  ', now=NOW
        )

        self.assertEqual(booking.number_of_people, 3)
        self.assertEqual(booking.special_requests, 'near the exit')
        self.assertTrue(self.planner.services.filter(pk=self.locker.pk).exists())

        reminder = Notification.objects.get(service_booking=booking)
        self.assertEqual(reminder.title, 'Service Reminder')
        self.assertEqual(reminder.send_at, self.booking_time - timedelta(minutes=10))

    def test_create_rejects_service_not_in_ticket_type(self):
        with self.assertRaises(ItemNotEligible):
            BookingService.create(self.user, self.planner.pk, self.fast_lane.pk, self.booking_time, now=NOW)

        self.assertFalse(ServiceBooking.objects.exists())

    def test_create_without_reminder_when_too_late(self):
        booking = BookingService.create(
            self.user, self.planner.pk, self.locker.pk, NOW + timedelta(minutes=5), now=NOW
        )

        self.assertFalse(Notification.objects.filter(service_booking=booking).exists())

    def test_create_on_other_users_planner(self):
        with self.assertRaises(PlannerNotFound):
            BookingService.create(self.other_user, self.planner.pk, self.locker.pk, self.booking_time, now=NOW)

    def test_update_time_reschedules_reminder(self):
        booking = BookingService.create(self.user, self.planner.pk, self.locker.pk, self.booking_time, now=NOW)
        later = self.booking_time + timedelta(hours=2)

        BookingService.update(booking.pk, self.user, {'booking_time': later}, now=NOW)

        reminders = Notification.objects.filter(service_booking=booking)
        self.assertEqual(reminders.count(), 1)
        self.assertEqual(reminders.get().send_at, later - timedelta(minutes=10))

    def test_other_users_booking_is_not_found(self):
        booking = BookingService.create(self.user, self.planner.pk, self.locker.pk, self.booking_time, now=NOW)

        with self.assertRaises(BookingNotFound):
            BookingService.get(booking.pk, self.other_user)

    def test_delete(self):
        booking = BookingService.create(self.user, self.planner.pk, self.locker.pk, self.booking_time, now=NOW)

        BookingService.delete(booking.pk, self.user)

        self.assertFalse(ServiceBooking.objects.filter(pk=booking.pk).exists())


class PlannerViewsTestCase(PlannerFixtureMixin, APITestCase):
    """Test cases for planner endpoints"""

    def test_create_planner(self):
        response = self.client.post(
            '/api/planners/',
            {
                'title': 'Day at the park',
                'ticket_id': self.ticket.pk,
                'date': timezone.now().isoformat(),
                'attraction_ids': [self.coaster.pk, self.drop_tower.pk],
            },
            format='json',
            **auth_headers(self.user)
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual([a['id'] for a in response.data['attractions']], [self.coaster.pk])
        self.assertEqual(response.data['ticket_status'], 'USED')

    def test_create_planner_on_unredeemed_ticket(self):
        active_ticket = self.make_ticket(self.user, Ticket.Status.ACTIVE)

        response = self.client.post(
            '/api/planners/',
            {'title': 'Too early', 'ticket_id': active_ticket.pk, 'date': timezone.now().isoformat()},
            format='json',
            **auth_headers(self.user)
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'TICKET_NOT_REDEEMED')

    def test_add_attraction_endpoint(self):
        planner = self.make_planner()

        response = self.client.patch(
            f'/api/planners/{planner.pk}/add-attraction/',
            {'item_id': self.carousel.pk},
            format='json',
            **auth_headers(self.user)
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([a['id'] for a in response.data['attractions']], [self.carousel.pk])

    def test_add_ineligible_service_endpoint(self):
        planner = self.make_planner()

        response = self.client.patch(
            f'/api/planners/{planner.pk}/add-service/',
            {'item_id': self.fast_lane.pk},
            format='json',
            **auth_headers(self.user)
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'ITEM_NOT_ELIGIBLE')

    def test_other_users_planner_returns_404(self):
        planner = self.make_planner()

        response = self.client.get(f'/api/planners/{planner.pk}/', **auth_headers(self.other_user))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_book_service(self):
        planner = self.make_planner()

        response = self.client.post(
            '/api/service-bookings/',
            {
                'planner_id': planner.pk,
                'service_id': self.locker.pk,
                'booking_time': (timezone.now() + timedelta(hours=2)).isoformat(),
            },
            format='json',
            **auth_headers(self.user)
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['service']['id'], self.locker.pk)
        self.assertEqual(response.data['number_of_people'], 1)
