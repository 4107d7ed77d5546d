"""
Tests for ticket validity, lifecycle, redemption and expiry
"""
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from io import StringIO
from unittest.mock import patch, MagicMock

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import SimpleTestCase, TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APITestCase
from rest_framework_simplejwt.tokens import RefreshToken

from apps.catalog.models import TicketType, Discount
from core.errors import (
    AlreadyUsed,
    CatalogItemNotFound,
    InvalidStatus,
    PermissionDenied,
    TicketNotFound,
    TicketTypeNotFound,
    ValidityInPast,
    WrongDay,
)

from . import lifecycle, validity
from .models import Ticket
from .scheduler import expire_tickets_job, dispatch_notifications_job, start_scheduler
from .services import TicketService

User = get_user_model()

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=dt_timezone.utc)
TODAY = NOW.date()
YESTERDAY = TODAY - timedelta(days=1)
TOMORROW = TODAY + timedelta(days=1)


def make_ticket(user, ticket_type, valid_for, status=Ticket.Status.ACTIVE):
    raw_code = Ticket.generate_raw_code(user.pk, ticket_type.pk)
    return Ticket.objects.create(
        user=user,
        ticket_type=ticket_type,
        raw_code=raw_code,
        qr_code='data:image/png;base64,',
        valid_for=valid_for,
        status=status,
    )


def auth_headers(user):
    refresh = RefreshToken.for_user(user)
    return {'HTTP_AUTHORIZATION': f'Bearer {refresh.access_token}'}


class ValidityTestCase(SimpleTestCase):
    """Test cases for validity-day arithmetic"""

    def test_window_covers_whole_utc_day(self):
        start, end = validity.window_for(date(2026, 3, 10))

        self.assertEqual(start, datetime(2026, 3, 10, 0, 0, tzinfo=dt_timezone.utc))
        self.assertEqual(end, datetime(2026, 3, 10, 23, 59, 59, 999999, tzinfo=dt_timezone.utc))

    def test_window_accepts_iso_string(self):
        self.assertEqual(validity.window_for('2026-03-10'), validity.window_for(date(2026, 3, 10)))

    def test_parse_rejects_garbage(self):
        with self.assertRaises(ValueError):
            validity.parse_validity_date('10/03/2026')

    def test_today_uses_utc(self):
        late_evening_in_new_york = datetime(2026, 3, 10, 23, 30, tzinfo=dt_timezone(timedelta(hours=-5)))
        self.assertEqual(validity.today(late_evening_in_new_york), date(2026, 3, 11))

    def test_ensure_not_in_past_accepts_today_until_last_instant(self):
        last_instant = datetime.combine(TODAY, time.max, tzinfo=dt_timezone.utc)
        self.assertEqual(validity.ensure_not_in_past(TODAY, last_instant), TODAY)

    def test_ensure_not_in_past_accepts_future(self):
        self.assertEqual(validity.ensure_not_in_past('2026-03-11', NOW), TOMORROW)

    def test_ensure_not_in_past_rejects_yesterday(self):
        with self.assertRaises(ValidityInPast):
            validity.ensure_not_in_past(YESTERDAY, NOW)

    def test_yesterday_rejected_just_after_midnight(self):
        just_after_midnight = datetime(2026, 3, 10, 0, 0, 0, 1, tzinfo=dt_timezone.utc)
        with self.assertRaises(ValidityInPast):
            validity.ensure_not_in_past(YESTERDAY, just_after_midnight)

    def test_phase_boundaries(self):
        start, end = validity.window_for(TODAY)

        self.assertEqual(validity.phase(TODAY, start - timedelta(microseconds=1)), validity.NOT_YET_VALID)
        self.assertEqual(validity.phase(TODAY, start), validity.CURRENT)
        self.assertEqual(validity.phase(TODAY, end), validity.CURRENT)
        self.assertEqual(validity.phase(TODAY, end + timedelta(microseconds=1)), validity.EXPIRED)

    def test_is_elapsed(self):
        self.assertTrue(validity.is_elapsed(YESTERDAY, NOW))
        self.assertFalse(validity.is_elapsed(TODAY, NOW))
        self.assertFalse(validity.is_elapsed(TOMORROW, NOW))


class LifecycleTestCase(SimpleTestCase):
    """Test cases for ticket status transitions"""

    def test_allowed_transitions(self):
        Status = Ticket.Status

        self.assertTrue(lifecycle.can_transition(Status.ACTIVE, Status.USED))
        self.assertTrue(lifecycle.can_transition(Status.ACTIVE, Status.EXPIRED))
        self.assertTrue(lifecycle.can_transition(Status.USED, Status.EXPIRED))
        self.assertFalse(lifecycle.can_transition(Status.USED, Status.ACTIVE))
        self.assertFalse(lifecycle.can_transition(Status.EXPIRED, Status.ACTIVE))
        self.assertFalse(lifecycle.can_transition(Status.EXPIRED, Status.USED))

    def test_initial_status_is_active(self):
        self.assertEqual(lifecycle.initial_status(TODAY, NOW), Ticket.Status.ACTIVE)
        self.assertEqual(lifecycle.initial_status(TOMORROW, NOW), Ticket.Status.ACTIVE)

    def test_initial_status_rejects_past_day(self):
        with self.assertRaises(ValidityInPast):
            lifecycle.initial_status(YESTERDAY, NOW)

    def test_observed_status(self):
        Status = Ticket.Status

        self.assertEqual(lifecycle.observed_status(Status.ACTIVE, YESTERDAY, NOW), Status.EXPIRED)
        self.assertEqual(lifecycle.observed_status(Status.ACTIVE, TODAY, NOW), Status.ACTIVE)
        # Only the sweep moves USED tickets
        self.assertEqual(lifecycle.observed_status(Status.USED, YESTERDAY, NOW), Status.USED)


class TicketServiceTestCase(TestCase):
    """Test cases for TicketService"""

    def setUp(self):
        self.user = User.objects.create_user(email='visitor@park.test', password='secret-pass-1')
        self.other_user = User.objects.create_user(email='other@park.test', password='secret-pass-1')
        self.staff = User.objects.create_staff(email='staff@park.test', password='secret-pass-1')
        self.ticket_type = TicketType.objects.create(name='Standard', price='39.90')

    def test_issue_creates_active_ticket_with_qr(self):
        ticket = TicketService.issue(self.user, self.ticket_type.pk, TOMORROW, now=NOW)

        self.assertEqual(ticket.status, Ticket.Status.ACTIVE)
        self.assertEqual(ticket.valid_for, TOMORROW)
        self.assertTrue(ticket.raw_code.startswith(f'TICKET-{self.user.pk}-{self.ticket_type.pk}-'))
        self.assertTrue(ticket.qr_code.startswith('data:image/png;base64,'))

    def test_issue_accepts_today_and_string_dates(self):
        ticket = TicketService.issue(self.user, self.ticket_type.pk, TODAY.isoformat(), now=NOW)
        self.assertEqual(ticket.valid_for, TODAY)

    def test_issue_rejects_past_day(self):
        with self.assertRaises(ValidityInPast):
            TicketService.issue(self.user, self.ticket_type.pk, YESTERDAY, now=NOW)

        self.assertFalse(Ticket.objects.exists())

    def test_issue_unknown_ticket_type(self):
        with self.assertRaises(TicketTypeNotFound):
            TicketService.issue(self.user, 9999, TODAY, now=NOW)

    def test_issue_unknown_discount(self):
        with self.assertRaises(CatalogItemNotFound):
            TicketService.issue(self.user, self.ticket_type.pk, TODAY, discount_id=9999, now=NOW)

    def test_issue_with_discount(self):
        discount = Discount.objects.create(name='Student', percentage='15.00')
        ticket = TicketService.issue(self.user, self.ticket_type.pk, TODAY, discount_id=discount.pk, now=NOW)
        self.assertEqual(ticket.discount, discount)

    def test_raw_codes_are_unique(self):
        first = TicketService.issue(self.user, self.ticket_type.pk, TODAY, now=NOW)
        second = TicketService.issue(self.user, self.ticket_type.pk, TODAY, now=NOW)
        self.assertNotEqual(first.raw_code, second.raw_code)

    def test_redeem_on_valid_day(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY)

        redeemed = TicketService.redeem(ticket.raw_code, self.staff, now=NOW)

        self.assertEqual(redeemed.status, Ticket.Status.USED)
        self.assertEqual(redeemed.redeemed_by, self.staff)
        self.assertEqual(redeemed.redeemed_at, NOW)

    def test_redeem_twice_fails_with_already_used(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY)
        TicketService.redeem(ticket.raw_code, self.staff, now=NOW)

        with self.assertRaises(AlreadyUsed):
            TicketService.redeem(ticket.raw_code, self.staff, now=NOW)

    def test_redeem_before_valid_day_fails_with_wrong_day(self):
        ticket = make_ticket(self.user, self.ticket_type, TOMORROW)

        with self.assertRaises(WrongDay):
            TicketService.redeem(ticket.raw_code, self.staff, now=NOW)

        ticket.refresh_from_db()
        self.assertEqual(ticket.status, Ticket.Status.ACTIVE)

    def test_redeem_after_valid_day_fails_with_wrong_day(self):
        # Not swept yet, still ACTIVE
        ticket = make_ticket(self.user, self.ticket_type, YESTERDAY)

        with self.assertRaises(WrongDay):
            TicketService.redeem(ticket.raw_code, self.staff, now=NOW)

    def test_redeem_expired_ticket_fails_with_invalid_status(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY, status=Ticket.Status.EXPIRED)

        with self.assertRaises(InvalidStatus):
            TicketService.redeem(ticket.raw_code, self.staff, now=NOW)

    def test_redeem_unknown_code(self):
        with self.assertRaises(TicketNotFound):
            TicketService.redeem('TICKET-NOPE', self.staff, now=NOW)

    def test_redeem_requires_staff(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY)

        with self.assertRaises(PermissionDenied):
            TicketService.redeem(ticket.raw_code, self.user, now=NOW)

        ticket.refresh_from_db()
        self.assertEqual(ticket.status, Ticket.Status.ACTIVE)

    def test_concurrent_redemption_only_one_succeeds(self):
        """A request that read the ticket before another redeemed it must fail"""
        ticket = make_ticket(self.user, self.ticket_type, TODAY)
        stale = Ticket.objects.get(pk=ticket.pk)
        second_staff = User.objects.create_staff(email='staff2@park.test', password='secret-pass-1')

        TicketService.redeem(ticket.raw_code, self.staff, now=NOW)

        with patch.object(TicketService, '_get_by_code', return_value=stale):
            with self.assertRaises(AlreadyUsed):
                TicketService.redeem(ticket.raw_code, second_staff, now=NOW)

        ticket.refresh_from_db()
        self.assertEqual(ticket.status, Ticket.Status.USED)
        self.assertEqual(ticket.redeemed_by, self.staff)

    def test_redemption_racing_expiry_fails_with_invalid_status(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY)
        stale = Ticket.objects.get(pk=ticket.pk)
        Ticket.objects.filter(pk=ticket.pk).update(status=Ticket.Status.EXPIRED)

        with patch.object(TicketService, '_get_by_code', return_value=stale):
            with self.assertRaises(InvalidStatus):
                TicketService.redeem(ticket.raw_code, self.staff, now=NOW)

    def test_sweep_expires_elapsed_active_and_used(self):
        elapsed_active = make_ticket(self.user, self.ticket_type, YESTERDAY)
        elapsed_used = make_ticket(self.user, self.ticket_type, YESTERDAY, status=Ticket.Status.USED)
        current = make_ticket(self.user, self.ticket_type, TODAY)
        future = make_ticket(self.user, self.ticket_type, TOMORROW)

        count = TicketService.run_expiry_sweep(NOW)

        self.assertEqual(count, 2)
        for ticket, expected in [
            (elapsed_active, Ticket.Status.EXPIRED),
            (elapsed_used, Ticket.Status.EXPIRED),
            (current, Ticket.Status.ACTIVE),
            (future, Ticket.Status.ACTIVE),
        ]:
            ticket.refresh_from_db()
            self.assertEqual(ticket.status, expected)

    def test_sweep_is_idempotent(self):
        make_ticket(self.user, self.ticket_type, YESTERDAY)

        self.assertEqual(TicketService.run_expiry_sweep(NOW), 1)
        self.assertEqual(TicketService.run_expiry_sweep(NOW), 0)
        self.assertEqual(TicketService.run_expiry_sweep(NOW + timedelta(hours=6)), 0)

    def test_sweep_leaves_day_alone_until_it_is_over(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY)
        last_instant = datetime.combine(TODAY, time.max, tzinfo=dt_timezone.utc)

        self.assertEqual(TicketService.run_expiry_sweep(last_instant), 0)
        self.assertEqual(TicketService.run_expiry_sweep(last_instant + timedelta(microseconds=1)), 1)

        ticket.refresh_from_db()
        self.assertEqual(ticket.status, Ticket.Status.EXPIRED)

    def test_get_expires_elapsed_ticket_lazily(self):
        ticket = make_ticket(self.user, self.ticket_type, YESTERDAY)

        fetched = TicketService.get(ticket.pk, self.user, now=NOW)

        self.assertEqual(fetched.status, Ticket.Status.EXPIRED)
        ticket.refresh_from_db()
        self.assertEqual(ticket.status, Ticket.Status.EXPIRED)

    def test_lazy_refresh_keeps_used_ticket(self):
        ticket = make_ticket(self.user, self.ticket_type, YESTERDAY, status=Ticket.Status.USED)

        fetched = TicketService.get(ticket.pk, self.user, now=NOW)

        self.assertEqual(fetched.status, Ticket.Status.USED)

    def test_list_expires_only_own_elapsed_tickets(self):
        mine = make_ticket(self.user, self.ticket_type, YESTERDAY)
        theirs = make_ticket(self.other_user, self.ticket_type, YESTERDAY)

        tickets = list(TicketService.list_for_user(self.user, now=NOW))

        self.assertEqual([t.pk for t in tickets], [mine.pk])
        self.assertEqual(tickets[0].status, Ticket.Status.EXPIRED)
        theirs.refresh_from_db()
        self.assertEqual(theirs.status, Ticket.Status.ACTIVE)

    def test_get_other_users_ticket_denied(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY)

        with self.assertRaises(PermissionDenied):
            TicketService.get(ticket.pk, self.other_user, now=NOW)

    def test_staff_can_get_any_ticket_by_code(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY)

        fetched = TicketService.get_by_code(ticket.raw_code, self.staff, now=NOW)

        self.assertEqual(fetched.pk, ticket.pk)

    def test_update_requires_staff(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY)

        with self.assertRaises(PermissionDenied):
            TicketService.update(ticket.pk, self.user, {'valid_for': TOMORROW}, now=NOW)

    def test_update_rejects_past_validity(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY)

        with self.assertRaises(ValidityInPast):
            TicketService.update(ticket.pk, self.staff, {'valid_for': YESTERDAY}, now=NOW)

        ticket.refresh_from_db()
        self.assertEqual(ticket.valid_for, TODAY)

    def test_update_validity_keeps_status(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY, status=Ticket.Status.EXPIRED)

        updated = TicketService.update(ticket.pk, self.staff, {'valid_for': TOMORROW}, now=NOW)

        self.assertEqual(updated.valid_for, TOMORROW)
        self.assertEqual(updated.status, Ticket.Status.EXPIRED)

    def test_update_expires_elapsed_active_ticket(self):
        ticket = make_ticket(self.user, self.ticket_type, YESTERDAY)

        updated = TicketService.update(ticket.pk, self.staff, {'payment_method': 'PAYPAL'}, now=NOW)

        self.assertEqual(updated.status, Ticket.Status.EXPIRED)
        self.assertEqual(updated.payment_method, 'PAYPAL')
        ticket.refresh_from_db()
        self.assertEqual(ticket.status, Ticket.Status.EXPIRED)

    def test_update_moving_validity_forward_keeps_ticket_active(self):
        ticket = make_ticket(self.user, self.ticket_type, YESTERDAY)

        updated = TicketService.update(ticket.pk, self.staff, {'valid_for': TOMORROW}, now=NOW)

        self.assertEqual(updated.status, Ticket.Status.ACTIVE)

    def test_update_status_override(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY, status=Ticket.Status.EXPIRED)

        updated = TicketService.update(
            ticket.pk, self.staff, {'status': Ticket.Status.ACTIVE}, now=NOW
        )

        self.assertEqual(updated.status, Ticket.Status.ACTIVE)

    def test_update_unknown_ticket_type(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY)

        with self.assertRaises(TicketTypeNotFound):
            TicketService.update(ticket.pk, self.staff, {'ticket_type_id': 9999}, now=NOW)

    def test_delete_only_by_owner(self):
        ticket = make_ticket(self.user, self.ticket_type, TODAY)

        with self.assertRaises(PermissionDenied):
            TicketService.delete(ticket.pk, self.other_user)

        TicketService.delete(ticket.pk, self.user)
        self.assertFalse(Ticket.objects.filter(pk=ticket.pk).exists())


class TicketViewsTestCase(APITestCase):
    """Test cases for ticket endpoints"""

    def setUp(self):
        self.user = User.objects.create_user(email='visitor@park.test', password='secret-pass-1')
        self.other_user = User.objects.create_user(email='other@park.test', password='secret-pass-1')
        self.staff = User.objects.create_staff(email='staff@park.test', password='secret-pass-1')
        self.ticket_type = TicketType.objects.create(name='Standard', price='39.90')
        self.today = timezone.now().date()
        self.url = '/api/tickets/'

    def test_issue_ignores_client_status(self):
        response = self.client.post(
            self.url,
            {
                'ticket_type_id': self.ticket_type.pk,
                'valid_for': self.today.isoformat(),
                'status': 'USED',
                'payment_method': 'PAYPAL',
            },
            format='json',
            **auth_headers(self.user)
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'ACTIVE')
        self.assertEqual(response.data['payment_method'], 'PAYPAL')
        self.assertEqual(response.data['ticket_type_name'], 'Standard')

    def test_issue_past_date(self):
        response = self.client.post(
            self.url,
            {
                'ticket_type_id': self.ticket_type.pk,
                'valid_for': (self.today - timedelta(days=1)).isoformat(),
            },
            format='json',
            **auth_headers(self.user)
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'VALIDITY_IN_PAST')

    def test_issue_unknown_ticket_type(self):
        response = self.client.post(
            self.url,
            {'ticket_type_id': 9999, 'valid_for': self.today.isoformat()},
            format='json',
            **auth_headers(self.user)
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['code'], 'TICKET_TYPE_NOT_FOUND')

    def test_issue_requires_authentication(self):
        response = self.client.post(
            self.url,
            {'ticket_type_id': self.ticket_type.pk, 'valid_for': self.today.isoformat()},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_own_tickets(self):
        mine = make_ticket(self.user, self.ticket_type, self.today)
        make_ticket(self.other_user, self.ticket_type, self.today)

        response = self.client.get(self.url, **auth_headers(self.user))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([t['id'] for t in response.data], [mine.pk])

    def test_detail_of_other_user_forbidden(self):
        ticket = make_ticket(self.user, self.ticket_type, self.today)

        response = self.client.get(f'{self.url}{ticket.pk}/', **auth_headers(self.other_user))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['code'], 'PERMISSION_DENIED')

    def test_validate_then_validate_again(self):
        ticket = make_ticket(self.user, self.ticket_type, self.today)
        url = f'{self.url}validate/'

        first = self.client.post(url, {'raw_code': ticket.raw_code}, format='json', **auth_headers(self.staff))
        second = self.client.post(url, {'raw_code': ticket.raw_code}, format='json', **auth_headers(self.staff))

        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data['ticket']['status'], 'USED')
        self.assertEqual(second.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(second.data['code'], 'ALREADY_USED')

    def test_validate_wrong_day(self):
        ticket = make_ticket(self.user, self.ticket_type, self.today + timedelta(days=1))

        response = self.client.post(
            f'{self.url}validate/',
            {'raw_code': ticket.raw_code},
            format='json',
            **auth_headers(self.staff)
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['code'], 'WRONG_DAY')

    def test_validate_requires_staff(self):
        ticket = make_ticket(self.user, self.ticket_type, self.today)

        response = self.client.post(
            f'{self.url}validate/',
            {'raw_code': ticket.raw_code},
            format='json',
            **auth_headers(self.user)
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_validate_missing_code(self):
        response = self.client.post(f'{self.url}validate/', {}, format='json', **auth_headers(self.staff))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('raw_code', response.data)

    def test_get_by_code(self):
        ticket = make_ticket(self.user, self.ticket_type, self.today)

        response = self.client.get(f'{self.url}code/{ticket.raw_code}/', **auth_headers(self.user))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['id'], ticket.pk)

    def test_staff_update(self):
        ticket = make_ticket(self.user, self.ticket_type, self.today)
        tomorrow = self.today + timedelta(days=1)

        response = self.client.put(
            f'{self.url}{ticket.pk}/',
            {'valid_for': tomorrow.isoformat()},
            format='json',
            **auth_headers(self.staff)
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['valid_for'], tomorrow.isoformat())

    def test_owner_delete(self):
        ticket = make_ticket(self.user, self.ticket_type, self.today)

        response = self.client.delete(f'{self.url}{ticket.pk}/', **auth_headers(self.user))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Ticket.objects.filter(pk=ticket.pk).exists())


class SchedulerTestCase(TestCase):
    """Test cases for the background jobs"""

    def setUp(self):
        self.user = User.objects.create_user(email='visitor@park.test', password='secret-pass-1')
        self.ticket_type = TicketType.objects.create(name='Standard', price='39.90')

    def test_expire_tickets_job(self):
        yesterday = timezone.now().date() - timedelta(days=1)
        ticket = make_ticket(self.user, self.ticket_type, yesterday)

        self.assertEqual(expire_tickets_job(), 1)

        ticket.refresh_from_db()
        self.assertEqual(ticket.status, Ticket.Status.EXPIRED)

    @patch('apps.tickets.services.TicketService.run_expiry_sweep', side_effect=RuntimeError('database is locked'))
    def test_expire_tickets_job_failure_is_logged(self, mock_sweep):
        with self.assertLogs('apps.tickets.scheduler', level='ERROR') as logs:
            result = expire_tickets_job()

        self.assertIsNone(result)
        self.assertIn('Ticket expiry sweep failed', logs.output[0])

    @patch('apps.notifications.services.NotificationService.dispatch_due', side_effect=RuntimeError('boom'))
    def test_dispatch_job_failure_is_logged(self, mock_dispatch):
        with self.assertLogs('apps.tickets.scheduler', level='ERROR'):
            self.assertIsNone(dispatch_notifications_job())

    def test_start_scheduler_registers_jobs(self):
        with patch('apps.tickets.scheduler.BackgroundScheduler') as mock_scheduler_class:
            mock_scheduler = MagicMock()
            mock_scheduler_class.return_value = mock_scheduler

            with patch('apps.tickets.scheduler.DjangoJobStore'), patch('apps.tickets.scheduler.register_events'):
                start_scheduler()

        mock_scheduler.add_jobstore.assert_called_once()
        job_ids = [c.kwargs['id'] for c in mock_scheduler.add_job.call_args_list]
        self.assertEqual(job_ids, ['expire_tickets_job', 'dispatch_notifications_job'])
        for call in mock_scheduler.add_job.call_args_list:
            self.assertEqual(call.kwargs['max_instances'], 1)
            self.assertTrue(call.kwargs['coalesce'])
        mock_scheduler.start.assert_called_once()

    def test_expire_tickets_command(self):
        yesterday = timezone.now().date() - timedelta(days=1)
        ticket = make_ticket(self.user, self.ticket_type, yesterday)
        out = StringIO()

        call_command('expire_tickets', stdout=out)

        ticket.refresh_from_db()
        self.assertEqual(ticket.status, Ticket.Status.EXPIRED)
        self.assertIn('Expired 1 tickets', out.getvalue())
