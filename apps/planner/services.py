import logging

from django.db import transaction
from django.utils import timezone

from apps.catalog.models import Show, Service
from apps.catalog.services import CatalogService
from apps.notifications.models import Notification
from apps.notifications.services import NotificationService
from apps.tickets.models import Ticket
from apps.tickets.services import TicketService
from core.errors import (
    BookingNotFound,
    ItemNotEligible,
    PermissionDenied,
    PlannerNotFound,
    TicketNotFound,
    TicketNotRedeemed,
)

from .eligibility import Whitelist, select_eligible
from .models import Planner, ServiceBooking

logger = logging.getLogger(__name__)


def _current_ids(planner):
    return {
        'attraction': list(planner.attractions.values_list('pk', flat=True)),
        'show': list(planner.shows.values_list('pk', flat=True)),
        'service': list(planner.services.values_list('pk', flat=True)),
    }


class PlannerService:
    """
    Service for planners. Every mutation goes through the ticket type
    whitelist, and adding items needs a redeemed (USED) ticket.
    """

    @staticmethod
    def _queryset():
        return Planner.objects.select_related('ticket', 'ticket__ticket_type').prefetch_related(
            'attractions', 'shows', 'services'
        )

    @staticmethod
    def get(planner_id, user, now=None):
        try:
            planner = PlannerService._queryset().get(pk=planner_id)
        except Planner.DoesNotExist:
            raise PlannerNotFound()

        # Other users' planners are reported as missing
        if planner.user_id != user.pk:
            raise PlannerNotFound()

        TicketService.refresh_status(planner.ticket, now)
        return planner

    @staticmethod
    def list_for_user(user, now=None):
        TicketService.expire_elapsed_for_user(user, now)
        return PlannerService._queryset().filter(user=user).order_by('-created_at')

    @staticmethod
    def _get_owned_ticket(ticket_id, user):
        try:
            ticket = Ticket.objects.get(pk=ticket_id)
        except Ticket.DoesNotExist:
            raise TicketNotFound()

        if ticket.user_id != user.pk:
            raise PermissionDenied()

        return ticket

    @staticmethod
    def _require_redeemed(ticket):
        if ticket.status != Ticket.Status.USED:
            raise TicketNotRedeemed()

    @staticmethod
    def _schedule_show_reminders(user, show_ids, now):
        for show in Show.objects.filter(pk__in=show_ids):
            NotificationService.schedule_show_reminder(user, show, now)

    @staticmethod
    @transaction.atomic
    def create(user, ticket_id, title, date, description='',
               attraction_ids=(), show_ids=(), service_ids=(), now=None):
        """
        Create a planner on one of the user's redeemed tickets. Requested
        items outside the ticket type whitelist are dropped.
        """
        now = now or timezone.now()
        ticket = PlannerService._get_owned_ticket(ticket_id, user)
        PlannerService._require_redeemed(ticket)

        whitelist = Whitelist.for_ticket_type(ticket.ticket_type_id)
        selection = select_eligible(whitelist, attraction_ids, show_ids, service_ids)

        planner = Planner.objects.create(
            user=user,
            ticket=ticket,
            title=title,
            description=description,
            date=date,
        )
        planner.attractions.set(selection.attraction_ids)
        planner.shows.set(selection.show_ids)
        planner.services.set(selection.service_ids)

        PlannerService._schedule_show_reminders(user, selection.show_ids, now)

        logger.info("Created planner %s on ticket %s for user %s", planner.pk, ticket.pk, user.pk)
        return PlannerService.get(planner.pk, user, now)

    @staticmethod
    @transaction.atomic
    def update(planner_id, user, data, now=None):
        """
        Update a planner. Requested item ids are merged with the ones already
        attached and the union is filtered again: items not resubmitted are
        kept, items no longer whitelisted are dropped.
        """
        now = now or timezone.now()
        planner = PlannerService.get(planner_id, user, now)

        current = _current_ids(planner)
        requested = {
            kind: list(data.get(f'{kind}_ids') or [])
            for kind in Whitelist.KINDS
        }

        adds_items = any(
            item_id not in current[kind]
            for kind in Whitelist.KINDS
            for item_id in requested[kind]
        )
        if adds_items:
            PlannerService._require_redeemed(planner.ticket)

        whitelist = Whitelist.for_ticket_type(planner.ticket.ticket_type_id)
        selection = select_eligible(
            whitelist,
            attraction_ids=current['attraction'] + requested['attraction'],
            show_ids=current['show'] + requested['show'],
            service_ids=current['service'] + requested['service'],
        )

        for field in ('title', 'description', 'date'):
            if field in data:
                setattr(planner, field, data[field])
        planner.save()

        planner.attractions.set(selection.attraction_ids)
        planner.shows.set(selection.show_ids)
        planner.services.set(selection.service_ids)

        new_show_ids = [pk for pk in selection.show_ids if pk not in current['show']]
        PlannerService._schedule_show_reminders(user, new_show_ids, now)

        logger.info("Updated planner %s", planner.pk)
        return PlannerService.get(planner.pk, user, now)

    @staticmethod
    @transaction.atomic
    def add_item(planner_id, user, kind, item_id, now=None):
        """
        Attach one attraction, show or service. Unlike create and update,
        an item outside the whitelist is an error here.
        """
        now = now or timezone.now()
        planner = PlannerService.get(planner_id, user, now)

        _, item_model, _ = CatalogService.LINKS[kind]
        item = CatalogService.get_item(item_model, item_id)

        PlannerService._require_redeemed(planner.ticket)

        whitelist = Whitelist.for_ticket_type(planner.ticket.ticket_type_id)
        if not whitelist.allows(kind, item.pk):
            raise ItemNotEligible(f"This {kind} is not included in the ticket type")

        related = getattr(planner, f'{kind}s')
        already_attached = related.filter(pk=item.pk).exists()

        if not already_attached:
            related.add(item)
            if kind == 'show':
                NotificationService.schedule_show_reminder(user, item, now)
            logger.info("Added %s %s to planner %s", kind, item.pk, planner.pk)

        return PlannerService.get(planner.pk, user, now)

    @staticmethod
    def delete(planner_id, user):
        planner = PlannerService.get(planner_id, user)
        planner.delete()
        logger.info("Deleted planner %s of user %s", planner_id, user.pk)


class BookingService:
    """
    Service for service bookings made from a planner
    """

    @staticmethod
    def get(booking_id, user):
        try:
            booking = ServiceBooking.objects.select_related('service', 'planner').get(pk=booking_id)
        except ServiceBooking.DoesNotExist:
            raise BookingNotFound()

        if booking.user_id != user.pk:
            raise BookingNotFound()

        return booking

    @staticmethod
    def list_for_user(user):
        return ServiceBooking.objects.filter(user=user).select_related('service', 'planner')

    @staticmethod
    @transaction.atomic
    def create(user, planner_id, service_id, booking_time,
               number_of_people=1, special_requests=None, now=None):
        """
        Book a service from a planner. The service must be in the planner's
        ticket type whitelist and is attached to the planner if missing.
        """
        now = now or timezone.now()
        planner = PlannerService.get(planner_id, user, now)
        service = CatalogService.get_item(Service, service_id)

        whitelist = Whitelist.for_ticket_type(planner.ticket.ticket_type_id)
        if not whitelist.allows('service', service.pk):
            raise ItemNotEligible("This service is not included in the ticket type")

        if not planner.services.filter(pk=service.pk).exists():
            PlannerService._require_redeemed(planner.ticket)
            planner.services.add(service)

        booking = ServiceBooking.objects.create(
            user=user,
            planner=planner,
            service=service,
            booking_time=booking_time,
            number_of_people=number_of_people or 1,
            special_requests=(special_requests or '').strip() or None,
        )

        NotificationService.schedule_booking_reminder(booking, now)

        logger.info("User %s booked service %s at %s", user.pk, service.pk, booking_time)
        return booking

    @staticmethod
    @transaction.atomic
    def update(booking_id, user, data, now=None):
        """
        Update time, party size or requests. A new time replaces the pending
        reminder.
        """
        now = now or timezone.now()
        booking = BookingService.get(booking_id, user)

        if 'number_of_people' in data:
            booking.number_of_people = data['number_of_people']
        if 'special_requests' in data:
            booking.special_requests = (data['special_requests'] or '').strip() or None

        time_changed = 'booking_time' in data and data['booking_time'] != booking.booking_time
        if time_changed:
            booking.booking_time = data['booking_time']

        booking.save()

        if time_changed:
            Notification.objects.filter(service_booking=booking, sent=False).delete()
            NotificationService.schedule_booking_reminder(booking, now)

        return booking

    @staticmethod
    def delete(booking_id, user):
        booking = BookingService.get(booking_id, user)
        booking.delete()
        logger.info("Deleted booking %s of user %s", booking_id, user.pk)
