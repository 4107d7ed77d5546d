import logging

from django.db import transaction
from django.utils import timezone

from apps.catalog.models import Discount
from apps.catalog.services import CatalogService
from core.errors import (
    AlreadyUsed,
    InvalidStatus,
    PermissionDenied,
    TicketNotFound,
    WrongDay,
)

from . import lifecycle, qr, validity
from .models import Ticket

logger = logging.getLogger(__name__)


class TicketService:
    """
    Service for ticket issuance, lookups, redemption and expiry
    """

    @staticmethod
    def _queryset():
        return Ticket.objects.select_related('ticket_type', 'discount')

    @staticmethod
    def _get(ticket_id):
        try:
            return TicketService._queryset().get(pk=ticket_id)
        except Ticket.DoesNotExist:
            raise TicketNotFound()

    @staticmethod
    def _get_by_code(raw_code):
        try:
            return TicketService._queryset().get(raw_code=raw_code)
        except Ticket.DoesNotExist:
            raise TicketNotFound()

    @staticmethod
    def _check_can_view(ticket, actor):
        if ticket.user_id != actor.pk and not actor.is_park_staff:
            raise PermissionDenied()

    @staticmethod
    @transaction.atomic
    def issue(user, ticket_type_id, valid_for, discount_id=None, payment_method=None, now=None):
        """
        Issue a ticket for ``valid_for``. New tickets are always ACTIVE,
        whatever status the client asked for.
        """
        valid_for = validity.parse_validity_date(valid_for)
        status = lifecycle.initial_status(valid_for, now)

        ticket_type = CatalogService.get_ticket_type(ticket_type_id)
        discount = CatalogService.get_item(Discount, discount_id) if discount_id else None

        raw_code = Ticket.generate_raw_code(user.pk, ticket_type.pk)

        ticket = Ticket.objects.create(
            user=user,
            ticket_type=ticket_type,
            discount=discount,
            raw_code=raw_code,
            qr_code=qr.ticket_qr(raw_code),
            valid_for=valid_for,
            status=status,
            payment_method=payment_method,
        )

        logger.info("Issued ticket %s to user %s for %s", ticket.raw_code, user.pk, valid_for)
        return ticket

    @staticmethod
    @transaction.atomic
    def update(ticket_id, actor, data, now=None):
        """
        Staff update. Keys missing from ``data`` are left untouched; an
        explicit ``status`` overrides the state machine.
        """
        if not actor.is_park_staff:
            raise PermissionDenied("Only staff can update tickets")

        ticket = TicketService._get(ticket_id)
        changed = []

        if 'ticket_type_id' in data:
            ticket.ticket_type = CatalogService.get_ticket_type(data['ticket_type_id'])
            changed.append('ticket_type')

        if 'discount_id' in data:
            discount_id = data['discount_id']
            ticket.discount = CatalogService.get_item(Discount, discount_id) if discount_id else None
            changed.append('discount')

        if 'payment_method' in data:
            ticket.payment_method = data['payment_method']
            changed.append('payment_method')

        if 'valid_for' in data:
            ticket.valid_for = validity.ensure_not_in_past(data['valid_for'], now)
            changed.append('valid_for')

        overridden = data.get('status') is not None
        if overridden:
            logger.warning(
                "Staff %s overrides status of ticket %s: %s -> %s",
                actor.pk, ticket.raw_code, ticket.status, data['status']
            )
            ticket.status = data['status']
            changed.append('status')

        if changed:
            ticket.save(update_fields=changed + ['updated_at'])

        if overridden:
            return ticket

        return TicketService.refresh_status(ticket, now)

    @staticmethod
    def delete(ticket_id, user):
        ticket = TicketService._get(ticket_id)

        if ticket.user_id != user.pk:
            raise PermissionDenied()

        ticket.delete()
        logger.info("Deleted ticket %s of user %s", ticket.raw_code, user.pk)
        return ticket

    @staticmethod
    def refresh_status(ticket, now=None):
        """
        Expire an ACTIVE ticket whose validity day is over. The write is
        conditional so a concurrent redemption is never overwritten.
        """
        now = now or timezone.now()
        observed = lifecycle.observed_status(ticket.status, ticket.valid_for, now)

        if observed == ticket.status:
            return ticket

        updated = Ticket.objects.filter(
            pk=ticket.pk,
            status=Ticket.Status.ACTIVE
        ).update(status=Ticket.Status.EXPIRED, updated_at=now)

        if updated:
            logger.info("Ticket %s expired on read", ticket.raw_code)
            ticket.status = Ticket.Status.EXPIRED
            ticket.updated_at = now
        else:
            ticket.refresh_from_db(fields=['status', 'updated_at'])

        return ticket

    @staticmethod
    def expire_elapsed_for_user(user, now=None):
        now = now or timezone.now()

        return Ticket.objects.filter(
            user=user,
            status=Ticket.Status.ACTIVE,
            valid_for__lt=validity.today(now)
        ).update(status=Ticket.Status.EXPIRED, updated_at=now)

    @staticmethod
    def list_for_user(user, now=None):
        TicketService.expire_elapsed_for_user(user, now)
        return TicketService._queryset().filter(user=user).order_by('-created_at')

    @staticmethod
    def get(ticket_id, actor, now=None):
        ticket = TicketService._get(ticket_id)
        TicketService._check_can_view(ticket, actor)
        return TicketService.refresh_status(ticket, now)

    @staticmethod
    def get_by_code(raw_code, actor, now=None):
        ticket = TicketService._get_by_code(raw_code)
        TicketService._check_can_view(ticket, actor)
        return TicketService.refresh_status(ticket, now)

    @staticmethod
    def redeem(raw_code, actor, now=None):
        """
        Validate a ticket at the gate.

        Checks run in order: unknown code, already used, not active, wrong
        day. The ACTIVE -> USED write is conditional on the row still being
        ACTIVE, so two concurrent redemptions cannot both succeed.
        """
        if not actor.is_park_staff:
            raise PermissionDenied("Only staff can validate tickets")

        now = now or timezone.now()
        ticket = TicketService._get_by_code(raw_code)

        if ticket.status == Ticket.Status.USED:
            raise AlreadyUsed()

        if ticket.status != Ticket.Status.ACTIVE:
            raise InvalidStatus()

        if ticket.valid_for != validity.today(now):
            raise WrongDay()

        with transaction.atomic():
            updated = Ticket.objects.filter(
                pk=ticket.pk,
                status=Ticket.Status.ACTIVE
            ).update(
                status=Ticket.Status.USED,
                redeemed_at=now,
                redeemed_by=actor,
                updated_at=now,
            )

            if not updated:
                current = Ticket.objects.filter(pk=ticket.pk).values_list('status', flat=True).first()

                if current is None:
                    raise TicketNotFound()
                if current == Ticket.Status.USED:
                    raise AlreadyUsed()
                raise InvalidStatus()

        ticket.refresh_from_db()
        logger.info("Ticket %s redeemed by staff %s", ticket.raw_code, actor.pk)
        return ticket

    @staticmethod
    def run_expiry_sweep(now=None):
        """
        Expire every ACTIVE or USED ticket whose validity day is over.
        Returns the number of tickets moved to EXPIRED.
        """
        now = now or timezone.now()

        count = Ticket.objects.filter(
            status__in=lifecycle.SWEEPABLE,
            valid_for__lt=validity.today(now)
        ).update(status=Ticket.Status.EXPIRED, updated_at=now)

        if count:
            logger.info("Expiry sweep moved %s tickets to EXPIRED", count)
        else:
            logger.debug("Expiry sweep found nothing to expire")

        return count
