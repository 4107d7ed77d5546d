import logging

from django.db import transaction

from core.errors import CatalogItemNotFound, InvalidStatus, TicketTypeNotFound

from .models import (
    Attraction,
    Show,
    Service,
    TicketType,
    TicketTypeAttraction,
    TicketTypeShow,
    TicketTypeService,
)

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Service for catalog lookups and ticket type whitelists
    """

    # kind -> (join model, item model, join field)
    LINKS = {
        'attraction': (TicketTypeAttraction, Attraction, 'attraction'),
        'show': (TicketTypeShow, Show, 'show'),
        'service': (TicketTypeService, Service, 'service'),
    }

    @staticmethod
    def get_item(model, pk):
        try:
            return model.objects.get(pk=pk)
        except model.DoesNotExist:
            raise CatalogItemNotFound(f"{model._meta.verbose_name.capitalize()} not found")

    @staticmethod
    def get_ticket_type(pk):
        try:
            return TicketType.objects.get(pk=pk)
        except TicketType.DoesNotExist:
            raise TicketTypeNotFound()

    @staticmethod
    def set_show_status(show_id, new_status):
        """
        Set a manual show status (CANCELLED or DELAYED)
        """
        if new_status not in Show.MANUAL:
            raise InvalidStatus(f"Show status {new_status} cannot be set manually")

        show = CatalogService.get_item(Show, show_id)
        show.status = new_status
        show.save(update_fields=['status', 'updated_at'])

        logger.info("Show %s marked %s", show.pk, new_status)
        return show

    @staticmethod
    def get_links(kind, ticket_type_id=None):
        join_model, _, _ = CatalogService.LINKS[kind]
        links = join_model.objects.all().order_by('ticket_type_id', 'pk')

        if ticket_type_id is not None:
            links = links.filter(ticket_type_id=ticket_type_id)

        return links

    @staticmethod
    @transaction.atomic
    def link(kind, ticket_type_id, item_id):
        """
        Add an item to a ticket type whitelist. Returns (link, created).
        """
        join_model, item_model, field = CatalogService.LINKS[kind]

        ticket_type = CatalogService.get_ticket_type(ticket_type_id)
        item = CatalogService.get_item(item_model, item_id)

        link, created = join_model.objects.get_or_create(
            ticket_type=ticket_type,
            **{field: item}
        )

        if created:
            logger.info("Whitelisted %s %s for ticket type %s", kind, item.pk, ticket_type.pk)

        return link, created

    @staticmethod
    def unlink(kind, ticket_type_id, item_id):
        """
        Remove an item from a ticket type whitelist. Planners already holding
        the item keep it until their next update.
        """
        join_model, _, field = CatalogService.LINKS[kind]

        deleted, _ = join_model.objects.filter(
            ticket_type_id=ticket_type_id,
            **{f'{field}_id': item_id}
        ).delete()

        if not deleted:
            raise CatalogItemNotFound("Association not found")

        logger.info("Removed %s %s from ticket type %s", kind, item_id, ticket_type_id)

    @staticmethod
    def link_data(kind, link):
        _, _, field = CatalogService.LINKS[kind]
        return {
            'id': link.pk,
            'ticket_type_id': link.ticket_type_id,
            'item_id': getattr(link, f'{field}_id'),
        }
