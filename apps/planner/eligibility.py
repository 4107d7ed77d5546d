"""
Ticket type whitelists and the filter that keeps planners inside them.

Filtering keeps the order of the candidates and drops duplicates, keeping
the first occurrence.
"""
from collections import namedtuple

from apps.catalog.models import TicketTypeAttraction, TicketTypeShow, TicketTypeService

EligibleSelection = namedtuple('EligibleSelection', ['attraction_ids', 'show_ids', 'service_ids'])


class Whitelist(namedtuple('Whitelist', ['attractions', 'shows', 'services'])):
    """
    Ids a ticket type gives access to, one frozenset per item kind
    """
    __slots__ = ()

    KINDS = ('attraction', 'show', 'service')

    @classmethod
    def for_ticket_type(cls, ticket_type_id):
        return cls(
            attractions=frozenset(
                TicketTypeAttraction.objects.filter(ticket_type_id=ticket_type_id)
                .values_list('attraction_id', flat=True)
            ),
            shows=frozenset(
                TicketTypeShow.objects.filter(ticket_type_id=ticket_type_id)
                .values_list('show_id', flat=True)
            ),
            services=frozenset(
                TicketTypeService.objects.filter(ticket_type_id=ticket_type_id)
                .values_list('service_id', flat=True)
            ),
        )

    def allowed(self, kind):
        return getattr(self, f'{kind}s')

    def allows(self, kind, item_id):
        return item_id in self.allowed(kind)


def filter_eligible(candidate_ids, allowed_ids):
    """
    Candidates present in ``allowed_ids``, in candidate order, without duplicates
    """
    seen = set()
    eligible = []

    for item_id in candidate_ids:
        if item_id in allowed_ids and item_id not in seen:
            seen.add(item_id)
            eligible.append(item_id)

    return eligible


def select_eligible(whitelist, attraction_ids=(), show_ids=(), service_ids=()):
    return EligibleSelection(
        attraction_ids=filter_eligible(attraction_ids, whitelist.attractions),
        show_ids=filter_eligible(show_ids, whitelist.shows),
        service_ids=filter_eligible(service_ids, whitelist.services),
    )
