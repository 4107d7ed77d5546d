"""
Ticket status transitions.

ACTIVE -> USED      redemption at the gate
ACTIVE -> EXPIRED   validity day over (sweep or lazy refresh)
USED   -> EXPIRED   sweep only
EXPIRED is terminal. Staff overrides bypass this table.
"""
from . import validity
from .models import Ticket

Status = Ticket.Status

ALLOWED_TRANSITIONS = {
    Status.ACTIVE: frozenset({Status.USED, Status.EXPIRED}),
    Status.USED: frozenset({Status.EXPIRED}),
    Status.EXPIRED: frozenset(),
}

# Statuses the sweep moves to EXPIRED once the day is over
SWEEPABLE = (Status.ACTIVE, Status.USED)


def can_transition(current, target):
    return target in ALLOWED_TRANSITIONS.get(current, frozenset())


def initial_status(valid_for, now=None):
    """
    Status of a newly issued ticket. Rejects validity days already over.
    """
    validity.ensure_not_in_past(valid_for, now)
    return Status.ACTIVE


def observed_status(status, valid_for, now=None):
    """
    Status as it should read at ``now``: an ACTIVE ticket whose day has
    ended is EXPIRED even if the sweep has not run yet.
    """
    if status == Status.ACTIVE and validity.is_elapsed(valid_for, now):
        return Status.EXPIRED
    return status
