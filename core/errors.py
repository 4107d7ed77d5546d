"""Domain error codes shared by the park apps.

Services raise these errors; the REST framework exception handler below turns
them into ``{"error": ..., "code": ...}`` responses.
"""

import logging
from enum import Enum

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDITY_IN_PAST = "VALIDITY_IN_PAST"
    TICKET_TYPE_NOT_FOUND = "TICKET_TYPE_NOT_FOUND"
    TICKET_NOT_FOUND = "TICKET_NOT_FOUND"
    PLANNER_NOT_FOUND = "PLANNER_NOT_FOUND"
    CATALOG_ITEM_NOT_FOUND = "CATALOG_ITEM_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    NOTIFICATION_NOT_FOUND = "NOTIFICATION_NOT_FOUND"
    ALREADY_USED = "ALREADY_USED"
    INVALID_STATUS = "INVALID_STATUS"
    WRONG_DAY = "WRONG_DAY"
    TICKET_NOT_REDEEMED = "TICKET_NOT_REDEEMED"
    ITEM_NOT_ELIGIBLE = "ITEM_NOT_ELIGIBLE"
    PERMISSION_DENIED = "PERMISSION_DENIED"


class DomainError(Exception):
    """Base domain error with code, HTTP status and user-safe message."""

    code = None
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request could not be processed"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidityInPast(DomainError):
    """Raised when the requested validity day has already fully elapsed."""

    code = ErrorCode.VALIDITY_IN_PAST
    default_message = "Validity date cannot be in the past"


class TicketTypeNotFound(DomainError):
    code = ErrorCode.TICKET_TYPE_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Ticket type not found"


class TicketNotFound(DomainError):
    code = ErrorCode.TICKET_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Ticket not found"


class PlannerNotFound(DomainError):
    code = ErrorCode.PLANNER_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Planner not found"


class CatalogItemNotFound(DomainError):
    """Raised when an attraction, show, service or discount does not exist."""

    code = ErrorCode.CATALOG_ITEM_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Catalog item not found"


class BookingNotFound(DomainError):
    code = ErrorCode.BOOKING_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Service booking not found"


class NotificationNotFound(DomainError):
    code = ErrorCode.NOTIFICATION_NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Notification not found"


class AlreadyUsed(DomainError):
    """Raised when a ticket has already been redeemed."""

    code = ErrorCode.ALREADY_USED
    status_code = status.HTTP_409_CONFLICT
    default_message = "Ticket already used"


class InvalidStatus(DomainError):
    """Raised when a ticket is not ACTIVE at redemption time."""

    code = ErrorCode.INVALID_STATUS
    default_message = "Ticket is not active"


class WrongDay(DomainError):
    """Raised when a ticket is redeemed on a day other than its validity day."""

    code = ErrorCode.WRONG_DAY
    default_message = "Ticket can only be validated on the indicated date"


class TicketNotRedeemed(DomainError):
    """Raised when planner items are requested for a ticket that was never validated."""

    code = ErrorCode.TICKET_NOT_REDEEMED
    default_message = "The ticket must be validated before planning activities"


class ItemNotEligible(DomainError):
    """Raised when an item is not whitelisted for the planner's ticket type."""

    code = ErrorCode.ITEM_NOT_ELIGIBLE
    default_message = "Item is not included in this ticket type"


class PermissionDenied(DomainError):
    code = ErrorCode.PERMISSION_DENIED
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Permission denied"


def domain_exception_handler(exc, context):
    """
    Render DomainError as ``{"error", "code"}``, defer everything else to DRF.
    """
    if isinstance(exc, DomainError):
        view = context.get('view')
        logger.info(
            "%s rejected by %s: %s",
            exc.code.value,
            view.__class__.__name__ if view else 'unknown view',
            exc.message,
        )
        return Response(
            {'error': exc.message, 'code': exc.code.value},
            status=exc.status_code,
        )

    return exception_handler(exc, context)
