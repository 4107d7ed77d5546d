import secrets

from django.conf import settings
from django.db import models
from django.utils import timezone


class Ticket(models.Model):
    """
    Park entry ticket, valid for a single UTC calendar day
    """

    class Status(models.TextChoices):
        ACTIVE = 'ACTIVE', 'Active'
        USED = 'USED', 'Used'
        EXPIRED = 'EXPIRED', 'Expired'

    class PaymentMethod(models.TextChoices):
        CREDIT_CARD = 'CREDIT_CARD', 'Credit card'
        PAYPAL = 'PAYPAL', 'PayPal'
        BANK_TRANSFER = 'BANK_TRANSFER', 'Bank transfer'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='tickets',
        help_text="Ticket owner"
    )
    ticket_type = models.ForeignKey(
        'catalog.TicketType',
        on_delete=models.PROTECT,
        related_name='tickets'
    )
    discount = models.ForeignKey(
        'catalog.Discount',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='tickets'
    )
    raw_code = models.CharField(
        max_length=100,
        unique=True,
        help_text="Code encoded in the QR and checked at the gate"
    )
    qr_code = models.TextField(help_text="PNG data URL of the validation QR code")
    valid_for = models.DateField(help_text="Calendar day (UTC) the ticket is valid for")
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        null=True,
        blank=True
    )
    redeemed_at = models.DateTimeField(null=True, blank=True)
    redeemed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='redeemed_tickets',
        help_text="Staff member who validated the ticket"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='tickets_user_status_idx'),
            models.Index(fields=['status', 'valid_for'], name='tickets_status_valid_idx'),
        ]

    def __str__(self):
        return f"Ticket {self.raw_code} ({self.status})"

    @staticmethod
    def generate_raw_code(user_id, ticket_type_id):
        """
        Generate a unique code
        Format: TICKET-<user>-<type>-<epoch ms>-<4 hex>
        """
        while True:
            millis = int(timezone.now().timestamp() * 1000)
            raw_code = f"TICKET-{user_id}-{ticket_type_id}-{millis}-{secrets.token_hex(2)}"

            if not Ticket.objects.filter(raw_code=raw_code).exists():
                return raw_code
