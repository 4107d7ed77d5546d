from django.contrib import admin, messages
from django.utils import timezone

from .models import Ticket
from .services import TicketService


@admin.action(description='Run the expiry sweep now')
def run_expiry_sweep_action(modeladmin, request, queryset):
    """
    Admin action to expire every ticket whose day is over
    """
    count = TicketService.run_expiry_sweep(timezone.now())

    if count:
        modeladmin.message_user(request, f'{count} tickets expired', level=messages.SUCCESS)
    else:
        modeladmin.message_user(request, 'No tickets to expire', level=messages.WARNING)


@admin.register(Ticket)
class TicketAdmin(admin.ModelAdmin):
    list_display = ('raw_code', 'user', 'ticket_type', 'valid_for', 'status', 'payment_method', 'created_at')
    list_filter = ('status', 'valid_for', 'ticket_type', 'payment_method')
    search_fields = ('raw_code', 'user__email')
    readonly_fields = ('raw_code', 'qr_code', 'redeemed_at', 'redeemed_by', 'created_at', 'updated_at')
    raw_id_fields = ('user',)
    ordering = ('-created_at',)
    actions = [run_expiry_sweep_action]

    fieldsets = (
        ('Ticket', {
            'fields': ('user', 'ticket_type', 'discount', 'raw_code', 'status')
        }),
        ('Validity', {
            'fields': ('valid_for', 'payment_method')
        }),
        ('Redemption', {
            'fields': ('redeemed_at', 'redeemed_by')
        }),
        ('Dates', {
            'fields': ('qr_code', 'created_at', 'updated_at')
        }),
    )
