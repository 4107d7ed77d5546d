from django.contrib import admin
from django.utils import timezone

from .models import Notification
from .services import NotificationService


@admin.action(description='Dispatch notifications that are due')
def dispatch_due_action(modeladmin, request, queryset):
    count = NotificationService.dispatch_due(timezone.now())
    modeladmin.message_user(request, f'{count} notifications marked as sent')


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ('title', 'user', 'send_at', 'sent', 'read')
    list_filter = ('sent', 'read', 'send_at')
    search_fields = ('title', 'user__email')
    raw_id_fields = ('user', 'show', 'service_booking')
    ordering = ('-send_at',)
    actions = [dispatch_due_action]
