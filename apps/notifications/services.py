import logging
from datetime import timedelta

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.errors import NotificationNotFound

from .models import Notification

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Service for storing, scheduling and dispatching notifications
    """

    @staticmethod
    def create(user, title, message, send_at, show=None, service_booking=None):
        return Notification.objects.create(
            user=user,
            title=title,
            message=message,
            send_at=send_at,
            show=show,
            service_booking=service_booking,
        )

    @staticmethod
    def reminder_time(starts_at):
        return starts_at - timedelta(minutes=settings.REMINDER_LEAD_MINUTES)

    @staticmethod
    def schedule_show_reminder(user, show, now=None):
        """
        Queue a "Show Reminder" ahead of the show's start.
        Returns None when the user opted out or the reminder time has passed.
        """
        now = now or timezone.now()
        send_at = NotificationService.reminder_time(show.start_time)

        if not user.allow_notifications or send_at <= now:
            return None

        notification = NotificationService.create(
            user=user,
            title='Show Reminder',
            message=(
                f'The show "{show.title}" will start in '
                f'{settings.REMINDER_LEAD_MINUTES} minutes at {show.location}.'
            ),
            send_at=send_at,
            show=show,
        )
        logger.info("Scheduled show reminder %s for user %s at %s", notification.pk, user.pk, send_at)
        return notification

    @staticmethod
    def schedule_booking_reminder(booking, now=None):
        """
        Queue a "Service Reminder" ahead of a service booking
        """
        now = now or timezone.now()
        user = booking.user
        send_at = NotificationService.reminder_time(booking.booking_time)

        if not user.allow_notifications or send_at <= now:
            return None

        notification = NotificationService.create(
            user=user,
            title='Service Reminder',
            message=(
                f'Your service "{booking.service.name}" will start in '
                f'{settings.REMINDER_LEAD_MINUTES} minutes.'
            ),
            send_at=send_at,
            service_booking=booking,
        )
        logger.info("Scheduled booking reminder %s for user %s at %s", notification.pk, user.pk, send_at)
        return notification

    @staticmethod
    def dispatch_due(now=None):
        """
        Mark every unsent notification whose ``send_at`` has passed as sent.
        Delivery to devices is not handled here. Returns the number marked.
        """
        now = now or timezone.now()

        count = Notification.objects.filter(
            sent=False,
            send_at__lte=now
        ).update(sent=True)

        if count:
            logger.info("Dispatched %s due notifications", count)

        return count

    @staticmethod
    def list_for_user(user):
        return Notification.objects.filter(user=user, sent=True).order_by('-send_at')

    @staticmethod
    def get_for_user(user, notification_id):
        try:
            return Notification.objects.get(pk=notification_id, user=user)
        except Notification.DoesNotExist:
            raise NotificationNotFound()

    @staticmethod
    def mark_read(user, notification_id):
        notification = NotificationService.get_for_user(user, notification_id)

        if not notification.read:
            notification.read = True
            notification.save(update_fields=['read'])

        return notification

    @staticmethod
    def delete(user, notification_id):
        notification = NotificationService.get_for_user(user, notification_id)
        notification.delete()

    @staticmethod
    @transaction.atomic
    def set_push_notifications(user, enabled):
        """
        Toggle push delivery. Disabling also marks all unread notifications read.
        """
        user.push_notifications = enabled
        user.save(update_fields=['push_notifications', 'updated_at'])

        if not enabled:
            Notification.objects.filter(user=user, read=False).update(read=True)

        logger.info("Push notifications %s for user %s", 'enabled' if enabled else 'disabled', user.pk)
        return user
