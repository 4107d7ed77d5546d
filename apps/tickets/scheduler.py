"""
Background jobs for the park: ticket expiry and notification dispatch.
Both run on fixed intervals in UTC.
"""
import logging
from datetime import timezone as dt_timezone

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from django.conf import settings
from django_apscheduler.jobstores import DjangoJobStore, register_events

logger = logging.getLogger(__name__)


def expire_tickets_job():
    """
    Move tickets whose validity day is over to EXPIRED.
    A failing run is logged and retried on the next interval.
    """
    from apps.tickets.services import TicketService

    try:
        return TicketService.run_expiry_sweep()
    except Exception:
        logger.exception("Ticket expiry sweep failed")
        return None


def dispatch_notifications_job():
    """
    Mark due notifications as sent
    """
    from apps.notifications.services import NotificationService

    try:
        return NotificationService.dispatch_due()
    except Exception:
        logger.exception("Notification dispatch failed")
        return None


def start_scheduler():
    """
    Start the background scheduler with the park jobs
    """
    scheduler = BackgroundScheduler(timezone=dt_timezone.utc)
    scheduler.add_jobstore(DjangoJobStore(), "default")

    scheduler.add_job(
        expire_tickets_job,
        trigger=IntervalTrigger(seconds=settings.TICKET_EXPIRY_SWEEP_SECONDS, timezone=dt_timezone.utc),
        id='expire_tickets_job',
        name='Expire tickets whose day is over',
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )

    scheduler.add_job(
        dispatch_notifications_job,
        trigger=IntervalTrigger(seconds=settings.NOTIFICATION_DISPATCH_SECONDS, timezone=dt_timezone.utc),
        id='dispatch_notifications_job',
        name='Dispatch due notifications',
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )

    register_events(scheduler)

    scheduler.start()
    logger.info(
        "Park scheduler started. Ticket sweep every %ss, notification dispatch every %ss.",
        settings.TICKET_EXPIRY_SWEEP_SECONDS,
        settings.NOTIFICATION_DISPATCH_SECONDS,
    )
    return scheduler
