import logging

from django.apps import AppConfig
from django.conf import settings

logger = logging.getLogger(__name__)


class TicketsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.tickets'
    verbose_name = 'Tickets'

    def ready(self):
        """
        Start the park scheduler when explicitly enabled
        """
        if not settings.ENABLE_PARK_SCHEDULER:
            return

        try:
            from .scheduler import start_scheduler
            start_scheduler()
        except Exception:
            # The API keeps serving without background jobs
            logger.exception("Failed to start park scheduler")
