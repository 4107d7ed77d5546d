from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.tickets import validity
from apps.tickets.services import TicketService


class Command(BaseCommand):
    help = 'Expire tickets whose validity day is over'

    def handle(self, *args, **options):
        now = timezone.now()
        self.stdout.write(f'Expiring tickets valid before {validity.today(now)} (UTC)...')

        count = TicketService.run_expiry_sweep(now)

        if count:
            self.stdout.write(self.style.SUCCESS(f'Expired {count} tickets'))
        else:
            self.stdout.write(self.style.WARNING('No tickets to expire'))
