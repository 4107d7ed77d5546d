"""
Management command to create a demo park catalog
"""
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from apps.catalog.models import Attraction, Show, Service, TicketType, Discount
from apps.catalog.services import CatalogService

User = get_user_model()

ATTRACTIONS = [
    {'name': 'Dragon Coaster', 'category': 'Roller coaster', 'location': 'North Zone', 'wait_time': 35},
    {'name': 'Pirate Bay', 'category': 'Water ride', 'location': 'Lagoon', 'wait_time': 20},
    {'name': 'Haunted Manor', 'category': 'Dark ride', 'location': 'Old Town', 'wait_time': 15},
    {'name': 'Sky Wheel', 'category': 'Family', 'location': 'Central Plaza', 'wait_time': 10},
]

SHOWS = [
    # (title, location, start offset in hours, duration in minutes)
    ('Parade of Lights', 'Main Street', 2, 45),
    ('Stunt Spectacular', 'Arena', 4, 30),
    ('Dolphin Splash', 'Lagoon Theatre', 6, 25),
]

SERVICES = [
    {'name': 'Fast Lane Desk', 'location': 'Entrance', 'type': 'Queue'},
    {'name': 'Lagoon Grill', 'location': 'Lagoon', 'type': 'Restaurant'},
    {'name': 'Stroller Rental', 'location': 'Entrance', 'type': 'Rental'},
]

TICKET_TYPES = [
    {
        'name': 'Standard',
        'price': Decimal('39.90'),
        'description': 'Rides and shows',
        'attractions': ['Pirate Bay', 'Sky Wheel', 'Haunted Manor'],
        'shows': ['Parade of Lights'],
        'services': ['Stroller Rental'],
    },
    {
        'name': 'Premium',
        'price': Decimal('69.90'),
        'description': 'Everything in the park',
        'attractions': [a['name'] for a in ATTRACTIONS],
        'shows': [s[0] for s in SHOWS],
        'services': [s['name'] for s in SERVICES],
    },
]


class Command(BaseCommand):
    help = 'Create a demo park catalog (attractions, shows, services, ticket types)'

    def add_arguments(self, parser):
        parser.add_argument(
            '--staff-email',
            type=str,
            default='staff@park.local',
            help='Email of the staff account to create (default: staff@park.local)'
        )
        parser.add_argument(
            '--staff-password',
            type=str,
            default='staff-password',
            help='Password of the staff account (default: staff-password)'
        )

    @transaction.atomic
    def handle(self, *args, **options):
        now = timezone.now()

        self.stdout.write(self.style.SUCCESS('Creating attractions...'))
        attractions = {}
        for data in ATTRACTIONS:
            attraction, created = Attraction.objects.get_or_create(
                name=data['name'],
                defaults=data
            )
            attractions[attraction.name] = attraction
            self._report(created, f'attraction {attraction.name}')

        self.stdout.write(self.style.SUCCESS('Creating shows...'))
        shows = {}
        for title, location, offset_hours, minutes in SHOWS:
            start_time = now + timedelta(hours=offset_hours)
            show, created = Show.objects.get_or_create(
                title=title,
                defaults={
                    'location': location,
                    'start_time': start_time,
                    'end_time': start_time + timedelta(minutes=minutes),
                }
            )
            shows[show.title] = show
            self._report(created, f'show {show.title}')

        self.stdout.write(self.style.SUCCESS('Creating services...'))
        services = {}
        for data in SERVICES:
            service, created = Service.objects.get_or_create(
                name=data['name'],
                defaults=data
            )
            services[service.name] = service
            self._report(created, f'service {service.name}')

        self.stdout.write(self.style.SUCCESS('Creating ticket types...'))
        for data in TICKET_TYPES:
            ticket_type, created = TicketType.objects.get_or_create(
                name=data['name'],
                defaults={'price': data['price'], 'description': data['description']}
            )
            self._report(created, f'ticket type {ticket_type.name}')

            for name in data['attractions']:
                CatalogService.link('attraction', ticket_type.pk, attractions[name].pk)
            for title in data['shows']:
                CatalogService.link('show', ticket_type.pk, shows[title].pk)
            for name in data['services']:
                CatalogService.link('service', ticket_type.pk, services[name].pk)

        Discount.objects.get_or_create(
            name='Student',
            defaults={'percentage': Decimal('15.00')}
        )

        email = options['staff_email']
        if User.objects.filter(email=email).exists():
            self.stdout.write(self.style.WARNING(f'  Staff user already exists: {email}'))
        else:
            User.objects.create_staff(
                email=email,
                password=options['staff_password'],
                first_name='Park',
                last_name='Staff',
            )
            self.stdout.write(self.style.SUCCESS(f'  Created staff user: {email}'))

        self.stdout.write(self.style.SUCCESS('\nDemo catalog ready!'))
        self.stdout.write(self.style.SUCCESS(f'   - Attractions: {Attraction.objects.count()}'))
        self.stdout.write(self.style.SUCCESS(f'   - Shows: {Show.objects.count()}'))
        self.stdout.write(self.style.SUCCESS(f'   - Services: {Service.objects.count()}'))
        self.stdout.write(self.style.SUCCESS(f'   - Ticket types: {TicketType.objects.count()}'))

    def _report(self, created, label):
        if created:
            self.stdout.write(self.style.SUCCESS(f'  Created {label}'))
        else:
            self.stdout.write(self.style.WARNING(f'  Already exists: {label}'))
