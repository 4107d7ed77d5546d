from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Planner(models.Model):
    """
    Itinerary built on one ticket. Its attractions, shows and services are
    always a subset of the ticket type's whitelist.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='planners'
    )
    ticket = models.ForeignKey(
        'tickets.Ticket',
        on_delete=models.CASCADE,
        related_name='planners'
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    date = models.DateTimeField()
    attractions = models.ManyToManyField('catalog.Attraction', related_name='planners', blank=True)
    shows = models.ManyToManyField('catalog.Show', related_name='planners', blank=True)
    services = models.ManyToManyField('catalog.Service', related_name='planners', blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'planners'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'created_at'], name='planners_user_created_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.user})"


class ServiceBooking(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='service_bookings'
    )
    planner = models.ForeignKey(
        Planner,
        on_delete=models.CASCADE,
        related_name='service_bookings'
    )
    service = models.ForeignKey(
        'catalog.Service',
        on_delete=models.CASCADE,
        related_name='bookings'
    )
    booking_time = models.DateTimeField()
    number_of_people = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1)]
    )
    special_requests = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'service_bookings'
        ordering = ['booking_time']

    def __str__(self):
        return f"{self.service} @ {self.booking_time:%Y-%m-%d %H:%M}"
