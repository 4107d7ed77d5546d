from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class Attraction(models.Model):
    name = models.CharField(max_length=200)
    category = models.CharField(max_length=100)
    location = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    wait_time = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Expected wait in minutes"
    )
    image_url = models.URLField(max_length=500, null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'attractions'
        ordering = ['name']

    def __str__(self):
        return self.name


class Show(models.Model):
    """
    Scheduled performance. SCHEDULED/ONGOING/FINISHED follow the clock,
    CANCELLED and DELAYED are set by staff and stick.
    """

    class Status(models.TextChoices):
        SCHEDULED = 'SCHEDULED', 'Scheduled'
        ONGOING = 'ONGOING', 'Ongoing'
        FINISHED = 'FINISHED', 'Finished'
        CANCELLED = 'CANCELLED', 'Cancelled'
        DELAYED = 'DELAYED', 'Delayed'

    TIME_DRIVEN = (Status.SCHEDULED, Status.ONGOING, Status.FINISHED)
    MANUAL = (Status.CANCELLED, Status.DELAYED)

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    location = models.CharField(max_length=200)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.SCHEDULED,
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'shows'
        ordering = ['start_time']

    def __str__(self):
        return f"{self.title} @ {self.start_time:%Y-%m-%d %H:%M}"

    def current_status(self, now=None):
        """
        Status as observed at ``now``
        """
        if self.status not in self.TIME_DRIVEN:
            return self.status

        now = now or timezone.now()
        if now < self.start_time:
            return self.Status.SCHEDULED
        if now <= self.end_time:
            return self.Status.ONGOING
        return self.Status.FINISHED


class Service(models.Model):
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=200)
    type = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'services'
        ordering = ['name']

    def __str__(self):
        return self.name


class TicketType(models.Model):
    """
    Catalog product. Its attraction/show/service links are the whitelist of
    what a planner built on such a ticket may contain.
    """
    name = models.CharField(max_length=100, unique=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)]
    )
    description = models.TextField(blank=True, default='')
    attractions = models.ManyToManyField(
        Attraction,
        through='TicketTypeAttraction',
        related_name='ticket_types',
        blank=True
    )
    shows = models.ManyToManyField(
        Show,
        through='TicketTypeShow',
        related_name='ticket_types',
        blank=True
    )
    services = models.ManyToManyField(
        Service,
        through='TicketTypeService',
        related_name='ticket_types',
        blank=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'ticket_types'
        ordering = ['price', 'name']

    def __str__(self):
        return self.name


class TicketTypeAttraction(models.Model):
    ticket_type = models.ForeignKey(TicketType, on_delete=models.CASCADE, related_name='attraction_links')
    attraction = models.ForeignKey(Attraction, on_delete=models.CASCADE, related_name='ticket_type_links')

    class Meta:
        db_table = 'ticket_type_attractions'
        constraints = [
            models.UniqueConstraint(fields=['ticket_type', 'attraction'], name='uniq_ticket_type_attraction'),
        ]


class TicketTypeShow(models.Model):
    ticket_type = models.ForeignKey(TicketType, on_delete=models.CASCADE, related_name='show_links')
    show = models.ForeignKey(Show, on_delete=models.CASCADE, related_name='ticket_type_links')

    class Meta:
        db_table = 'ticket_type_shows'
        constraints = [
            models.UniqueConstraint(fields=['ticket_type', 'show'], name='uniq_ticket_type_show'),
        ]


class TicketTypeService(models.Model):
    ticket_type = models.ForeignKey(TicketType, on_delete=models.CASCADE, related_name='service_links')
    service = models.ForeignKey(Service, on_delete=models.CASCADE, related_name='ticket_type_links')

    class Meta:
        db_table = 'ticket_type_services'
        constraints = [
            models.UniqueConstraint(fields=['ticket_type', 'service'], name='uniq_ticket_type_service'),
        ]


class Discount(models.Model):
    name = models.CharField(max_length=100)
    percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'discounts'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.percentage}%)"
