from django.conf import settings
from django.db import models


class Notification(models.Model):
    """
    Message for a user, due at ``send_at`` (UTC). The dispatch job flips
    ``sent`` once the instant has passed.
    """
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications'
    )
    title = models.CharField(max_length=200)
    message = models.TextField()
    send_at = models.DateTimeField(db_index=True)
    sent = models.BooleanField(default=False)
    read = models.BooleanField(default=False)
    show = models.ForeignKey(
        'catalog.Show',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications'
    )
    service_booking = models.ForeignKey(
        'planner.ServiceBooking',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        ordering = ['-send_at']
        indexes = [
            models.Index(fields=['sent', 'send_at'], name='notif_sent_send_at_idx'),
            models.Index(fields=['user', 'read'], name='notif_user_read_idx'),
        ]

    def __str__(self):
        return f"{self.title} -> {self.user}"
