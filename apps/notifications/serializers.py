from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = [
            'id',
            'title',
            'message',
            'send_at',
            'sent',
            'read',
            'show',
            'service_booking',
            'created_at',
        ]
        read_only_fields = fields


class ToggleNotificationsSerializer(serializers.Serializer):
    enabled = serializers.BooleanField(help_text="Enable or disable push notifications")
