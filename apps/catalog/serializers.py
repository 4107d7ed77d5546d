from rest_framework import serializers

from .models import Attraction, Show, Service, TicketType, Discount


class AttractionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Attraction
        fields = [
            'id',
            'name',
            'category',
            'location',
            'description',
            'wait_time',
            'image_url',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class ShowSerializer(serializers.ModelSerializer):
    """
    Serializer for Show. ``status`` is reported as observed now.
    """
    class Meta:
        model = Show
        fields = [
            'id',
            'title',
            'description',
            'location',
            'start_time',
            'end_time',
            'status',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'status', 'created_at', 'updated_at']

    def validate(self, attrs):
        start_time = attrs.get('start_time', getattr(self.instance, 'start_time', None))
        end_time = attrs.get('end_time', getattr(self.instance, 'end_time', None))

        if start_time and end_time and end_time <= start_time:
            raise serializers.ValidationError({'end_time': "End time must be after start time"})

        return attrs

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['status'] = instance.current_status()
        return data


class ShowStatusSerializer(serializers.Serializer):
    """
    Only CANCELLED and DELAYED can be set by hand
    """
    status = serializers.ChoiceField(choices=[choice.value for choice in Show.MANUAL])


class ServiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Service
        fields = ['id', 'name', 'location', 'type', 'created_at', 'updated_at']
        read_only_fields = ['id', 'created_at', 'updated_at']


class TicketTypeSerializer(serializers.ModelSerializer):
    """
    Ticket type with the ids of everything it gives access to
    """
    attraction_ids = serializers.PrimaryKeyRelatedField(source='attractions', many=True, read_only=True)
    show_ids = serializers.PrimaryKeyRelatedField(source='shows', many=True, read_only=True)
    service_ids = serializers.PrimaryKeyRelatedField(source='services', many=True, read_only=True)

    class Meta:
        model = TicketType
        fields = [
            'id',
            'name',
            'price',
            'description',
            'attraction_ids',
            'show_ids',
            'service_ids',
        ]


class DiscountSerializer(serializers.ModelSerializer):
    class Meta:
        model = Discount
        fields = ['id', 'name', 'percentage', 'is_active']


class TicketTypeLinkSerializer(serializers.Serializer):
    ticket_type_id = serializers.IntegerField(min_value=1)
    item_id = serializers.IntegerField(min_value=1)
