from rest_framework import serializers

from apps.catalog.serializers import AttractionSerializer, ShowSerializer, ServiceSerializer

from .models import Planner, ServiceBooking


class PlannerSerializer(serializers.ModelSerializer):
    """
    Serializer for Planner with its attached items
    """
    ticket_id = serializers.IntegerField(read_only=True)
    ticket_status = serializers.CharField(source='ticket.status', read_only=True)
    ticket_type_id = serializers.IntegerField(source='ticket.ticket_type_id', read_only=True)
    attractions = AttractionSerializer(many=True, read_only=True)
    shows = ShowSerializer(many=True, read_only=True)
    services = ServiceSerializer(many=True, read_only=True)

    class Meta:
        model = Planner
        fields = [
            'id',
            'title',
            'description',
            'date',
            'ticket_id',
            'ticket_status',
            'ticket_type_id',
            'attractions',
            'shows',
            'services',
            'created_at',
            'updated_at',
        ]


class PlannerCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    ticket_id = serializers.IntegerField(min_value=1)
    date = serializers.DateTimeField()
    attraction_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False, default=list)
    show_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False, default=list)
    service_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False, default=list)


class PlannerUpdateSerializer(serializers.Serializer):
    """
    Partial update. Item ids are added to the ones already attached.
    """
    title = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    date = serializers.DateTimeField(required=False)
    attraction_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)
    show_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)
    service_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), required=False)


class PlannerAddItemSerializer(serializers.Serializer):
    item_id = serializers.IntegerField(min_value=1)


class ServiceBookingSerializer(serializers.ModelSerializer):
    planner_id = serializers.IntegerField(read_only=True)
    service = ServiceSerializer(read_only=True)

    class Meta:
        model = ServiceBooking
        fields = [
            'id',
            'planner_id',
            'service',
            'booking_time',
            'number_of_people',
            'special_requests',
            'created_at',
            'updated_at',
        ]


class ServiceBookingCreateSerializer(serializers.Serializer):
    planner_id = serializers.IntegerField(min_value=1)
    service_id = serializers.IntegerField(min_value=1)
    booking_time = serializers.DateTimeField()
    number_of_people = serializers.IntegerField(min_value=1, required=False, default=1)
    special_requests = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)


class ServiceBookingUpdateSerializer(serializers.Serializer):
    booking_time = serializers.DateTimeField(required=False)
    number_of_people = serializers.IntegerField(min_value=1, required=False)
    special_requests = serializers.CharField(max_length=500, required=False, allow_blank=True, allow_null=True)
