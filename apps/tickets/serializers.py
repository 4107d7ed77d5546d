from rest_framework import serializers

from .models import Ticket


class TicketSerializer(serializers.ModelSerializer):
    """
    Serializer for Ticket model
    """
    ticket_type_id = serializers.IntegerField(read_only=True)
    ticket_type_name = serializers.CharField(source='ticket_type.name', read_only=True)
    price = serializers.DecimalField(
        source='ticket_type.price',
        max_digits=10,
        decimal_places=2,
        read_only=True
    )
    discount_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Ticket
        fields = [
            'id',
            'user',
            'ticket_type_id',
            'ticket_type_name',
            'price',
            'discount_id',
            'raw_code',
            'qr_code',
            'valid_for',
            'status',
            'payment_method',
            'redeemed_at',
            'redeemed_by',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class TicketCreateSerializer(serializers.Serializer):
    """
    Serializer for buying a ticket. The owner comes from auth and the
    status is always ACTIVE.
    """
    ticket_type_id = serializers.IntegerField(min_value=1)
    valid_for = serializers.DateField(
        input_formats=['%Y-%m-%d'],
        help_text="Day of the visit, YYYY-MM-DD (UTC)"
    )
    discount_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    payment_method = serializers.ChoiceField(
        choices=Ticket.PaymentMethod.choices,
        required=False,
        allow_null=True
    )


class TicketUpdateSerializer(serializers.Serializer):
    """
    Serializer for staff updates. Every field is optional.
    """
    ticket_type_id = serializers.IntegerField(min_value=1, required=False)
    valid_for = serializers.DateField(input_formats=['%Y-%m-%d'], required=False)
    discount_id = serializers.IntegerField(min_value=1, required=False, allow_null=True)
    payment_method = serializers.ChoiceField(
        choices=Ticket.PaymentMethod.choices,
        required=False,
        allow_null=True
    )
    status = serializers.ChoiceField(
        choices=Ticket.Status.choices,
        required=False,
        help_text="Administrative override of the ticket status"
    )


class TicketValidateSerializer(serializers.Serializer):
    raw_code = serializers.CharField(max_length=100, help_text="Code read from the ticket QR")
