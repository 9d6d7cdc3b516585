"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class RedeemRequestSerializer(serializers.Serializer):
    # Normalization and validation of the code belong to the service.
    code = serializers.CharField(allow_blank=True, trim_whitespace=False)


class GrantRequestSerializer(serializers.Serializer):
    user = serializers.CharField(help_text="Email or ID of the user to authorize")


class GrantStatusRequestSerializer(serializers.Serializer):
    status = serializers.CharField()


class EventSummarySerializer(serializers.Serializer):
    """Serializer for EventSummary domain model."""

    id = serializers.CharField()
    organizer_id = serializers.CharField(allow_null=True)
    title = serializers.CharField()
    date = serializers.DateField()
    time = serializers.TimeField()
    location = serializers.CharField()


class EventSerializer(EventSummarySerializer):
    """Serializer for Event domain model."""

    description = serializers.CharField()
    capacity = serializers.IntegerField(allow_null=True)
    status = serializers.CharField(source="status.value")
    ticket_type = serializers.CharField(source="ticket_kind.value")
    price = serializers.DecimalField(source="price.amount", max_digits=10, decimal_places=2)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class TicketSerializer(serializers.Serializer):
    """Serializer for Ticket domain model."""

    id = serializers.CharField()
    code = serializers.CharField()
    event_id = serializers.CharField(source="event.id")
    holder_name = serializers.CharField()
    holder_email = serializers.EmailField()
    holder_phone = serializers.CharField(allow_null=True)
    payment_status = serializers.CharField(source="payment_status.value")
    redeemed = serializers.BooleanField()
    redeemed_at = serializers.DateTimeField(allow_null=True)


class RedemptionOutcomeSerializer(serializers.Serializer):
    """Serializer for RedemptionOutcome."""

    status = serializers.CharField(source="status.value")
    message = serializers.CharField()
    code = serializers.CharField()
    ticket = TicketSerializer(allow_null=True)
    event = EventSummarySerializer(allow_null=True)
    redeemed_at = serializers.DateTimeField(allow_null=True)
    audit_recorded = serializers.BooleanField()


class GrantSerializer(serializers.Serializer):
    """Serializer for Grant domain model."""

    id = serializers.CharField()
    event_id = serializers.CharField()
    authorized_user_id = serializers.CharField()
    authorized_by = serializers.CharField(allow_null=True)
    status = serializers.CharField(source="status.value")
    user_name = serializers.CharField()
    user_email = serializers.EmailField()
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class CheckInStatsSerializer(serializers.Serializer):
    """Serializer for CheckInStats."""

    event_id = serializers.CharField()
    total = serializers.IntegerField()
    checked_in = serializers.IntegerField()
    remaining = serializers.IntegerField()
    percentage = serializers.DecimalField(max_digits=4, decimal_places=1, coerce_to_string=False)
