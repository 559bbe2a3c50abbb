"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.

Dates coming from browsers may be full ISO datetimes, so date inputs are
accepted as strings here and normalized by the DTOs.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.accounts.models import User
from modules.orders.constants import (
    BuyerOutcome,
    ConfirmationStatus,
    FulfillmentStatus,
    OrderKind,
    PaymentMethod,
    ReasonNotSold,
)
from modules.orders.models import Order

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class ScheduledTimeSerializer(serializers.Serializer):
    day = serializers.CharField()
    hour = serializers.CharField()


class CreateOrderSerializer(serializers.Serializer):
    """Validates the public order submission payload."""

    kind = serializers.ChoiceField(choices=OrderKind.choices)
    price = serializers.DecimalField(max_digits=10, decimal_places=2)
    phone_number = serializers.CharField(max_length=32)
    full_name = serializers.CharField(max_length=255)
    scheduled_time = ScheduledTimeSerializer()
    description = serializers.CharField()
    photo = serializers.CharField(
        required=False, allow_null=True, allow_blank=True, max_length=500
    )
    additional_notes = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )

    def validate_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Price must be greater than zero.")
        return value


class AuthenticatedCreateOrderSerializer(CreateOrderSerializer):
    """Staff submission: may pre-assign a confirmer and/or a buyer."""

    confirmer_id = serializers.UUIDField(required=False, allow_null=True)
    buyer_id = serializers.UUIDField(required=False, allow_null=True)


class RendezvousSerializer(serializers.Serializer):
    date = serializers.CharField()
    hour = serializers.CharField(required=False, allow_blank=True, default="")


class ConfirmationPatchSerializer(serializers.Serializer):
    """Validates a confirmation patch; absent keys are left untouched."""

    status = serializers.ChoiceField(
        choices=ConfirmationStatus.choices, required=False
    )
    rendezvous = RendezvousSerializer(required=False)
    current_confirmer = serializers.UUIDField(required=False, allow_null=True)
    buyer = serializers.UUIDField(required=False, allow_null=True)
    additional_notes = serializers.CharField(
        required=False, allow_null=True, allow_blank=True
    )


class FulfillmentPatchSerializer(serializers.Serializer):
    """Validates a fulfillment patch; outcome consistency is checked by the DTO."""

    status = serializers.ChoiceField(choices=FulfillmentStatus.choices)
    is_retrying = serializers.BooleanField(required=False)
    outcome = serializers.ChoiceField(choices=BuyerOutcome.choices, required=False)
    payment_method = serializers.ChoiceField(
        choices=PaymentMethod.choices, required=False
    )
    reason_not_sold = serializers.ChoiceField(
        choices=ReasonNotSold.choices, required=False
    )
    custom_reason = serializers.CharField(required=False, allow_blank=True)
    follow_up_date = serializers.CharField(required=False)
    follow_up_time = serializers.CharField(required=False, allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class PrincipalRefSerializer(serializers.ModelSerializer):
    """Display reference for an assigned confirmer or buyer."""

    class Meta:
        model = User
        fields = ["id", "username", "role"]
        read_only_fields = fields


class ConfirmationSerializer(serializers.Serializer):
    assigned_confirmer = PrincipalRefSerializer(read_only=True, allow_null=True)
    status = serializers.CharField(source="confirmation_status", read_only=True)
    call_attempts = serializers.IntegerField(read_only=True)
    rendezvous = serializers.SerializerMethodField()
    assigned_buyer = PrincipalRefSerializer(read_only=True, allow_null=True)

    def get_rendezvous(self, order: Order):
        if order.rendezvous_date is None:
            return None
        return {
            "date": order.rendezvous_date.isoformat(),
            "hour": order.rendezvous_hour,
        }


class FulfillmentSerializer(serializers.Serializer):
    status = serializers.CharField(source="fulfillment_status", read_only=True)
    is_retrying = serializers.BooleanField(read_only=True)
    outcome = serializers.CharField(read_only=True, allow_null=True)
    payment_method = serializers.CharField(read_only=True, allow_null=True)
    reason_not_sold = serializers.CharField(read_only=True, allow_null=True)
    custom_reason = serializers.CharField(read_only=True)
    follow_up_date = serializers.DateField(read_only=True, allow_null=True)
    follow_up_time = serializers.CharField(read_only=True)


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with nested confirmation/fulfillment parts."""

    scheduled_time = serializers.SerializerMethodField()
    confirmation = ConfirmationSerializer(source="*", read_only=True)
    fulfillment = FulfillmentSerializer(source="*", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "kind",
            "price",
            "phone_number",
            "full_name",
            "scheduled_time",
            "photo",
            "description",
            "additional_notes",
            "confirmation",
            "fulfillment",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_scheduled_time(self, order: Order):
        return {"day": order.scheduled_day.isoformat(), "hour": order.scheduled_hour}
