"""Order model.

Business rules implemented here:
- Confirmation status defaults to ``call_not_response`` with zero attempts.
- ``call_attempts`` only grows (``record_call_attempt``); there is no reset.
- Assignment references point at ``accounts.User``; deleting a principal
  puts the order back in the unassigned pool (``SET_NULL``).
- Orders are hard-deleted; there is no soft delete and no expiry.

Role membership of the assigned principals and authorization are enforced
by the Service Layer.
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.orders.constants import (
    BuyerOutcome,
    ConfirmationStatus,
    FulfillmentStatus,
    OrderKind,
    PaymentMethod,
    ReasonNotSold,
)
from shared.domain.events import DomainEventMixin


class Order(DomainEventMixin, BaseModel):
    """Order aggregate root.

    The confirmation and fulfillment sub-records are stored as prefixed
    columns of the same row; serializers expose them as nested objects.
    """

    kind = models.CharField(max_length=10, choices=OrderKind.choices)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    phone_number = models.CharField(max_length=32)
    full_name = models.CharField(max_length=255)
    scheduled_day = models.DateField()
    scheduled_hour = models.CharField(max_length=20)
    photo = models.CharField(max_length=500, null=True, blank=True, default=None)  # noqa: DJ01
    description = models.TextField()
    additional_notes = models.TextField(null=True, blank=True, default=None)  # noqa: DJ01

    # Confirmation
    assigned_confirmer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="confirming_orders",
    )
    confirmation_status = models.CharField(
        max_length=20,
        choices=ConfirmationStatus.choices,
        default=ConfirmationStatus.CALL_NOT_RESPONSE,
    )
    call_attempts = models.PositiveIntegerField(default=0)
    rendezvous_date = models.DateField(null=True, blank=True)
    rendezvous_hour = models.CharField(max_length=20, blank=True, default="")
    assigned_buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="buying_orders",
    )

    # Fulfillment
    fulfillment_status = models.CharField(
        max_length=20,
        choices=FulfillmentStatus.choices,
        default=FulfillmentStatus.NOT_PROCESSED_YET,
    )
    is_retrying = models.BooleanField(default=False)
    outcome = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=BuyerOutcome.choices,
        null=True,
        blank=True,
    )
    payment_method = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=PaymentMethod.choices,
        null=True,
        blank=True,
    )
    reason_not_sold = models.CharField(  # noqa: DJ01
        max_length=20,
        choices=ReasonNotSold.choices,
        null=True,
        blank=True,
    )
    custom_reason = models.TextField(blank=True, default="")
    follow_up_date = models.DateField(null=True, blank=True)
    follow_up_time = models.CharField(max_length=20, blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="orders_created_idx"),
            models.Index(fields=["assigned_confirmer"], name="orders_confirmer_idx"),
            models.Index(fields=["assigned_buyer"], name="orders_buyer_idx"),
            models.Index(fields=["kind"], name="orders_kind_idx"),
            models.Index(fields=["scheduled_day"], name="orders_scheduled_day_idx"),
        ]

    # ------------------------------------------------------------------
    # Confirmation helpers
    # ------------------------------------------------------------------

    @property
    def is_in_pool(self) -> bool:
        """``True`` while no confirmer has been assigned."""
        return self.assigned_confirmer_id is None

    def record_call_attempt(self) -> None:
        self.call_attempts += 1

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.kind} order for {self.full_name} ({self.confirmation_status})"
