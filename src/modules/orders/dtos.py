"""Order DTOs for the Service Layer.

Data transfer objects using Pydantic v2; the only Django dependency is
the timezone used to resolve calendar days from browser datetimes.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderDTO``: input for order creation (public or staff).
- ``AssignmentDTO``: optional confirmer/buyer ids given at creation.
- ``ConfirmationPatchDTO``: partial update of the confirmation part.
- ``FulfillmentPatchDTO``: update of the fulfillment part.

``from_payload`` turns Pydantic errors into ``OrderValidationError`` so
callers outside the HTTP layer get the same domain error as the API.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Type, TypeVar
from uuid import UUID

from django.utils import timezone
from django.utils.dateparse import parse_datetime
from pydantic import (
    BaseModel,
    ConfigDict,
    ValidationError,
    field_validator,
    model_validator,
)

from modules.orders.constants import (
    BuyerOutcome,
    ConfirmationStatus,
    FulfillmentStatus,
    OrderKind,
    PaymentMethod,
    ReasonNotSold,
)
from modules.orders.exceptions import OrderValidationError

DTO = TypeVar("DTO", bound="PayloadDTO")


def _coerce_date(value: Any) -> Any:
    """Accept plain dates as well as ISO datetimes sent by browsers.

    Offset-bearing datetimes (``...Z``, ``+01:00``) are converted to the
    configured ``TIME_ZONE`` before the calendar day is taken.
    """
    if isinstance(value, str) and "T" in value:
        try:
            parsed = parse_datetime(value)
        except ValueError:
            return value
        if parsed is None:
            return value
        value = parsed
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    return value


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"])
        parts.append(f"{location}: {error['msg']}" if location else error["msg"])
    return "; ".join(parts)


class PayloadDTO(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @classmethod
    def from_payload(cls: Type[DTO], data: Mapping[str, Any]) -> DTO:
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise OrderValidationError(_format_errors(exc)) from exc


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


class ScheduledTimeDTO(PayloadDTO):
    day: date
    hour: str

    @field_validator("day", mode="before")
    @classmethod
    def normalize_day(cls, v: Any) -> Any:
        return _coerce_date(v)

    @field_validator("hour")
    @classmethod
    def hour_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Hour is required.")
        return v


class CreateOrderDTO(PayloadDTO):
    """Immutable DTO for order creation requests.

    Validates:
    - ``kind`` is one of ``usb`` / ``course``.
    - ``price`` is strictly positive.
    - contact, schedule and description are present and non-blank.
    """

    kind: OrderKind
    price: Decimal
    phone_number: str
    full_name: str
    scheduled_time: ScheduledTimeDTO
    description: str
    photo: Optional[str] = None
    additional_notes: Optional[str] = None

    @field_validator("price")
    @classmethod
    def price_must_be_positive(cls, v: Decimal) -> Decimal:
        if v <= 0:
            raise ValueError("Price must be greater than zero.")
        return v

    @field_validator("phone_number", "full_name", "description")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field is required.")
        return v


class AssignmentDTO(PayloadDTO):
    """Confirmer/buyer ids requested at staff creation time."""

    confirmer_id: Optional[UUID] = None
    buyer_id: Optional[UUID] = None


# ---------------------------------------------------------------------------
# Updates
# ---------------------------------------------------------------------------


class RendezvousDTO(PayloadDTO):
    date: date
    hour: str = ""

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v: Any) -> Any:
        return _coerce_date(v)


class ConfirmationPatchDTO(PayloadDTO):
    """Partial update of the confirmation part of an order.

    Only the fields present in the payload are applied.  For
    ``current_confirmer`` and ``buyer`` an explicit ``None`` clears the
    assignment, while an absent key leaves it untouched; use
    :meth:`provided` to tell the two apart.
    """

    status: Optional[ConfirmationStatus] = None
    rendezvous: Optional[RendezvousDTO] = None
    current_confirmer: Optional[UUID] = None
    buyer: Optional[UUID] = None
    additional_notes: Optional[str] = None

    def provided(self, field: str) -> bool:
        return field in self.model_fields_set


class FulfillmentPatchDTO(PayloadDTO):
    """Update of the fulfillment part of an order.

    Validates the outcome shape:
    - ``sold`` requires a ``payment_method``.
    - ``not_sold`` requires a ``reason_not_sold``.
    - payment method / reason are rejected for any other outcome.
    """

    status: FulfillmentStatus
    is_retrying: Optional[bool] = None
    outcome: Optional[BuyerOutcome] = None
    payment_method: Optional[PaymentMethod] = None
    reason_not_sold: Optional[ReasonNotSold] = None
    custom_reason: Optional[str] = None
    follow_up_date: Optional[date] = None
    follow_up_time: Optional[str] = None

    @field_validator("follow_up_date", mode="before")
    @classmethod
    def normalize_follow_up_date(cls, v: Any) -> Any:
        return _coerce_date(v)

    @model_validator(mode="after")
    def outcome_details_match_outcome(self):
        if self.outcome == BuyerOutcome.SOLD and self.payment_method is None:
            raise ValueError("A sold order requires a payment_method.")
        if self.outcome == BuyerOutcome.NOT_SOLD and self.reason_not_sold is None:
            raise ValueError("A not sold order requires a reason_not_sold.")
        if self.payment_method is not None and self.outcome != BuyerOutcome.SOLD:
            raise ValueError("payment_method is only allowed for sold orders.")
        if self.reason_not_sold is not None and self.outcome != BuyerOutcome.NOT_SOLD:
            raise ValueError("reason_not_sold is only allowed for not sold orders.")
        return self
