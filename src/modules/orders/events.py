"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is submitted or created by staff."""


@dataclass(frozen=True)
class OrderUpdated(DomainEvent):
    """Raised when the confirmation or fulfillment part of an order changes.

    ``section`` is ``"confirmation"`` or ``"fulfillment"``.
    """

    section: str = ""
