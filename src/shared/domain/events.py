"""Domain event primitives.

Aggregates collect events while a use case runs; the service publishes
them on the event bus once the surrounding transaction has committed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

import uuid6


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable)."""

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid6.uuid7)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)


class DomainEventMixin:
    """Mixin for aggregate roots that buffer domain events in memory.

    The buffer lives on the instance only; it is never persisted.
    """

    _domain_events: list[DomainEvent]

    def _event_buffer(self) -> list[DomainEvent]:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        return self._domain_events

    def add_domain_event(self, event: DomainEvent) -> None:
        self._event_buffer().append(event)

    def clear_domain_events(self) -> None:
        self._event_buffer().clear()

    @property
    def domain_events(self) -> list[DomainEvent]:
        return list(self._event_buffer())
