"""Generic repository interface.

``IRepository[T]`` is the base contract every aggregate repository
extends.  Services depend on it and receive a concrete implementation
through their constructor, so the ORM stays behind the repository.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base repository contract for an aggregate root ``T``.

    Look-ups by a malformed identifier behave like look-ups of a missing
    one: ``get_by_id`` returns ``None`` and ``delete`` returns ``False``.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its primary key."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> Iterable[T]:
        """List entities matching ``filters``."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist the full state of an entity."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Permanently remove an entity; ``False`` when nothing matched."""
