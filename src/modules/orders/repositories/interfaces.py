"""Order repository interface.

Extends ``IRepository[Order]`` with the operations required by the
order workflow: creation from validated data, bulk deletion and the
fulfillment normalization pass.

The Service Layer depends exclusively on this contract (DIP).
Implementations raise ``OrderStoreError`` when persistence fails.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order from already validated field values."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with its assigned principals resolved."""

    @abstractmethod
    def list(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> "models.QuerySet[Order]":
        """List orders, most recent first.

        ``filters`` may hold ORM look-ups and/or a ``Q`` under ``"q"``.
        """

    @abstractmethod
    def delete_all(self) -> int:
        """Remove every order and return how many were deleted."""

    @abstractmethod
    def reset_fulfillment(self, status: str) -> int:
        """Set every order's fulfillment status and clear ``is_retrying``."""
