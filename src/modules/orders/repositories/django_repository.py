"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.

Updates are plain read-modify-write: ``save`` persists the whole row with
no row lock and no version check, so concurrent updates of the same order
are last-write-wins.  Database failures are logged and re-raised as
``OrderStoreError`` so the Service Layer never sees driver exceptions.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import DatabaseError, models, transaction

from modules.orders.exceptions import OrderStoreError
from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order.

        ``data`` holds model field names (``kind``, ``price``,
        ``scheduled_day``, ``assigned_confirmer_id``...).
        """
        order = Order(**data)
        try:
            order.save()
        except DatabaseError as exc:
            logger.error("order.store_failed", operation="create", error=str(exc))
            raise OrderStoreError("Could not create order.") from exc

        logger.info("order.persisted", order_id=str(order.id))
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _base_queryset(self) -> models.QuerySet[Order]:
        return Order.objects.select_related("assigned_confirmer", "assigned_buyer")

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with both assigned principals joined.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return self._base_queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        except DatabaseError as exc:
            logger.error("order.store_failed", operation="get", error=str(exc))
            raise OrderStoreError("Could not load order.") from exc

    def list(self, filters: Optional[Dict[str, Any]] = None) -> models.QuerySet[Order]:
        """List orders sorted by creation time, most recent first.

        Examples of valid filters::

            {"assigned_buyer_id": user.id}
            {"q": Q(assigned_confirmer__isnull=True), "created_at__gte": since}
        """
        queryset = self._base_queryset()
        if filters:
            lookups = dict(filters)
            condition = lookups.pop("q", None)
            if condition is not None:
                queryset = queryset.filter(condition)
            if lookups:
                queryset = queryset.filter(**lookups)
        return queryset.order_by("-created_at", "-id")

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist the whole order (last-write-wins)."""
        try:
            entity.save()
        except DatabaseError as exc:
            logger.error(
                "order.store_failed",
                operation="save",
                order_id=str(entity.id),
                error=str(exc),
            )
            raise OrderStoreError("Could not save order.") from exc

        logger.info("order.saved", order_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete an order by ID."""
        try:
            deleted, _ = Order.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        except DatabaseError as exc:
            logger.error(
                "order.store_failed", operation="delete", order_id=str(id), error=str(exc)
            )
            raise OrderStoreError("Could not delete order.") from exc

        if deleted:
            logger.info("order.deleted", order_id=str(id))
        return bool(deleted)

    @transaction.atomic
    def delete_all(self) -> int:
        try:
            deleted, _ = Order.objects.all().delete()
        except DatabaseError as exc:
            logger.error("order.store_failed", operation="delete_all", error=str(exc))
            raise OrderStoreError("Could not delete orders.") from exc

        logger.info("order.deleted_all", count=deleted)
        return deleted

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    @transaction.atomic
    def reset_fulfillment(self, status: str) -> int:
        try:
            updated = Order.objects.update(fulfillment_status=status, is_retrying=False)
        except DatabaseError as exc:
            logger.error(
                "order.store_failed", operation="reset_fulfillment", error=str(exc)
            )
            raise OrderStoreError("Could not normalize orders.") from exc

        logger.info("order.fulfillment_reset", status=status, count=updated)
        return updated
