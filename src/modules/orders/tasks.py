"""Asynchronous tasks for the orders module."""

import structlog
from celery import shared_task

from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService

logger = structlog.get_logger(__name__)


@shared_task(name="orders.normalize_fulfillment")
def normalize_fulfillment() -> dict:
    """Reset every order's fulfillment status to ``not_processed_yet``."""
    service = OrderService(OrderDjangoRepository(), UserDjangoRepository())
    updated = service.normalize_fulfillment()
    logger.info("normalize_fulfillment.executed", updated=updated)
    return {"status": "ok", "updated": updated}
