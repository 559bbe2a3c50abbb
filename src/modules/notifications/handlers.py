"""Event handlers bridging order domain events to the notification fanout."""

from __future__ import annotations

from typing import TYPE_CHECKING, Union

import structlog

from modules.notifications.messages import (
    NEW_ORDER,
    ORDER_UPDATED,
    build_order_notification,
)
from modules.orders.events import OrderCreated, OrderUpdated
from shared.domain.bus import IEventHandler

if TYPE_CHECKING:
    from modules.notifications.fanout import NotificationFanout
    from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class OrderNotificationHandler(IEventHandler[Union[OrderCreated, OrderUpdated]]):
    """Broadcast a notification for every created or updated order.

    Runs after the originating transaction commits.  Failures are logged
    here so a broken notification never fails the request that caused it.
    """

    def __init__(
        self, fanout: NotificationFanout, order_repository: IOrderRepository
    ) -> None:
        self._fanout = fanout
        self._order_repo = order_repository

    def handle(self, event: Union[OrderCreated, OrderUpdated]) -> None:
        event_type = NEW_ORDER if isinstance(event, OrderCreated) else ORDER_UPDATED
        log = logger.bind(order_id=str(event.aggregate_id), event_type=event_type)

        try:
            order = self._order_repo.get_by_id(str(event.aggregate_id))
            if order is None:
                log.warning("notification.order_missing")
                return
            self._fanout.broadcast(build_order_notification(order, event_type))
        except Exception as exc:
            log.error("notification.handler_failed", error=str(exc))
