"""Notification payload builders."""

from __future__ import annotations

from typing import Any

import uuid6
from django.utils import timezone

from modules.orders.constants import OrderKind
from modules.orders.models import Order
from modules.orders.serializers import OrderSerializer

NEW_ORDER = "new_order"
ORDER_UPDATED = "order_updated"

_KIND_LABELS = {
    OrderKind.USB: "USB",
    OrderKind.COURSE: "course",
}


def build_order_notification(order: Order, event_type: str) -> dict[str, Any]:
    """Return the event pushed to listeners for *order*."""
    kind_label = _KIND_LABELS.get(order.kind, str(order.kind))
    if event_type == NEW_ORDER:
        title = "New order"
        message = f"New {kind_label} order from {order.full_name}"
    else:
        title = "Order updated"
        message = f"Updated {kind_label} order from {order.full_name}"

    return {
        "id": str(uuid6.uuid7()),
        "type": event_type,
        "title": title,
        "message": message,
        "data": OrderSerializer(order).data,
        "timestamp": timezone.now().isoformat(),
        "read": False,
    }
