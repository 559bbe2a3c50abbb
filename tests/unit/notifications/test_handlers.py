"""Unit tests for order notifications: payload building and the bus handler."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.notifications.fanout import NotificationFanout
from modules.notifications.handlers import OrderNotificationHandler
from modules.notifications.messages import (
    NEW_ORDER,
    ORDER_UPDATED,
    build_order_notification,
)
from modules.orders.constants import OrderKind
from modules.orders.events import OrderCreated, OrderUpdated
from modules.orders.repositories.django_repository import OrderDjangoRepository

pytestmark = pytest.mark.unit


class RecordingFanout:
    def __init__(self) -> None:
        self.events = []

    def broadcast(self, event) -> int:
        self.events.append(event)
        return 1


class FailingRepository:
    def get_by_id(self, id):
        raise RuntimeError("store unavailable")


class TestBuildOrderNotification:
    def test_new_usb_order(self, make_order):
        order = make_order(full_name="Omar Fassi")

        event = build_order_notification(order, NEW_ORDER)

        assert event["type"] == "new_order"
        assert event["title"] == "New order"
        assert event["message"] == "New USB order from Omar Fassi"
        assert event["read"] is False
        assert event["data"]["id"] == str(order.id)
        assert event["id"]
        assert event["timestamp"]

    def test_new_course_order(self, make_order):
        order = make_order(kind=OrderKind.COURSE, full_name="Nadia Berrada")

        event = build_order_notification(order, NEW_ORDER)

        assert event["message"] == "New course order from Nadia Berrada"

    def test_updated_order(self, make_order):
        event = build_order_notification(make_order(), ORDER_UPDATED)

        assert event["type"] == "order_updated"
        assert event["title"] == "Order updated"

    def test_data_has_nested_sections(self, make_order, confirmer):
        event = build_order_notification(make_order(confirmer=confirmer), NEW_ORDER)

        data = event["data"]
        assert data["confirmation"]["assigned_confirmer"]["username"] == "confirmer_a"
        assert data["confirmation"]["status"] == "call_not_response"
        assert data["fulfillment"]["status"] == "user_response"
        assert data["scheduled_time"] == {"day": "2026-11-02", "hour": "10:30"}


class TestOrderNotificationHandler:
    def test_created_event_broadcasts_new_order(self, make_order):
        fanout = RecordingFanout()
        handler = OrderNotificationHandler(fanout, OrderDjangoRepository())
        order = make_order()

        handler.handle(OrderCreated(aggregate_id=order.id))

        assert [e["type"] for e in fanout.events] == ["new_order"]

    def test_updated_event_broadcasts_order_updated(self, make_order):
        fanout = RecordingFanout()
        handler = OrderNotificationHandler(fanout, OrderDjangoRepository())
        order = make_order()

        handler.handle(OrderUpdated(aggregate_id=order.id, section="fulfillment"))

        assert [e["type"] for e in fanout.events] == ["order_updated"]

    def test_missing_order_is_skipped(self):
        fanout = RecordingFanout()
        handler = OrderNotificationHandler(fanout, OrderDjangoRepository())

        handler.handle(OrderCreated(aggregate_id=uuid4()))

        assert fanout.events == []

    def test_failures_never_propagate(self):
        fanout = RecordingFanout()
        handler = OrderNotificationHandler(fanout, FailingRepository())

        handler.handle(OrderCreated(aggregate_id=uuid4()))

        assert fanout.events == []

    def test_delivers_to_real_fanout(self, make_order):
        fanout = NotificationFanout()
        received = []

        class Channel:
            def send(self, payload):
                received.append(payload)

        fanout.register(Channel())
        handler = OrderNotificationHandler(fanout, OrderDjangoRepository())

        handler.handle(OrderCreated(aggregate_id=make_order().id))

        assert len(received) == 2
        assert '"new_order"' in received[1]
