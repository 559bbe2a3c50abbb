"""Unit tests for the Order model and its domain event buffer."""

from __future__ import annotations

import pytest

from modules.orders.constants import ConfirmationStatus, FulfillmentStatus
from modules.orders.events import OrderCreated, OrderUpdated
from modules.orders.models import Order

pytestmark = pytest.mark.unit


def test_model_defaults():
    order = Order()

    assert order.confirmation_status == ConfirmationStatus.CALL_NOT_RESPONSE
    assert order.call_attempts == 0
    assert order.fulfillment_status == FulfillmentStatus.NOT_PROCESSED_YET
    assert order.is_retrying is False
    assert order.is_in_pool


def test_record_call_attempt_only_grows(make_order):
    order = make_order()

    order.record_call_attempt()
    order.record_call_attempt()

    assert order.call_attempts == 2


def test_pool_membership_follows_confirmer(make_order, confirmer):
    assert make_order().is_in_pool
    assert not make_order(confirmer=confirmer).is_in_pool


def test_deleting_confirmer_returns_order_to_pool(make_order, confirmer):
    order = make_order(confirmer=confirmer)

    confirmer.delete()
    order.refresh_from_db()

    assert order.is_in_pool


def test_order_registers_and_clears_domain_events(make_order):
    order = make_order()
    assert order.domain_events == []

    created = OrderCreated(aggregate_id=order.id)
    updated = OrderUpdated(aggregate_id=order.id, section="confirmation")
    order.add_domain_event(created)
    order.add_domain_event(updated)

    assert order.domain_events == [created, updated]
    assert created.event_name == "OrderCreated"
    assert updated.event_name == "OrderUpdated"

    order.clear_domain_events()
    assert order.domain_events == []
