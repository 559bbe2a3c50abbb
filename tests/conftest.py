from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Callable, Optional

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.accounts.models import Role, User
from modules.orders.constants import (
    ConfirmationStatus,
    FulfillmentStatus,
    OrderKind,
)
from modules.orders.models import Order


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Principals
# ---------------------------------------------------------------------------


def _make_user(username: str, role: str) -> User:
    return User.objects.create_user(username=username, password="testpass123", role=role)


@pytest.fixture()
def admin_user():
    return _make_user("admin_user", Role.ADMIN)


@pytest.fixture()
def confirmer():
    return _make_user("confirmer_a", Role.CONFIRMER)


@pytest.fixture()
def other_confirmer():
    return _make_user("confirmer_b", Role.CONFIRMER)


@pytest.fixture()
def buyer():
    return _make_user("buyer_a", Role.BUYER)


@pytest.fixture()
def other_buyer():
    return _make_user("buyer_b", Role.BUYER)


@pytest.fixture()
def client_user():
    return _make_user("client_a", Role.CLIENT)


@pytest.fixture()
def client_for() -> Callable[[User], APIClient]:
    """Return an APIClient force-authenticated as the given principal."""

    def _client_for(user: User) -> APIClient:
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client_for


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@pytest.fixture()
def order_payload() -> dict:
    return {
        "kind": "usb",
        "price": "149.00",
        "phone_number": "0612345678",
        "full_name": "Amine Benali",
        "scheduled_time": {"day": "2026-11-02", "hour": "10:30"},
        "description": "32GB USB key with the full course",
    }


@pytest.fixture()
def make_order() -> Callable[..., Order]:
    """Factory creating orders directly through the ORM."""

    def _make_order(
        confirmer: Optional[User] = None,
        buyer: Optional[User] = None,
        **overrides,
    ) -> Order:
        fields = {
            "kind": OrderKind.USB,
            "price": Decimal("149.00"),
            "phone_number": "0612345678",
            "full_name": "Amine Benali",
            "scheduled_day": date(2026, 11, 2),
            "scheduled_hour": "10:30",
            "description": "32GB USB key with the full course",
            "assigned_confirmer": confirmer,
            "assigned_buyer": buyer,
            "confirmation_status": ConfirmationStatus.CALL_NOT_RESPONSE,
            "fulfillment_status": FulfillmentStatus.USER_RESPONSE,
        }
        fields.update(overrides)
        return Order.objects.create(**fields)

    return _make_order
