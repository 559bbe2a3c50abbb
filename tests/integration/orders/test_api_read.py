"""Integration tests for the order read endpoints.

Covers:
- Role gates on every list endpoint.
- Scoping: own orders, unassigned pool, recent window.
- Single-order retrieval honouring the visibility policy.
- Filtering and pagination on list endpoints.
"""

from __future__ import annotations

from datetime import date, timedelta
from uuid import uuid4

import pytest
from django.utils import timezone
from freezegun import freeze_time

from modules.orders.constants import ConfirmationStatus, OrderKind

pytestmark = pytest.mark.integration


def _ids(response) -> set[str]:
    return {item["id"] for item in response.json()["results"]}


class TestListEndpoints:
    def test_all_for_admin(self, client_for, admin_user, make_order, confirmer):
        first = make_order()
        second = make_order(confirmer=confirmer)

        response = client_for(admin_user).get("/api/v1/orders/all/")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [item["id"] for item in data["results"]] == [
            str(second.id),
            str(first.id),
        ]

    @pytest.mark.parametrize("fixture", ["confirmer", "buyer", "client_user"])
    def test_all_forbidden_for_non_admin(self, request, client_for, fixture):
        user = request.getfixturevalue(fixture)

        response = client_for(user).get("/api/v1/orders/all/")

        assert response.status_code == 403
        assert response.json()["type"] == "client_error"

    def test_lists_require_authentication(self, api_client):
        for url in (
            "/api/v1/orders/all/",
            "/api/v1/orders/recent/",
            "/api/v1/orders/confirmer/",
            "/api/v1/orders/unassigned/",
            "/api/v1/orders/buyer/",
        ):
            assert api_client.get(url).status_code == 401

    def test_confirmer_sees_own(
        self, client_for, confirmer, other_confirmer, make_order
    ):
        own = make_order(confirmer=confirmer)
        make_order(confirmer=other_confirmer)
        make_order()

        response = client_for(confirmer).get("/api/v1/orders/confirmer/")

        assert response.status_code == 200
        assert _ids(response) == {str(own.id)}

    def test_unassigned_pool(self, client_for, confirmer, make_order):
        pool = make_order()
        make_order(confirmer=confirmer)

        response = client_for(confirmer).get("/api/v1/orders/unassigned/")

        assert _ids(response) == {str(pool.id)}

    def test_unassigned_forbidden_for_admin(self, client_for, admin_user):
        response = client_for(admin_user).get("/api/v1/orders/unassigned/")

        assert response.status_code == 403

    def test_buyer_sees_assigned(self, client_for, buyer, other_buyer, make_order):
        own = make_order(buyer=buyer)
        make_order(buyer=other_buyer)

        response = client_for(buyer).get("/api/v1/orders/buyer/")

        assert _ids(response) == {str(own.id)}

    def test_buyer_endpoint_forbidden_for_confirmer(self, client_for, confirmer):
        assert client_for(confirmer).get("/api/v1/orders/buyer/").status_code == 403

    def test_recent_window(self, client_for, admin_user, make_order):
        with freeze_time(timezone.now() - timedelta(minutes=6)):
            make_order()
        fresh = make_order()

        response = client_for(admin_user).get("/api/v1/orders/recent/")

        assert _ids(response) == {str(fresh.id)}

    def test_recent_for_confirmer_excludes_pool(
        self, client_for, confirmer, other_confirmer, make_order
    ):
        pool = make_order()
        own = make_order(confirmer=confirmer)
        make_order(confirmer=other_confirmer)

        response = client_for(confirmer).get("/api/v1/orders/recent/")

        assert _ids(response) == {str(own.id)}
        assert str(pool.id) not in _ids(response)

    def test_recent_forbidden_for_buyer(self, client_for, buyer):
        assert client_for(buyer).get("/api/v1/orders/recent/").status_code == 403


class TestFilteringAndPagination:
    def test_filter_by_kind(self, client_for, admin_user, make_order):
        course = make_order(kind=OrderKind.COURSE)
        make_order(kind=OrderKind.USB)

        response = client_for(admin_user).get("/api/v1/orders/all/?kind=course")

        assert _ids(response) == {str(course.id)}

    def test_filter_by_confirmation_status(self, client_for, admin_user, make_order):
        confirmed = make_order(confirmation_status=ConfirmationStatus.CALL_CONFIRMED)
        make_order()

        response = client_for(admin_user).get(
            "/api/v1/orders/all/?confirmation_status=call_confirmed"
        )

        assert _ids(response) == {str(confirmed.id)}

    def test_filter_by_scheduled_range(self, client_for, admin_user, make_order):
        make_order(scheduled_day=date(2026, 11, 1))
        inside = make_order(scheduled_day=date(2026, 11, 5))
        make_order(scheduled_day=date(2026, 11, 20))

        response = client_for(admin_user).get(
            "/api/v1/orders/all/?scheduled_from=2026-11-03&scheduled_to=2026-11-10"
        )

        assert _ids(response) == {str(inside.id)}

    def test_invalid_filter_value(self, client_for, admin_user):
        response = client_for(admin_user).get("/api/v1/orders/all/?kind=book")

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_page_size(self, client_for, admin_user, make_order):
        for _ in range(3):
            make_order()

        response = client_for(admin_user).get("/api/v1/orders/all/?page_size=2")

        data = response.json()
        assert data["count"] == 3
        assert len(data["results"]) == 2
        assert data["next"] is not None


class TestRetrieve:
    def test_admin_retrieves_any(self, client_for, admin_user, make_order):
        order = make_order()

        response = client_for(admin_user).get(f"/api/v1/orders/{order.id}/")

        assert response.status_code == 200
        assert response.json()["id"] == str(order.id)

    def test_confirmer_retrieves_pool_order(self, client_for, confirmer, make_order):
        order = make_order()

        response = client_for(confirmer).get(f"/api/v1/orders/{order.id}/")

        assert response.status_code == 200

    def test_confirmer_cannot_retrieve_foreign(
        self, client_for, confirmer, other_confirmer, make_order
    ):
        order = make_order(confirmer=other_confirmer)

        response = client_for(confirmer).get(f"/api/v1/orders/{order.id}/")

        assert response.status_code == 403

    def test_client_cannot_retrieve(self, client_for, client_user, make_order):
        order = make_order()

        response = client_for(client_user).get(f"/api/v1/orders/{order.id}/")

        assert response.status_code == 403

    def test_missing_order(self, client_for, admin_user):
        response = client_for(admin_user).get(f"/api/v1/orders/{uuid4()}/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "not_found"

    def test_malformed_id(self, client_for, admin_user):
        response = client_for(admin_user).get("/api/v1/orders/not-a-uuid/")

        assert response.status_code == 404
