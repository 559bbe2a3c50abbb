"""E2E tests for the order workflow using Playwright."""

from __future__ import annotations

import json

import pytest

pytestmark = [pytest.mark.e2e]

ORDER_PAYLOAD = {
    "kind": "course",
    "price": "99.00",
    "phone_number": "0623456789",
    "full_name": "Sara El Idrissi",
    "scheduled_time": {"day": "2026-11-03", "hour": "14:00"},
    "description": "Online marketing course",
}


def _headers(token: str | None = None) -> dict[str, str]:
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def test_public_order_then_confirmer_follow_up(api_request_context, role_token):
    admin_token = role_token("admin")
    confirmer_token = role_token("confirmer")

    created = api_request_context.post(
        "/api/v1/orders/", data=json.dumps(ORDER_PAYLOAD), headers=_headers()
    )
    assert created.status == 201
    order_id = created.json()["id"]

    pool = api_request_context.get(
        f"/api/v1/orders/{order_id}/", headers=_headers(confirmer_token)
    )
    assert pool.status == 200
    assert pool.json()["confirmation"]["assigned_confirmer"] is None

    denied = api_request_context.put(
        f"/api/v1/orders/{order_id}/confirmer-status/",
        data=json.dumps({"status": "call_confirmed"}),
        headers=_headers(confirmer_token),
    )
    assert denied.status == 403

    deleted = api_request_context.delete(
        f"/api/v1/orders/{order_id}/", headers=_headers(admin_token)
    )
    assert deleted.status == 200
    assert deleted.json() == {"deleted": 1}

    missing = api_request_context.get(
        f"/api/v1/orders/{order_id}/", headers=_headers(admin_token)
    )
    assert missing.status == 404


def test_notification_stream_greets_listener(page):
    """A browser EventSource receives the connected greeting."""
    page.goto("/health")
    greeting = page.evaluate(
        """() => new Promise((resolve, reject) => {
            const source = new EventSource('/api/v1/notifications/');
            source.onmessage = (event) => { source.close(); resolve(JSON.parse(event.data)); };
            source.onerror = () => { source.close(); reject(new Error('stream failed')); };
        })"""
    )
    assert greeting["type"] == "connected"
