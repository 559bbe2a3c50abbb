"""Integration tests for the management commands."""

from io import StringIO

import pytest
from django.core.management import call_command

from modules.accounts.models import Role, User
from modules.orders.constants import FulfillmentStatus
from modules.orders.models import Order

pytestmark = pytest.mark.integration


class TestNormalizeFulfillmentCommand:
    def test_resets_every_order(self, make_order):
        make_order(fulfillment_status=FulfillmentStatus.USER_PHONE_CLOSED)
        make_order(fulfillment_status=FulfillmentStatus.RETRYING, is_retrying=True)
        out = StringIO()

        call_command("normalize_fulfillment", stdout=out)

        assert "Normalized 2 orders." in out.getvalue()
        assert set(Order.objects.values_list("fulfillment_status", flat=True)) == {
            FulfillmentStatus.NOT_PROCESSED_YET
        }


class TestSeedDataCommand:
    def test_creates_principals_and_orders(self):
        call_command("seed_data", "--orders", "6", stdout=StringIO())

        assert User.objects.get(username="admin").role == Role.ADMIN
        assert User.objects.get(username="confirmer1").role == Role.CONFIRMER
        assert User.objects.get(username="buyer1").role == Role.BUYER
        assert User.objects.get(username="client1").role == Role.CLIENT
        assert Order.objects.count() == 6
        assert Order.objects.filter(assigned_confirmer__isnull=True).exists()

    def test_is_rerunnable_for_principals(self):
        call_command("seed_data", "--orders", "1", stdout=StringIO())
        call_command("seed_data", "--orders", "1", stdout=StringIO())

        assert User.objects.filter(username="admin").count() == 1
