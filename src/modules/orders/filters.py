import django_filters

from modules.orders.constants import ConfirmationStatus, FulfillmentStatus, OrderKind
from modules.orders.models import Order


class OrderFilter(django_filters.FilterSet):
    kind = django_filters.ChoiceFilter(choices=OrderKind.choices)
    confirmation_status = django_filters.ChoiceFilter(
        choices=ConfirmationStatus.choices
    )
    fulfillment_status = django_filters.ChoiceFilter(choices=FulfillmentStatus.choices)
    scheduled_from = django_filters.DateFilter(
        field_name="scheduled_day", lookup_expr="gte"
    )
    scheduled_to = django_filters.DateFilter(
        field_name="scheduled_day", lookup_expr="lte"
    )

    class Meta:
        model = Order
        fields = [
            "kind",
            "confirmation_status",
            "fulfillment_status",
            "scheduled_from",
            "scheduled_to",
        ]
