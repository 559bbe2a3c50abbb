"""Order URL configuration.

Collection-level routes are listed before ``orders/<pk>/`` so that
``recent``, ``all`` and friends are never read as order ids.
"""

from __future__ import annotations

from django.urls import path

from modules.orders.views import OrderViewSet

order_collection = OrderViewSet.as_view({"post": "create", "delete": "destroy_all"})
order_detail = OrderViewSet.as_view({"get": "retrieve", "delete": "destroy"})

urlpatterns = [
    path("orders/", order_collection, name="order-list"),
    path(
        "orders/authenticated/",
        OrderViewSet.as_view({"post": "create_authenticated"}),
        name="order-create-authenticated",
    ),
    path("orders/recent/", OrderViewSet.as_view({"get": "recent"}), name="order-recent"),
    path("orders/all/", OrderViewSet.as_view({"get": "all_orders"}), name="order-all"),
    path(
        "orders/confirmer/",
        OrderViewSet.as_view({"get": "confirmer"}),
        name="order-confirmer",
    ),
    path(
        "orders/unassigned/",
        OrderViewSet.as_view({"get": "unassigned"}),
        name="order-unassigned",
    ),
    path("orders/buyer/", OrderViewSet.as_view({"get": "buyer"}), name="order-buyer"),
    path("orders/<str:pk>/", order_detail, name="order-detail"),
    path(
        "orders/<str:pk>/confirmer-status/",
        OrderViewSet.as_view({"put": "confirmer_status"}),
        name="order-confirmer-status",
    ),
    path(
        "orders/<str:pk>/buyer-status/",
        OrderViewSet.as_view({"put": "buyer_status"}),
        name="order-buyer-status",
    ),
]
