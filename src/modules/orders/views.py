"""Order API views.

Exposes the ``OrderService`` via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.

Role gates and ownership checks live in the service, so every endpoint
except the public submission only requires an authenticated principal
here.
"""

from __future__ import annotations

import structlog
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.core.exceptions import error_response
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import (
    AssignmentDTO,
    ConfirmationPatchDTO,
    CreateOrderDTO,
    FulfillmentPatchDTO,
)
from modules.orders.exceptions import (
    InvalidAssignment,
    NotAuthorized,
    OrderDomainError,
    OrderNotFound,
    OrderStoreError,
    OrderValidationError,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    AuthenticatedCreateOrderSerializer,
    ConfirmationPatchSerializer,
    CreateOrderSerializer,
    FulfillmentPatchSerializer,
    OrderSerializer,
)
from modules.orders.services import OrderService

logger = structlog.get_logger(__name__)

_LIST_ACTIONS = {"recent", "all_orders", "confirmer", "unassigned", "buyer", "retrieve"}

_ERROR_STATUS = (
    (OrderValidationError, status.HTTP_400_BAD_REQUEST, "invalid"),
    (InvalidAssignment, status.HTTP_400_BAD_REQUEST, "invalid_assignment"),
    (NotAuthorized, status.HTTP_403_FORBIDDEN, "permission_denied"),
    (OrderNotFound, status.HTTP_404_NOT_FOUND, "not_found"),
)


def _domain_error_response(exc: OrderDomainError) -> Response:
    if isinstance(exc, OrderStoreError):
        logger.error("order.store_error", error=str(exc))
        return error_response(
            "Internal server error.",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            code="store_error",
        )
    for exc_type, status_code, code in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            error_type = "validation_error" if status_code == 400 else None
            return error_response(str(exc), status_code, code=code, error_type=error_type)
    raise exc


class OrderViewSet(GenericViewSet):
    """ViewSet for the order workflow.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.  Routes are bound explicitly in
    ``urls.py`` because ``DELETE orders/`` has no router equivalent.
    """

    queryset = Order.objects.all()
    serializer_class = OrderSerializer
    filterset_class = OrderFilter
    filter_backends = [DjangoFilterBackend]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            user_repository=UserDjangoRepository(),
        )

    def get_permissions(self):
        if self.action == "create":
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_throttles(self) -> list[BaseThrottle]:
        """Define throttling scopes per action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in _LIST_ACTIONS:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def _paginated(self, queryset) -> Response:
        queryset = self.filter_queryset(queryset)
        page = self.paginate_queryset(queryset)
        serializer = OrderSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Public submission: no authentication, no assignment.
        """
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateOrderDTO.from_payload(serializer.validated_data)
            order = self._service.create_order(dto)
        except OrderDomainError as exc:
            return _domain_error_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def create_authenticated(self, request: Request) -> Response:
        """POST /api/v1/orders/authenticated/

        Accepts optional ``confirmer_id`` / ``buyer_id`` assignments.
        """
        serializer = AuthenticatedCreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            dto = CreateOrderDTO.from_payload(data)
            assignment = AssignmentDTO.from_payload(data)
            order = self._service.create_order(dto, assignment)
        except OrderDomainError as exc:
            return _domain_error_response(exc)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def recent(self, request: Request) -> Response:
        """GET /api/v1/orders/recent/ (orders created in the last 5 minutes)"""
        try:
            queryset = self._service.list_recent(request.user)
        except OrderDomainError as exc:
            return _domain_error_response(exc)
        return self._paginated(queryset)

    def all_orders(self, request: Request) -> Response:
        """GET /api/v1/orders/all/"""
        try:
            queryset = self._service.list_all(request.user)
        except OrderDomainError as exc:
            return _domain_error_response(exc)
        return self._paginated(queryset)

    def confirmer(self, request: Request) -> Response:
        """GET /api/v1/orders/confirmer/"""
        try:
            queryset = self._service.list_for_confirmer(request.user)
        except OrderDomainError as exc:
            return _domain_error_response(exc)
        return self._paginated(queryset)

    def unassigned(self, request: Request) -> Response:
        """GET /api/v1/orders/unassigned/"""
        try:
            queryset = self._service.list_unassigned(request.user)
        except OrderDomainError as exc:
            return _domain_error_response(exc)
        return self._paginated(queryset)

    def buyer(self, request: Request) -> Response:
        """GET /api/v1/orders/buyer/"""
        try:
            queryset = self._service.list_for_buyer(request.user)
        except OrderDomainError as exc:
            return _domain_error_response(exc)
        return self._paginated(queryset)

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk, request.user)
        except OrderDomainError as exc:
            return _domain_error_response(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status updates
    # ------------------------------------------------------------------

    def confirmer_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/confirmer-status/"""
        serializer = ConfirmationPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            patch = ConfirmationPatchDTO.from_payload(serializer.validated_data)
            order = self._service.update_confirmation(pk, request.user, patch)
        except OrderDomainError as exc:
            return _domain_error_response(exc)

        return Response(OrderSerializer(order).data)

    def buyer_status(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/buyer-status/"""
        serializer = FulfillmentPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            patch = FulfillmentPatchDTO.from_payload(serializer.validated_data)
            order = self._service.update_fulfillment(pk, request.user, patch)
        except OrderDomainError as exc:
            return _domain_error_response(exc)

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/"""
        try:
            deleted = self._service.delete_order(pk, request.user)
        except OrderDomainError as exc:
            return _domain_error_response(exc)
        return Response({"deleted": deleted})

    def destroy_all(self, request: Request) -> Response:
        """DELETE /api/v1/orders/"""
        try:
            deleted = self._service.delete_all_orders(request.user)
        except OrderDomainError as exc:
            return _domain_error_response(exc)
        return Response({"deleted": deleted})
