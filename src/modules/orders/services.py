"""Order service layer (Use Cases).

Orchestrates the order lifecycle: creation, confirmation updates,
fulfillment updates, deletion and the role-scoped queries.  Every
command is atomic and performs a single read-modify-write without
row locks, so concurrent updates of the same order are last-write-wins.

Business rules enforced:
- New orders start at ``call_not_response`` with zero call attempts.
- Assigned confirmers/buyers must exist and hold the matching role.
- Only admins or the assigned confirmer update the confirmation part.
- Only admins or the assigned buyer update the fulfillment part.
- Every update targeting ``call_not_response`` counts one call attempt.
- A sale outcome needs an assigned buyer.

Domain events are published on the event bus once the transaction
commits; the notification fanout listens there.
"""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING, Any, Dict, Optional

import structlog
from django.db import models, transaction
from django.utils import timezone

from modules.accounts.models import Role
from modules.orders import policies
from modules.orders.constants import (
    INITIAL_CONFIRMATION_STATUS,
    INITIAL_FULFILLMENT_STATUS,
    NORMALIZED_FULFILLMENT_STATUS,
    RECENT_ORDERS_WINDOW,
    BuyerOutcome,
    ConfirmationStatus,
)
from modules.orders.events import OrderCreated, OrderUpdated
from modules.orders.exceptions import (
    InvalidAssignment,
    NotAuthorized,
    OrderNotFound,
    OrderValidationError,
)
from shared.infrastructure.bus import event_bus as default_event_bus

if TYPE_CHECKING:
    from modules.accounts.models import User
    from modules.accounts.repositories.interfaces import IUserRepository
    from modules.orders.dtos import (
        AssignmentDTO,
        ConfirmationPatchDTO,
        CreateOrderDTO,
        FulfillmentPatchDTO,
    )
    from modules.orders.models import Order
    from modules.orders.policies import Principal
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and the event bus via constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        user_repository: IUserRepository,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._user_repo = user_repository
        self._event_bus = event_bus or default_event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_order(
        self,
        dto: CreateOrderDTO,
        assignment: Optional[AssignmentDTO] = None,
    ) -> Order:
        """Create a new order, optionally pre-assigned.

        Raises:
            InvalidAssignment: a referenced confirmer/buyer is missing or
                holds another role.
        """
        log = logger.bind(kind=str(dto.kind), assigned=assignment is not None)
        log.info("order.creation_started")

        confirmer = buyer = None
        if assignment is not None:
            confirmer = self._resolve_assignee(assignment.confirmer_id, Role.CONFIRMER)
            buyer = self._resolve_assignee(assignment.buyer_id, Role.BUYER)

        order = self._order_repo.create(
            {
                "kind": dto.kind,
                "price": dto.price,
                "phone_number": dto.phone_number,
                "full_name": dto.full_name,
                "scheduled_day": dto.scheduled_time.day,
                "scheduled_hour": dto.scheduled_time.hour,
                "photo": dto.photo,
                "description": dto.description,
                "additional_notes": dto.additional_notes,
                "assigned_confirmer": confirmer,
                "assigned_buyer": buyer,
                "confirmation_status": INITIAL_CONFIRMATION_STATUS,
                "call_attempts": 0,
                "fulfillment_status": INITIAL_FULFILLMENT_STATUS,
                "is_retrying": False,
            }
        )
        order.add_domain_event(OrderCreated(aggregate_id=order.id))
        self._dispatch_events(order)

        log.info("order.created", order_id=str(order.id))
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_confirmation(
        self,
        order_id: str,
        principal: Principal,
        patch: ConfirmationPatchDTO,
    ) -> Order:
        """Apply a confirmation patch.

        Statuses are assigned directly; there is no transition table.
        Assignment changes are validated before anything is mutated, so
        a rejected patch leaves the order untouched.

        Raises:
            NotAuthorized: principal is neither admin nor the assigned
                confirmer (unassigned pool orders included).
            OrderNotFound: order does not exist.
            InvalidAssignment: new confirmer/buyer is missing or has the
                wrong role.
        """
        policies.require_role(principal, Role.ADMIN, Role.CONFIRMER)
        order = self._get_existing(order_id)

        log = logger.bind(order_id=str(order_id), principal_id=str(principal.id))

        if not policies.can_update_confirmation(principal, order):
            log.warning("order.confirmation_update_denied")
            raise NotAuthorized("Not authorized to update this order.")

        changes = {}
        if patch.provided("current_confirmer"):
            changes["assigned_confirmer"] = self._resolve_assignee(
                patch.current_confirmer, Role.CONFIRMER
            )
        if patch.provided("buyer"):
            changes["assigned_buyer"] = self._resolve_assignee(patch.buyer, Role.BUYER)

        for field, value in changes.items():
            setattr(order, field, value)

        if patch.status is not None:
            order.confirmation_status = patch.status
            if patch.status == ConfirmationStatus.CALL_NOT_RESPONSE:
                order.record_call_attempt()

        if patch.rendezvous is not None:
            order.rendezvous_date = patch.rendezvous.date
            order.rendezvous_hour = patch.rendezvous.hour

        if patch.provided("additional_notes"):
            order.additional_notes = patch.additional_notes

        order.add_domain_event(
            OrderUpdated(aggregate_id=order.id, section="confirmation")
        )
        self._order_repo.save(order)
        self._dispatch_events(order)

        log.info(
            "order.confirmation_updated",
            status=order.confirmation_status,
            call_attempts=order.call_attempts,
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def update_fulfillment(
        self,
        order_id: str,
        principal: Principal,
        patch: FulfillmentPatchDTO,
    ) -> Order:
        """Apply a fulfillment patch.

        A buyer can only act on orders already assigned to it, which also
        keeps outcomes from being recorded before buyer assignment.

        Raises:
            NotAuthorized: principal is neither admin nor the assigned buyer.
            OrderNotFound: order does not exist.
            OrderValidationError: an outcome is given but no buyer is assigned.
        """
        policies.require_role(principal, Role.ADMIN, Role.BUYER)
        order = self._get_existing(order_id)

        log = logger.bind(order_id=str(order_id), principal_id=str(principal.id))

        if not policies.can_update_fulfillment(principal, order):
            log.warning("order.fulfillment_update_denied")
            raise NotAuthorized("Not authorized to update this order.")

        if patch.outcome is not None and order.assigned_buyer_id is None:
            raise OrderValidationError(
                "An outcome can only be recorded once a buyer is assigned."
            )

        order.fulfillment_status = patch.status
        if patch.is_retrying is not None:
            order.is_retrying = patch.is_retrying

        if patch.outcome is not None:
            self._apply_outcome(order, patch)
        if patch.follow_up_date is not None:
            order.follow_up_date = patch.follow_up_date
        if patch.follow_up_time is not None:
            order.follow_up_time = patch.follow_up_time

        order.add_domain_event(
            OrderUpdated(aggregate_id=order.id, section="fulfillment")
        )
        self._order_repo.save(order)
        self._dispatch_events(order)

        log.info(
            "order.fulfillment_updated",
            status=order.fulfillment_status,
            outcome=order.outcome,
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @transaction.atomic
    def delete_order(self, order_id: str, principal: Principal) -> int:
        """Hard-delete one order (admin only).

        Raises:
            NotAuthorized: principal is not an admin.
            OrderNotFound: order does not exist.
        """
        policies.require_role(principal, Role.ADMIN)
        if not self._order_repo.delete(order_id):
            raise OrderNotFound(f"Order {order_id} not found.")
        return 1

    @transaction.atomic
    def delete_all_orders(self, principal: Principal) -> int:
        """Hard-delete every order (admin only)."""
        policies.require_role(principal, Role.ADMIN)
        count = self._order_repo.delete_all()
        logger.warning(
            "order.bulk_deleted", principal_id=str(principal.id), count=count
        )
        return count

    @transaction.atomic
    def normalize_fulfillment(self) -> int:
        """Reset every order's fulfillment part to ``not_processed_yet``."""
        count = self._order_repo.reset_fulfillment(NORMALIZED_FULFILLMENT_STATUS)
        logger.info("order.fulfillment_normalized", count=count)
        return count

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str, principal: Principal) -> Order:
        """Retrieve a single order readable by *principal*.

        Raises:
            OrderNotFound: order does not exist.
            NotAuthorized: the visibility policy hides it from *principal*.
        """
        order = self._get_existing(order_id)
        if not policies.can_read(principal, order):
            raise NotAuthorized("Access denied.")
        return order

    def list_recent(self, principal: Principal) -> models.QuerySet[Order]:
        """Orders created within the polling window.

        Admins see every fresh order; a confirmer sees only the fresh orders
        assigned to them, not the unassigned pool.
        """
        policies.require_role(principal, Role.ADMIN, Role.CONFIRMER)
        filters: Dict[str, Any] = {
            "q": policies.visible_orders_filter(principal),
            "created_at__gte": timezone.now() - RECENT_ORDERS_WINDOW,
        }
        if policies.role_of(principal) == Role.CONFIRMER:
            filters["assigned_confirmer_id"] = principal.id
        return self._order_repo.list(filters)

    def list_all(self, principal: Principal) -> models.QuerySet[Order]:
        policies.require_role(principal, Role.ADMIN)
        return self._order_repo.list()

    def list_for_confirmer(self, principal: Principal) -> models.QuerySet[Order]:
        policies.require_role(principal, Role.CONFIRMER)
        return self._order_repo.list({"assigned_confirmer_id": principal.id})

    def list_unassigned(self, principal: Principal) -> models.QuerySet[Order]:
        policies.require_role(principal, Role.CONFIRMER)
        return self._order_repo.list({"assigned_confirmer__isnull": True})

    def list_for_buyer(self, principal: Principal) -> models.QuerySet[Order]:
        policies.require_role(principal, Role.BUYER)
        return self._order_repo.list({"assigned_buyer_id": principal.id})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_existing(self, order_id: str) -> Order:
        order = self._order_repo.get_by_id(str(order_id))
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _resolve_assignee(self, user_id: Any, role: str) -> Optional[User]:
        """Return the principal for *user_id*, ``None`` to clear the reference."""
        if user_id is None:
            return None
        user = self._user_repo.get_by_id(str(user_id))
        if user is None or user.role != role:
            logger.warning(
                "order.invalid_assignment", user_id=str(user_id), expected_role=role
            )
            raise InvalidAssignment(f"Invalid {role}: {user_id}.")
        return user

    @staticmethod
    def _apply_outcome(order: Order, patch: FulfillmentPatchDTO) -> None:
        order.outcome = patch.outcome
        order.payment_method = (
            patch.payment_method if patch.outcome == BuyerOutcome.SOLD else None
        )
        if patch.outcome == BuyerOutcome.NOT_SOLD:
            order.reason_not_sold = patch.reason_not_sold
            order.custom_reason = patch.custom_reason or ""
        else:
            order.reason_not_sold = None
            order.custom_reason = ""

    def _dispatch_events(self, order: Order) -> None:
        """Publish the order's pending domain events after commit."""
        for event in order.domain_events:
            transaction.on_commit(partial(self._event_bus.publish, event))
        order.clear_domain_events()
