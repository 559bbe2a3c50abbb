"""Visibility policy for orders.

Pure predicates deciding which orders a principal may read or change.
They are evaluated by the Service Layer before returning or mutating an
order; ``visible_orders_filter`` expresses the read predicate as an ORM
filter so that list queries are specializations of the same rule.

- admin: read/write everything.
- confirmer: read the unassigned pool and its own orders, write its own.
- buyer: read/write orders assigned to it as buyer.
- client / anonymous: no access to existing orders.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol
from uuid import UUID

from django.db.models import Q

from modules.accounts.models import Role
from modules.orders.exceptions import NotAuthorized

if TYPE_CHECKING:
    from modules.orders.models import Order


class Principal(Protocol):
    """Anything carrying an identity and a workflow role."""

    id: Any
    role: str


def role_of(principal: Optional[Principal]) -> Optional[str]:
    """Return the principal role, ``None`` for anonymous callers."""
    if principal is None or not getattr(principal, "is_authenticated", True):
        return None
    return getattr(principal, "role", None)


def _same(reference: Optional[UUID], principal: Principal) -> bool:
    return reference is not None and str(reference) == str(principal.id)


def can_read(principal: Optional[Principal], order: Order) -> bool:
    role = role_of(principal)
    if role == Role.ADMIN:
        return True
    if role == Role.CONFIRMER:
        return order.is_in_pool or _same(order.assigned_confirmer_id, principal)
    if role == Role.BUYER:
        return _same(order.assigned_buyer_id, principal)
    return False


def can_write(principal: Optional[Principal], order: Order) -> bool:
    role = role_of(principal)
    if role == Role.ADMIN:
        return True
    if role == Role.CONFIRMER:
        return _same(order.assigned_confirmer_id, principal)
    if role == Role.BUYER:
        return _same(order.assigned_buyer_id, principal)
    return False


def can_update_confirmation(principal: Optional[Principal], order: Order) -> bool:
    """Admins, or the confirmer currently assigned to the order."""
    return role_of(principal) in {Role.ADMIN, Role.CONFIRMER} and can_write(
        principal, order
    )


def can_update_fulfillment(principal: Optional[Principal], order: Order) -> bool:
    """Admins, or the buyer currently assigned to the order."""
    return role_of(principal) in {Role.ADMIN, Role.BUYER} and can_write(
        principal, order
    )


def visible_orders_filter(principal: Optional[Principal]) -> Q:
    """ORM equivalent of :func:`can_read`."""
    role = role_of(principal)
    if role == Role.ADMIN:
        return Q()
    if role == Role.CONFIRMER:
        return Q(assigned_confirmer__isnull=True) | Q(assigned_confirmer_id=principal.id)
    if role == Role.BUYER:
        return Q(assigned_buyer_id=principal.id)
    return Q(pk__in=[])


def require_role(principal: Optional[Principal], *roles: str) -> None:
    """Raise ``NotAuthorized`` unless the principal holds one of *roles*."""
    if role_of(principal) not in roles:
        allowed = ", ".join(roles)
        raise NotAuthorized(f"Access denied: requires role {allowed}.")
