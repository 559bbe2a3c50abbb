"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations


class OrderDomainError(Exception):
    """Base class for every failure the order workflow reports to callers."""


class OrderValidationError(OrderDomainError):
    """A required field is missing or malformed."""


class InvalidAssignment(OrderDomainError):
    """A referenced confirmer/buyer does not exist or has the wrong role."""


class NotAuthorized(OrderDomainError):
    """The principal lacks the role or ownership the operation requires."""


class OrderNotFound(OrderDomainError):
    """The requested order does not exist."""


class OrderStoreError(OrderDomainError):
    """The order store failed to read or persist data."""
