"""Django ORM implementation of the principal repository.

Follows the Null Object convention of the other repositories: missing or
malformed identifiers return ``None`` and the Service Layer decides what
that means for the caller.
"""

from __future__ import annotations

from typing import Optional

from django.core.exceptions import ValidationError

from modules.accounts.models import User
from modules.accounts.repositories.interfaces import IUserRepository


class UserDjangoRepository(IUserRepository):
    """Concrete principal repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[User]:
        """Returns ``None`` for non-existent or invalid IDs (e.g. malformed UUID)."""
        try:
            return User.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None
