"""Principal repository interface.

The order lifecycle only needs to resolve principals referenced by an
assignment; user management itself lives in ``django.contrib.auth``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from modules.accounts.models import User


class IUserRepository(ABC):
    """Read-only contract for principal look-ups."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[User]:
        """Retrieve a principal by primary key."""
