"""Principal model for the order workflow.

Every authenticated request carries a ``User`` whose ``role`` decides what
it may see and change:

- ``admin``: full access, assigns confirmers and buyers.
- ``confirmer``: calls clients and schedules the rendezvous.
- ``buyer``: records the sale outcome.
- ``client``: may only submit new orders.

Credential storage and password verification are delegated to
``django.contrib.auth``; this module only adds the role and a UUIDv7 key.
"""

from __future__ import annotations

import uuid6
from django.contrib.auth.models import AbstractUser
from django.contrib.auth.models import UserManager as DjangoUserManager
from django.db import models


class Role(models.TextChoices):
    ADMIN = "admin", "Admin"
    CONFIRMER = "confirmer", "Confirmer"
    BUYER = "buyer", "Buyer"
    CLIENT = "client", "Client"


class UserManager(DjangoUserManager):
    """Default manager; superusers are always admins of the workflow."""

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        extra_fields.setdefault("role", Role.ADMIN)
        return super().create_superuser(username, email, password, **extra_fields)


class User(AbstractUser):
    id = models.UUIDField(
        primary_key=True,
        default=uuid6.uuid7,
        editable=False,
    )
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.CLIENT,
    )

    objects = UserManager()

    class Meta(AbstractUser.Meta):
        db_table = "users"
        indexes = [
            models.Index(fields=["role"], name="users_role_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"
