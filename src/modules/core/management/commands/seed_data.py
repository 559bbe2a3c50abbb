from __future__ import annotations

import random
from datetime import date, timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from modules.accounts.models import Role, User
from modules.orders.constants import (
    ConfirmationStatus,
    FulfillmentStatus,
    OrderKind,
)
from modules.orders.models import Order

SEED_USERS = [
    ("admin", "admin123", Role.ADMIN),
    ("confirmer1", "confirmer123", Role.CONFIRMER),
    ("confirmer2", "confirmer123", Role.CONFIRMER),
    ("buyer1", "buyer123", Role.BUYER),
    ("client1", "client123", Role.CLIENT),
]

SEED_CLIENTS = [
    ("Amine Benali", "0612345678"),
    ("Sara El Idrissi", "0623456789"),
    ("Youssef Amrani", "0634567890"),
    ("Khadija Tazi", "0645678901"),
    ("Omar Fassi", "0656789012"),
    ("Nadia Berrada", "0667890123"),
]

HOURS = ["09:00", "10:30", "14:00", "16:30", "18:00"]


class Command(BaseCommand):
    help = "Seed database with development principals and orders."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders",
            type=int,
            default=20,
            help="Number of orders to create (default: 20).",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        orders_created = self._seed_orders(users, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: users={len(users)}, orders={orders_created}"
            )
        )

    def _seed_users(self) -> dict[str, User]:
        self.stdout.write("Creating principals...")
        users: dict[str, User] = {}
        for username, password, role in SEED_USERS:
            user = User.objects.filter(username=username).first()
            if user is None:
                if role == Role.ADMIN:
                    user = User.objects.create_superuser(username, password=password)
                else:
                    user = User.objects.create_user(
                        username, password=password, role=role
                    )
            users[username] = user
        self.stdout.write(self.style.SUCCESS("Creating principals... Done!"))
        return users

    def _seed_orders(self, users: dict[str, User], count: int) -> int:
        self.stdout.write("Creating orders...")
        confirmers = [u for u in users.values() if u.role == Role.CONFIRMER]
        buyer = users.get("buyer1")
        today = date.today()

        for i in range(count):
            full_name, phone_number = random.choice(SEED_CLIENTS)
            kind = random.choice([OrderKind.USB, OrderKind.COURSE])
            # One order in three stays in the unassigned pool.
            confirmer = random.choice(confirmers) if i % 3 else None
            confirmed = confirmer is not None and random.random() < 0.5

            order = Order.objects.create(
                kind=kind,
                price=Decimal(random.choice(["49.00", "99.00", "149.00", "299.00"])),
                phone_number=phone_number,
                full_name=full_name,
                scheduled_day=today + timedelta(days=random.randint(0, 10)),
                scheduled_hour=random.choice(HOURS),
                description=f"Seed {kind.label} order {i + 1}",
                assigned_confirmer=confirmer,
                confirmation_status=(
                    ConfirmationStatus.CALL_CONFIRMED
                    if confirmed
                    else ConfirmationStatus.CALL_NOT_RESPONSE
                ),
                call_attempts=0 if confirmed else random.randint(0, 3),
                rendezvous_date=today + timedelta(days=2) if confirmed else None,
                rendezvous_hour=random.choice(HOURS) if confirmed else "",
                assigned_buyer=buyer if confirmed else None,
                fulfillment_status=FulfillmentStatus.NOT_PROCESSED_YET,
            )
            created_at = timezone.now() - timedelta(hours=random.randint(0, 72))
            Order.objects.filter(id=order.id).update(created_at=created_at)

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return count
