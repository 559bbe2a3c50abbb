from django.core.management.base import BaseCommand

from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService


class Command(BaseCommand):
    help = (
        "Reset the fulfillment part of every order: status becomes "
        "not_processed_yet and the retry flag is cleared."
    )

    def handle(self, *args, **options):
        service = OrderService(OrderDjangoRepository(), UserDjangoRepository())
        updated = service.normalize_fulfillment()
        self.stdout.write(self.style.SUCCESS(f"Normalized {updated} orders."))
