from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.notifications"
    label = "notifications"

    def ready(self) -> None:
        from modules.notifications.fanout import NotificationFanout
        from modules.notifications.handlers import OrderNotificationHandler
        from modules.orders.events import OrderCreated, OrderUpdated
        from modules.orders.repositories.django_repository import (
            OrderDjangoRepository,
        )
        from shared.infrastructure.bus import event_bus

        self.fanout = NotificationFanout()

        handler = OrderNotificationHandler(self.fanout, OrderDjangoRepository())
        event_bus.subscribe(OrderCreated, handler)
        event_bus.subscribe(OrderUpdated, handler)
