from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import (
            OrderApprovalRolledBack,
            OrderApproved,
            OrderCancelled,
        )
        from modules.orders.handlers import (
            order_approval_rolled_back_handler,
            order_approved_handler,
            order_cancelled_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderApproved, order_approved_handler)
        event_bus.subscribe(OrderCancelled, order_cancelled_handler)
        event_bus.subscribe(OrderApprovalRolledBack, order_approval_rolled_back_handler)
