from django.apps import AppConfig


class OrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.orders"
    label = "orders"
    verbose_name = "Заказы"

    def ready(self) -> None:  # pragma: no cover - import side effects
        from .event_handlers import register_handlers

        register_handlers()
