from django.apps import AppConfig


class AppConfigConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.appconfig"
    label = "appconfig"
    verbose_name = "Настройки платформы"

    def ready(self) -> None:  # pragma: no cover - import side effects
        from . import signals  # noqa: F401
