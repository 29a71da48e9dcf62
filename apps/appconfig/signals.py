"""Reload the configuration snapshot whenever an entry changes."""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import AppConfig
from .services import config_store


@receiver([post_save, post_delete], sender=AppConfig)
def appconfig_reloader(**_: object) -> None:
    config_store.reload()
