"""Keyed platform configuration."""

from __future__ import annotations

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class AppConfig(models.Model):
    """Параметр платформы, редактируемый администратором."""

    class Keys(models.TextChoices):
        TIME_MIN_BOOKING = "time_min_booking", _("Дни до сеанса, после которых бронь закрыта")
        PERCENTAGE_PENALTY = "percentage_penalty", _("Штраф за поздний возврат, %")
        EXPIRED_DAYS = "expired_days", _("Дни ожидания после начала экскурсии")

    key = models.CharField(max_length=64, unique=True)
    value = models.JSONField()
    description = models.CharField(max_length=255, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Параметр платформы")
        verbose_name_plural = _("Параметры платформы")
        ordering = ["key"]

    def __str__(self) -> str:
        return f"{self.key}={self.value}"
