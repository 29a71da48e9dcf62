"""Excursion catalogue models."""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

DURATION_RE = re.compile(r"^(?P<hours>\d+):(?P<minutes>\d{2})(?::(?P<seconds>\d{2}))?$")


def parse_duration(value) -> timedelta:
    """Длительность из props: минуты числом или строка ``HH:MM[:SS]``."""
    if value in (None, ""):
        return timedelta(0)
    if isinstance(value, (int, float)):
        return timedelta(minutes=value)
    match = DURATION_RE.match(str(value).strip())
    if not match:
        raise ValueError(f"Unsupported duration format: {value!r}")
    return timedelta(
        hours=int(match.group("hours")),
        minutes=int(match.group("minutes")),
        seconds=int(match.group("seconds") or 0),
    )


class Excursion(models.Model):
    """Экскурсия партнёра."""

    class Type(models.TextChoices):
        EXC = "exc", _("Экскурсия")
        TOUR = "tour", _("Тур")
        VIP = "vip", _("VIP")

    class Subtype(models.TextChoices):
        GROUP = "group", _("Групповая")
        INDIVIDUAL = "individual", _("Индивидуальная")
        PERSONAL = "personal", _("Персональная")

    class Status(models.TextChoices):
        ACTIVE = "ACTIVE", _("Активна")
        DISABLED = "DISABLED", _("Отключена")

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="excursions",
    )
    name = models.CharField(max_length=255)
    type = models.CharField(max_length=10, choices=Type.choices, default=Type.EXC)
    subtype = models.CharField(max_length=12, choices=Subtype.choices, default=Subtype.GROUP)
    price_adult = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    price_children = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    props = models.JSONField(
        default=dict,
        blank=True,
        help_text=_("booking_before {day, hour}, duration, languages, location, transfer {price}"),
    )
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Экскурсия")
        verbose_name_plural = _("Экскурсии")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["type", "subtype"], name="excursions__type_6c1e2a_idx"),
            models.Index(fields=["status"], name="excursions__status_0b7d41_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.type}/{self.subtype})"

    @property
    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE

    @property
    def duration(self) -> timedelta:
        props = self.props or {}
        return parse_duration(props.get("duration", props.get("duration_time")))


class ExcursionTime(models.Model):
    """Сеанс экскурсии. Без даты сеанс повторяется ежедневно в указанное время."""

    excursion = models.ForeignKey(Excursion, on_delete=models.CASCADE, related_name="times")
    date = models.DateField(null=True, blank=True)
    time = models.TimeField()
    duration = models.DurationField(null=True, blank=True)

    class Meta:
        verbose_name = _("Сеанс экскурсии")
        verbose_name_plural = _("Сеансы экскурсий")
        ordering = ["time"]

    def __str__(self) -> str:
        day = self.date.isoformat() if self.date else "daily"
        return f"{self.excursion_id} {day} {self.time:%H:%M}"


class ExcursionTimePoint(models.Model):
    """Точка сбора сеанса."""

    excursion_time = models.ForeignKey(ExcursionTime, on_delete=models.CASCADE, related_name="points")
    excursion = models.ForeignKey(Excursion, on_delete=models.CASCADE, related_name="points")
    title = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True)
    price_adult = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Цена для точки; по умолчанию цена экскурсии."),
    )
    price_children = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)

    class Meta:
        verbose_name = _("Точка сбора")
        verbose_name_plural = _("Точки сбора")

    def __str__(self) -> str:
        return f"{self.title} ({self.excursion_time})"

    def effective_price_adult(self) -> Decimal:
        return self.price_adult if self.price_adult is not None else self.excursion.price_adult

    def effective_price_children(self) -> Decimal:
        return self.price_children if self.price_children is not None else self.excursion.price_children

    def snapshot(self) -> dict:
        """Замороженная копия точки для ``Order.items``."""
        location = getattr(self, "map_location", None)
        return {
            "id": self.pk,
            "title": self.title,
            "address": self.address,
            "excursion_time_id": self.excursion_time_id,
            "time": self.excursion_time.time.strftime("%H:%M"),
            "location": (
                {"lat": str(location.lat), "lng": str(location.lng)} if location is not None else None
            ),
        }


class MapLocation(models.Model):
    """Координаты точки сбора. Удаляется вместе с точкой (и сеансом)."""

    point = models.OneToOneField(
        ExcursionTimePoint,
        on_delete=models.CASCADE,
        related_name="map_location",
    )
    lat = models.DecimalField(max_digits=9, decimal_places=6)
    lng = models.DecimalField(max_digits=9, decimal_places=6)
    address = models.CharField(max_length=255, blank=True)

    class Meta:
        verbose_name = _("Точка на карте")
        verbose_name_plural = _("Точки на карте")

    def __str__(self) -> str:
        return f"{self.lat}, {self.lng}"
