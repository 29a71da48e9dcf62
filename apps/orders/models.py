"""Order domain models."""

from __future__ import annotations

import secrets
from datetime import datetime
from decimal import Decimal

from django.conf import settings  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from shared.domain.base import EventRecorder

from .domain.status import OrderStatus
from .domain.time_policy import session_start


class OrderQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted_at__isnull=True)

    def deleted(self):
        return self.filter(deleted_at__isnull=False)


class OrderManager(models.Manager.from_queryset(OrderQuerySet)):  # type: ignore[misc]
    """Менеджер по умолчанию скрывает мягко удалённые заказы."""

    def get_queryset(self):  # type: ignore
        return super().get_queryset().alive()


class Order(EventRecorder, models.Model):
    """Заказ (бронь) на сеанс экскурсии."""

    Status = OrderStatus

    buyer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    order_user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="placed_orders",
        help_text=_("Кто оформил заказ, если покупали для другого человека."),
    )
    excursion = models.ForeignKey(
        "excursions.Excursion",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    point = models.ForeignKey(
        "excursions.ExcursionTimePoint",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    number_adult = models.PositiveSmallIntegerField(default=1)
    number_children = models.PositiveSmallIntegerField(default=0)
    items = models.JSONField(
        default=dict,
        blank=True,
        help_text=_("Снимок заказа: точка, дата и время, языки, трансфер."),
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="RUB")
    status = models.PositiveSmallIntegerField(choices=OrderStatus.choices, default=OrderStatus.PENDING)
    date_start = models.DateField()
    time_start = models.TimeField()
    date_finish = models.DateTimeField(help_text=_("Начало сеанса плюс expired_days."))
    date_confirm = models.DateTimeField(null=True, blank=True)
    employee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name="confirmed_orders",
    )
    deleted_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = OrderManager()
    all_objects = OrderQuerySet.as_manager()

    class Meta:
        verbose_name = _("Заказ")
        verbose_name_plural = _("Заказы")
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["excursion", "point", "date_start", "time_start", "buyer"],
                name="orders_orde_booking_9f2c1d_idx",
            ),
            models.Index(fields=["status"], name="orders_orde_status_4e8a07_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(date_confirm__isnull=True, employee__isnull=True)
                    | models.Q(date_confirm__isnull=False, employee__isnull=False)
                ),
                name="order_confirm_with_employee",
            ),
        ]

    def __str__(self) -> str:
        return f"Order #{self.pk} ({self.get_status_display()})"

    @property
    def session_start(self) -> datetime:
        return session_start(self.date_start, self.time_start)

    def is_confirmed(self) -> bool:
        return self.date_confirm is not None and self.employee_id is not None

    def has_complaints(self) -> bool:
        return self.complaints.exists()

    def is_status(self, status: int) -> bool:
        return self.status == status

    def delete(self, using=None, keep_parents=False):  # type: ignore[override]
        """Мягкое удаление: строка заказа остаётся ради платежей."""
        self.deleted_at = timezone.now()
        self.save(update_fields=["deleted_at", "updated_at"])
        return 0, {}


class Complaint(models.Model):
    """Жалоба покупателя на заказ."""

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="complaints")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="complaints",
    )
    type = models.CharField(max_length=50)
    description = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Жалоба")
        verbose_name_plural = _("Жалобы")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Complaint {self.type} on order {self.order_id}"


class OrderRefund(models.Model):
    """Запись о возврате средств по заказу."""

    order = models.ForeignKey(Order, on_delete=models.PROTECT, related_name="refunds")
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="order_refunds",
    )
    description = models.TextField(blank=True)
    percent = models.PositiveSmallIntegerField(default=100)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    with_penalty = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Возврат")
        verbose_name_plural = _("Возвраты")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"Refund {self.percent}% of order {self.order_id}"


def generate_qr_code() -> str:
    return secrets.token_urlsafe(16)


class QrCode(models.Model):
    """Код билета, который сотрудник сканирует при погашении."""

    order = models.OneToOneField(Order, on_delete=models.CASCADE, related_name="qr_code")
    code = models.CharField(max_length=64, unique=True, default=generate_qr_code)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("QR-код билета")
        verbose_name_plural = _("QR-коды билетов")

    def __str__(self) -> str:
        return f"QR for order {self.order_id}"

    @classmethod
    def issue(cls, order: Order) -> "QrCode":
        return cls.objects.create(order=order)
