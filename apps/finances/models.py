"""Financial domain models."""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class BillAction(models.Model):
    """Платёж по заказу."""

    class Status(models.TextChoices):
        NEW = "new", _("Создан")
        HOLDING = "holding", _("Средства заморожены")
        CONFIRMED = "confirmed", _("Средства списаны")
        FINISHED = "finished", _("Зачислено партнёру")
        REFUND_REQUESTED = "refund_requested", _("Запрошен возврат")
        REFUNDED = "refunded", _("Возвращено")
        CANCELED = "canceled", _("Заморозка отменена")
        FAILED = "failed", _("Ошибка")

    REFUNDABLE_STATUSES = (Status.HOLDING, Status.CONFIRMED)

    order = models.OneToOneField(
        "orders.Order",
        on_delete=models.PROTECT,
        related_name="transaction",
    )
    uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.NEW)
    amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="RUB")
    hold_ref = models.CharField(max_length=100, blank=True)
    capture_ref = models.CharField(max_length=100, blank=True)
    refund_ref = models.CharField(max_length=100, blank=True)
    refunded_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    captured_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Платёж")
        verbose_name_plural = _("Платежи")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"BillAction {self.order_id} ({self.status})"

    def is_holding(self) -> bool:
        return self.status == self.Status.HOLDING

    def is_refundable(self) -> bool:
        return self.status in self.REFUNDABLE_STATUSES

    def idempotency_key(self, operation: str) -> str:
        return f"{self.uuid}:{operation}"

    def set_status(self, status: str, **fields) -> None:
        self.status = status
        for name, value in fields.items():
            setattr(self, name, value)
        self.save(update_fields=["status", *fields.keys(), "updated_at"])


class BillActionEvent(models.Model):
    """История обращений к платёжному шлюзу."""

    class Operation(models.TextChoices):
        HOLD = "hold", _("Заморозка")
        CAPTURE = "capture", _("Списание")
        CANCEL_HOLD = "cancel_hold", _("Отмена заморозки")
        REFUND = "refund", _("Возврат")

    bill_action = models.ForeignKey(
        BillAction,
        on_delete=models.CASCADE,
        related_name="events",
    )
    operation = models.CharField(max_length=20, choices=Operation.choices)
    idempotency_key = models.CharField(max_length=100)
    amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    reference = models.CharField(max_length=100, blank=True)
    succeeded = models.BooleanField(default=False)
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Обращение к платёжному шлюзу")
        verbose_name_plural = _("Обращения к платёжному шлюзу")
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["idempotency_key"],
                condition=models.Q(succeeded=True),
                name="billactionevent_unique_success",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.operation} for bill action {self.bill_action_id}"
