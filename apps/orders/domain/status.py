"""Order status machine.

Allowed transitions::

    PENDING   -> COMPLETED | CANCELED | SUSPENDED
    SUSPENDED -> COMPLETED | CANCELED

COMPLETED and CANCELED are terminal.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, FrozenSet, Iterable, Optional

from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

from apps.orders.exceptions import InvalidTransition
from shared.domain.base import DomainEvent

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.orders.models import Order

logger = logging.getLogger(__name__)


class OrderStatus(models.IntegerChoices):
    PENDING = 0, _("NOT_COMPLETED")
    COMPLETED = 1, _("COMPLETED")
    CANCELED = 2, _("CANCELED")
    SUSPENDED = 3, _("SUSPENDED")


TRANSITIONS: Dict[int, FrozenSet[int]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELED, OrderStatus.SUSPENDED}),
    OrderStatus.SUSPENDED: frozenset({OrderStatus.COMPLETED, OrderStatus.CANCELED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELED: frozenset(),
}

TERMINAL_STATUSES = frozenset(status for status, targets in TRANSITIONS.items() if not targets)


def can_transition(current: int, target: int) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def transition(
    order: "Order",
    target: int,
    *,
    event: Optional[DomainEvent] = None,
    update_fields: Iterable[str] = (),
) -> None:
    """Validate and persist a status change.

    Must be called inside the caller's ``transaction.atomic()`` block; the
    row is written immediately with ``save(update_fields=...)``.
    """
    current = order.status
    if not can_transition(current, target):
        logger.warning(
            f"Order {order.pk}: transition {OrderStatus(current).label} -> "
            f"{OrderStatus(target).label} refused"
        )
        raise InvalidTransition(
            f"Нельзя перевести заказ из статуса {OrderStatus(current).label} "
            f"в {OrderStatus(target).label}.",
            extra={"status": int(current), "target": int(target)},
        )

    order.status = target
    order.save(update_fields=["status", "updated_at", *update_fields])
    if event is not None:
        order.add_event(event)
    logger.info(f"Order {order.pk}: {OrderStatus(current).label} -> {OrderStatus(target).label}")
