"""Celery tasks for the order domain."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from celery import shared_task  # type: ignore
from django.utils import timezone  # type: ignore

from apps.appconfig.services import config_store

from .domain.status import OrderStatus
from .domain.time_policy import is_come_min_booking_time, order_expired
from .exceptions import ExternalPaymentFailure
from .models import Order
from .queries import holding_funds, min_day_orders, not_confirmed, sessions_over, without_complaints
from .services.payments import PaymentCoordinator

logger = logging.getLogger(__name__)


def _capture_holds(candidates, is_due: Callable[[Order], bool], now: datetime, label: str) -> dict[str, int]:
    """Capture the hold of every due order; one bad order never stops the rest."""
    payments = PaymentCoordinator(config=config_store)
    captured = failed = 0
    for order in candidates:
        try:
            if not is_due(order):
                continue
            payments.capture_finished(order, now=now)
        except ExternalPaymentFailure:
            failed += 1
            logger.error(f"Order {order.pk}: capture ({label}) failed, left for the next run")
            continue
        except ValueError:
            # Например, длительность экскурсии в props не разбирается.
            failed += 1
            logger.error(f"Order {order.pk}: capture ({label}) skipped, bad excursion data", exc_info=True)
            continue
        captured += 1

    if captured or failed:
        logger.info(f"{label}: captured {captured}, failed {failed}")
    return {"captured": captured, "failed": failed}


# ============================================================================
# PERIODIC TASKS (запускаются автоматически через Celery Beat)
# ============================================================================

@shared_task(name="orders.capture_finished_holds")
def capture_finished_holds() -> dict[str, int]:
    """
    Списание замороженных средств по завершённым сеансам.

    Берёт заказы, сеанс которых закончился (начало + длительность +
    expired_days), билет не погашен, жалоб нет, а средства всё ещё
    заморожены. Статус заказа не меняется.

    Ошибки шлюза не повторяются автоматически: заказ останется в выборке
    и будет обработан следующим запуском.

    Returns:
        dict: {"captured": ..., "failed": ...}
    """
    now = timezone.now()
    candidates = (
        Order.objects.filter(
            sessions_over(config_store, now) & holding_funds() & without_complaints() & not_confirmed()
        )
        .select_related("excursion", "point__excursion_time")
        .order_by("pk")
    )
    return _capture_holds(
        candidates,
        lambda order: order_expired(order, config_store, now),
        now,
        "Finished sessions",
    )


@shared_task(name="orders.capture_lead_time_holds")
def capture_lead_time_holds() -> dict[str, int]:
    """
    Списание замороженных средств, когда до сеанса осталось меньше
    минимального срока бронирования (time_min_booking по типу экскурсии).

    После этого момента заказ считается поздним: возврат идёт со штрафом,
    как при немедленном списании.
    """
    now = timezone.now()
    candidates = (
        Order.objects.filter(
            min_day_orders(config_store, now)
            & holding_funds()
            & without_complaints()
            & not_confirmed(),
            status=OrderStatus.PENDING,
        )
        .select_related("excursion")
        .order_by("pk")
    )
    return _capture_holds(
        candidates,
        lambda order: is_come_min_booking_time(order.excursion, order.session_start, config_store, now),
        now,
        "Lead window",
    )
