"""Ticket redemption by the partner's staff."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork

from ..domain.status import OrderStatus
from ..exceptions import AccessDenied, DomainError, InvalidTransition, NotFound
from ..models import Order, QrCode
from ..queries import lock_order
from .payments import PaymentCoordinator

logger = logging.getLogger(__name__)

# Приостановленный по жалобе заказ тоже можно погасить.
REDEEMABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.SUSPENDED})


class ConfirmationFlow:
    """Redeem a ticket: bind the employee, complete the order, capture funds."""

    def __init__(self, payments: Optional[PaymentCoordinator] = None):
        self.payments = payments or PaymentCoordinator()

    @staticmethod
    def check_access(order: Order, employee) -> None:
        if employee.is_platform_admin() or employee.acts_for(order.excursion.owner_id):
            return
        logger.warning(f"Order {order.pk}: user {employee.pk} may not redeem tickets of this excursion")
        raise AccessDenied("Билет может погасить только организатор экскурсии или его сотрудник.")

    def confirm(self, order: Order, employee, at: Optional[datetime] = None) -> Order:
        at = at or timezone.now()
        try:
            with DjangoUnitOfWork() as uow:
                lock_order(order)
                self.check_access(order, employee)
                if order.is_confirmed():
                    raise InvalidTransition("Билет уже погашен.", code="ticket_already_redeemed")
                if order.status not in REDEEMABLE_STATUSES:
                    raise InvalidTransition(
                        f"Заказ в статусе {order.get_status_display()} не может быть погашен.",
                    )

                order.date_confirm = at
                order.employee = employee
                order.save(update_fields=["date_confirm", "employee", "updated_at"])
                self.payments.confirm_and_capture(order, now=at)
                uow.collect_events(order)
        except DomainError:
            # The database is rolled back; drop the in-memory changes too.
            order.refresh_from_db()
            order.clear_events()
            raise
        logger.info(f"Order {order.pk}: ticket redeemed by user {employee.pk}")
        return order

    def confirm_by_code(self, code: str, employee, at: Optional[datetime] = None) -> Order:
        try:
            qr_code = QrCode.objects.select_related("order", "order__excursion").get(
                code=code,
                order__deleted_at__isnull=True,
            )
        except QrCode.DoesNotExist:
            raise NotFound("Билет с таким кодом не найден.", code="ticket_not_found")
        return self.confirm(qr_code.order, employee, at)
