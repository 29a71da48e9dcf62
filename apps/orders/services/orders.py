"""Order service: the operations exposed to the API and other apps.

Every mutating operation runs in one ``DjangoUnitOfWork`` (a
``transaction.atomic()`` block) with the affected rows locked; domain
events are published after commit.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from django.conf import settings  # type: ignore
from django.contrib.auth import get_user_model  # type: ignore
from django.utils import timezone  # type: ignore

from apps.appconfig.services import ConfigStore, config_store
from apps.excursions.selectors import get_time_point
from apps.finances.gateways import PaymentGateway
from shared.application.uow import DjangoUnitOfWork

from ..domain import pricing, time_policy
from ..domain.events import OrderCreated
from ..exceptions import AccessDenied, NotFound, ValidationError
from ..models import Complaint, Order, OrderRefund, QrCode
from ..queries import lock_order
from .admission import BookingAdmissionController
from .complaints import ComplaintArbiter
from .confirmation import ConfirmationFlow
from .payments import PaymentCoordinator

logger = logging.getLogger(__name__)


class OrderService:
    """Facade over admission, pricing, payments, complaints and redemption."""

    def __init__(self, config: Optional[ConfigStore] = None, gateway: Optional[PaymentGateway] = None):
        self.config = config or config_store
        self.payments = PaymentCoordinator(gateway=gateway, config=self.config)
        self.admission = BookingAdmissionController(config=self.config)
        self.complaints = ComplaintArbiter()
        self.confirmation = ConfirmationFlow(payments=self.payments)

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return Order.objects.select_related("excursion", "point", "buyer").get(pk=order_id)
        except Order.DoesNotExist:
            raise NotFound(f"Заказ {order_id} не найден.", code="order_not_found")

    # --- Booking ---------------------------------------------------------

    @staticmethod
    def resolve_buyer(user, details: Optional[Dict[str, str]] = None):
        """Buyer of a new order: ``user`` itself or the person named in ``details``.

        Orders placed for someone else find that person by email and create a
        passwordless account when there is none.
        """
        if not details:
            return user
        buyer = get_user_model().objects.find_or_create_buyer(**details)
        if buyer.pk != user.pk:
            logger.info(f"User {user.pk} orders for user {buyer.pk}")
        return buyer

    def create_order(
        self,
        buyer,
        excursion_id,
        point_id,
        date_start: date,
        time_start: time,
        number_adult: int,
        number_children: int,
        submitted_total,
        languages: Optional[Iterable[str]] = None,
        transfer: bool = False,
        ignore_duplicate_check: bool = False,
        now: Optional[datetime] = None,
        order_user=None,
    ) -> Order:
        """Book a session: admit, price, insert, issue the ticket, hold funds.

        ``order_user`` is the account that placed the order; ``buyer`` may be
        someone else, see ``resolve_buyer``.
        """
        now = now or timezone.now()
        if number_adult < 0 or number_children < 0:
            raise ValidationError("Количество участников не может быть отрицательным.")

        with DjangoUnitOfWork() as uow:
            point = get_time_point(point_id, excursion_id=excursion_id, lock=True)
            excursion = point.excursion
            if not excursion.is_active:
                raise ValidationError("Экскурсия недоступна для бронирования.", code="excursion_disabled")
            session = point.excursion_time
            if time_start != session.time or (session.date is not None and date_start != session.date):
                raise ValidationError("Точка сбора не относится к выбранному сеансу.", code="session_mismatch")

            self.admission.admit(
                excursion,
                buyer.pk,
                point.pk,
                date_start,
                time_start,
                number_adult,
                ignore_duplicate_check=ignore_duplicate_check,
                now=now,
            )

            extras = pricing.order_extras(excursion, transfer)
            amount = pricing.compute_amount(
                point,
                number_adult,
                number_children,
                extras,
                currency=settings.ORDER_CURRENCY,
            )
            pricing.verify_submitted_total(amount, submitted_total)

            order = Order.objects.create(
                buyer=buyer,
                order_user=order_user,
                excursion=excursion,
                point=point,
                number_adult=number_adult,
                number_children=number_children,
                amount=amount.quantized(),
                currency=amount.currency,
                date_start=date_start,
                time_start=time_start,
                date_finish=time_policy.calculate_date_finish(date_start, time_start, self.config),
                items={
                    "point": point.snapshot(),
                    "date_start": date_start.isoformat(),
                    "time_start": time_start.strftime("%H:%M"),
                    "languages": list(languages or []),
                    "transfer": bool(transfer),
                    "transfer_price": str(extras),
                },
            )
            QrCode.issue(order)
            bill_action = self.payments.initiate_hold(order, now=now)
            order.add_event(OrderCreated(
                aggregate_id=order.pk,
                order_id=order.pk,
                buyer_id=buyer.pk,
                excursion_id=excursion.pk,
                amount=order.amount,
                funds_held=bill_action.is_holding(),
            ))
            uow.collect_events(order)

        logger.info(f"Order {order.pk} created by user {buyer.pk} for {amount}")
        return order

    # --- Refunds ---------------------------------------------------------

    @staticmethod
    def check_refund_access(order: Order, user) -> None:
        if (
            user.pk in (order.buyer_id, order.order_user_id)
            or user.is_platform_admin()
            or user.acts_for(order.excursion.owner_id)
        ):
            return
        logger.warning(f"Order {order.pk}: user {user.pk} may not refund it")
        raise AccessDenied("Возврат может оформить только покупатель, организатор или администратор.")

    def can_refund(self, order_id, now: Optional[datetime] = None) -> Dict[str, Any]:
        return self.payments.can_refund(self.get_order(order_id), now)

    def refund_order(self, order_id, user, description: str = "", now: Optional[datetime] = None) -> OrderRefund:
        order = self.get_order(order_id)
        self.check_refund_access(order, user)
        with DjangoUnitOfWork() as uow:
            lock_order(order)
            order_refund = self.payments.refund(order, user, description, now)
            uow.collect_events(order)
        return order_refund

    # --- Complaints ------------------------------------------------------

    def can_complain(self, order_id, user, now: Optional[datetime] = None) -> Dict[str, Any]:
        return self.complaints.can_complain(self.get_order(order_id), user, now)

    def file_complaint(
        self,
        order_id,
        user,
        type: str,
        description: str = "",
        now: Optional[datetime] = None,
    ) -> Complaint:
        order = self.get_order(order_id)
        with DjangoUnitOfWork() as uow:
            lock_order(order)
            complaint = self.complaints.file_complaint(order, user, type, description, now)
            uow.collect_events(order)
        return complaint

    # --- Redemption ------------------------------------------------------

    def confirm_ticket(self, order_id, employee, at: Optional[datetime] = None) -> Order:
        return self.confirmation.confirm(self.get_order(order_id), employee, at)

    def confirm_ticket_by_code(self, code: str, employee, at: Optional[datetime] = None) -> Order:
        return self.confirmation.confirm_by_code(code, employee, at)
