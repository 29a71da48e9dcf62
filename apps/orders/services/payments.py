"""Payment coordination for orders.

Wraps the abstract payment gateway: every call is made with an
idempotency key, logged as a ``BillActionEvent`` and translated into
``ExternalPaymentFailure`` on error. Callers run these methods inside
``transaction.atomic()``, so a failed gateway call rolls back every local
change made in the same block.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from django.db import transaction  # type: ignore
from django.utils import timezone  # type: ignore

from apps.appconfig.services import ConfigStore, config_store
from apps.finances.gateways import GatewayError, GatewayResult, PaymentGateway, get_gateway
from apps.finances.models import BillAction, BillActionEvent
from shared.domain.value_objects import Money

from ..domain import time_policy
from ..domain.events import OrderCanceled, OrderCompleted
from ..domain.status import OrderStatus, transition
from ..exceptions import ExternalPaymentFailure, InvalidTransition, NotFound, RefundDenied
from ..models import Order, OrderRefund

logger = logging.getLogger(__name__)

Operation = BillActionEvent.Operation


class PaymentCoordinator:
    """Hold, capture, cancel and refund order payments."""

    def __init__(self, gateway: Optional[PaymentGateway] = None, config: Optional[ConfigStore] = None):
        self._gateway = gateway
        self.config = config or config_store

    @property
    def gateway(self) -> PaymentGateway:
        if self._gateway is None:
            self._gateway = get_gateway()
        return self._gateway

    # --- Gateway calls ---------------------------------------------------

    def _call(
        self,
        bill_action: BillAction,
        operation: str,
        request: Callable[[str], GatewayResult],
        amount: Optional[Money] = None,
    ) -> GatewayResult:
        key = bill_action.idempotency_key(operation)
        previous = BillActionEvent.objects.filter(idempotency_key=key, succeeded=True).first()
        if previous is not None:
            logger.info(f"Gateway {operation} for order {bill_action.order_id} already done ({key})")
            return GatewayResult(reference=previous.reference, payload=previous.payload)

        logger.info(f"Gateway {operation} for order {bill_action.order_id}, key {key}")
        try:
            result = request(key)
        except GatewayError as exc:
            logger.error(
                f"Gateway {operation} failed for order {bill_action.order_id}: {exc}",
                exc_info=True,
            )
            raise ExternalPaymentFailure(ambiguous=exc.ambiguous) from exc

        BillActionEvent.objects.create(
            bill_action=bill_action,
            operation=operation,
            idempotency_key=key,
            amount=amount.quantized() if amount is not None else None,
            reference=result.reference,
            succeeded=True,
            payload=result.payload,
        )
        return result

    def _capture(self, bill_action: BillAction, now: datetime) -> None:
        amount = Money(bill_action.amount, bill_action.currency)
        result = self._call(
            bill_action,
            Operation.CAPTURE,
            lambda key: self.gateway.capture(bill_action.hold_ref, amount, idempotency_key=key),
            amount,
        )
        bill_action.capture_ref = result.reference
        bill_action.captured_at = now

    # --- Operations ------------------------------------------------------

    def initiate_hold(self, order: Order, now: Optional[datetime] = None) -> BillAction:
        """Hold the order amount; a late booking is captured at once."""
        now = now or timezone.now()
        with transaction.atomic():
            bill_action = BillAction.objects.create(order=order, amount=order.amount, currency=order.currency)
            amount = Money(order.amount, order.currency)
            result = self._call(
                bill_action,
                Operation.HOLD,
                lambda key: self.gateway.hold(str(order.pk), amount, idempotency_key=key),
                amount,
            )
            bill_action.hold_ref = result.reference

            late = time_policy.is_come_min_booking_time(order.excursion, order.session_start, self.config, now)
            if late:
                self._capture(bill_action, now)
                bill_action.set_status(
                    BillAction.Status.CONFIRMED,
                    hold_ref=bill_action.hold_ref,
                    capture_ref=bill_action.capture_ref,
                    captured_at=bill_action.captured_at,
                )
            else:
                bill_action.set_status(BillAction.Status.HOLDING, hold_ref=bill_action.hold_ref)
        logger.info(f"Order {order.pk}: payment {bill_action.status}")
        return bill_action

    def latest_transaction(self, order: Order) -> BillAction:
        """Latest valid transaction of the order, locked for update."""
        queryset = BillAction.objects.filter(order=order).exclude(
            status__in=(BillAction.Status.NEW, BillAction.Status.FAILED)
        )
        if transaction.get_connection().in_atomic_block:
            queryset = queryset.select_for_update()
        bill_action = queryset.order_by("-created_at").first()
        if bill_action is None:
            raise NotFound(f"Платёж по заказу {order.pk} не найден.", code="transaction_not_found")
        return bill_action

    def confirm_and_capture(self, order: Order, now: Optional[datetime] = None) -> BillAction:
        """Finish the payment and complete the order.

        Order: transaction finished, order COMPLETED, ``date_confirm`` set,
        then gateway capture when funds are only held. A capture failure
        raises ``ExternalPaymentFailure`` and rolls all of it back.
        """
        now = now or timezone.now()
        with transaction.atomic():
            bill_action = self.latest_transaction(order)
            if not bill_action.is_refundable():
                raise InvalidTransition(
                    f"Платёж заказа {order.pk} в статусе {bill_action.status}, списание невозможно.",
                    code="payment_not_capturable",
                )
            if order.employee_id is None:
                raise InvalidTransition("Не указан сотрудник, погасивший билет.", code="employee_required")
            was_holding = bill_action.is_holding()

            bill_action.set_status(BillAction.Status.FINISHED)
            transition(order, OrderStatus.COMPLETED, event=OrderCompleted(
                aggregate_id=order.pk,
                order_id=order.pk,
                employee_id=order.employee_id,
            ))
            if order.date_confirm is None:
                order.date_confirm = now
                order.save(update_fields=["date_confirm", "updated_at"])

            if was_holding:
                self._capture(bill_action, now)
                bill_action.save(update_fields=["capture_ref", "captured_at", "updated_at"])
        return bill_action

    def can_refund(self, order: Order, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or timezone.now()
        bill_action = BillAction.objects.filter(order=order).first()
        return {
            "status": (
                order.status != OrderStatus.CANCELED
                and bill_action is not None
                and bill_action.is_refundable()
            ),
            "no_penalty_date": time_policy.no_penalty_date(order.date_start).strftime("%d.%m.%Y"),
            "percent": time_policy.refund_penalty_percent(order.date_start, self.config, now),
        }

    def refund(self, order: Order, user, description: str = "", now: Optional[datetime] = None) -> OrderRefund:
        """Cancel the order and return the money.

        Held funds are released in full; captured funds are refunded
        ``amount * percent / 100``.
        """
        now = now or timezone.now()
        with transaction.atomic():
            check = self.can_refund(order, now)
            if not check["status"]:
                logger.warning(f"Order {order.pk}: refund refused")
                raise RefundDenied(extra={"no_penalty_date": check["no_penalty_date"]})

            bill_action = self.latest_transaction(order)
            funds_held = bill_action.is_holding()
            percent = 100 if funds_held else check["percent"]
            amount = Money(order.amount, order.currency).percent(percent)

            order_refund = OrderRefund.objects.create(
                order=order,
                user=user,
                description=description,
                percent=percent,
                amount=amount.amount,
                with_penalty=percent < 100,
            )
            bill_action.set_status(BillAction.Status.REFUND_REQUESTED)
            transition(order, OrderStatus.CANCELED, event=OrderCanceled(
                aggregate_id=order.pk,
                order_id=order.pk,
                refund_percent=percent,
                refund_amount=amount.amount,
            ))

            if funds_held:
                self._call(
                    bill_action,
                    Operation.CANCEL_HOLD,
                    lambda key: self.gateway.cancel_hold(bill_action.hold_ref, idempotency_key=key),
                )
                bill_action.set_status(BillAction.Status.CANCELED, refunded_amount=amount.amount, refunded_at=now)
            else:
                result = self._call(
                    bill_action,
                    Operation.REFUND,
                    lambda key: self.gateway.refund(
                        bill_action.capture_ref or bill_action.hold_ref,
                        amount,
                        description,
                        idempotency_key=key,
                    ),
                    amount,
                )
                bill_action.set_status(
                    BillAction.Status.REFUNDED,
                    refund_ref=result.reference,
                    refunded_amount=amount.amount,
                    refunded_at=now,
                )
        logger.info(f"Order {order.pk}: refunded {percent}% ({amount})")
        return order_refund

    def capture_finished(self, order: Order, now: Optional[datetime] = None) -> BillAction:
        """Capture a hold left on an order.

        Used by the periodic tasks once the lead window has started or the
        session is over. The order status is kept; only the transaction
        becomes confirmed.
        """
        now = now or timezone.now()
        with transaction.atomic():
            bill_action = self.latest_transaction(order)
            if not bill_action.is_holding():
                return bill_action
            self._capture(bill_action, now)
            bill_action.set_status(
                BillAction.Status.CONFIRMED,
                capture_ref=bill_action.capture_ref,
                captured_at=bill_action.captured_at,
            )
        logger.info(f"Order {order.pk}: finished session, hold captured")
        return bill_action
