"""Complaints against orders.

A complaint may be filed once, by the buyer, before the ticket is redeemed
and no later than a day after ``date_finish``. Filing it suspends the
order; the funds stay untouched until an admin refunds it.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from django.utils import timezone  # type: ignore

from ..domain.events import OrderSuspended
from ..domain.status import OrderStatus, transition
from ..exceptions import ComplaintDenied, ValidationError
from ..models import Complaint, Order

logger = logging.getLogger(__name__)


class ComplaintArbiter:

    def can_complain(self, order: Order, user, now: Optional[datetime] = None) -> Dict[str, Any]:
        now = now or timezone.now()
        expired_date = order.date_finish + timedelta(days=1)
        checks = {
            "check_user": order.buyer_id == user.pk,
            "check_ticket": order.date_confirm is None,
            "check_date": expired_date >= now,
            "check_status": order.status == OrderStatus.PENDING,
            "complaint_exists": order.has_complaints(),
        }
        allowed = (
            checks["check_user"]
            and checks["check_ticket"]
            and checks["check_date"]
            and checks["check_status"]
            and not checks["complaint_exists"]
        )
        return {
            "status": allowed,
            **checks,
            "expired_date": timezone.localtime(expired_date).strftime("%d.%m.%Y %H:%M"),
        }

    def file_complaint(
        self,
        order: Order,
        user,
        type: str,
        description: str = "",
        now: Optional[datetime] = None,
    ) -> Complaint:
        """Record a complaint and suspend the order.

        Runs inside the caller's atomic block with the order row locked.
        """
        if not type:
            raise ValidationError("Не указан тип жалобы.")
        check = self.can_complain(order, user, now)
        if not check["status"]:
            logger.info(f"Order {order.pk}: complaint by user {user.pk} refused")
            raise ComplaintDenied(extra={key: value for key, value in check.items() if key != "status"})

        complaint = Complaint.objects.create(
            order=order,
            user=user,
            type=type.upper(),
            description=description,
        )
        transition(order, OrderStatus.SUSPENDED, event=OrderSuspended(
            aggregate_id=order.pk,
            order_id=order.pk,
            complaint_id=complaint.pk,
        ))
        logger.info(f"Order {order.pk}: complaint {complaint.pk} filed, order suspended")
        return complaint
