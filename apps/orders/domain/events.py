"""
Order Domain Events

Recorded on the order during a state change and published after the
surrounding transaction commits.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from shared.domain.base import DomainEvent


@dataclass(kw_only=True)
class OrderCreated(DomainEvent):
    order_id: int
    buyer_id: int
    excursion_id: int
    amount: Decimal
    funds_held: bool = True


@dataclass(kw_only=True)
class OrderCompleted(DomainEvent):
    """Ticket redeemed and funds captured (or settled by arbitration)."""
    order_id: int
    employee_id: Optional[int] = None


@dataclass(kw_only=True)
class OrderCanceled(DomainEvent):
    order_id: int
    refund_percent: int
    refund_amount: Decimal


@dataclass(kw_only=True)
class OrderSuspended(DomainEvent):
    """A complaint was filed against the order."""
    order_id: int
    complaint_id: int
