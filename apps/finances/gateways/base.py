"""Abstract payment gateway.

Every operation either returns a ``GatewayResult`` or raises
``GatewayError``; failures are never reported through the return value.
Each call carries an idempotency key which gateways that support it must
forward so that a repeated request is not executed twice.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict

from shared.domain.value_objects import Money


class GatewayError(Exception):
    """Gateway call failed.

    ``ambiguous`` is set when the outcome is unknown (timeout, broken
    connection after the request was sent); such calls must not be retried
    automatically.
    """

    def __init__(self, message: str, *, ambiguous: bool = False, payload: Dict[str, Any] | None = None):
        super().__init__(message)
        self.ambiguous = ambiguous
        self.payload = payload or {}


@dataclass(frozen=True)
class GatewayResult:
    reference: str
    payload: Dict[str, Any] = field(default_factory=dict)


class PaymentGateway(ABC):

    @abstractmethod
    def hold(self, order_ref: str, amount: Money, *, idempotency_key: str) -> GatewayResult:
        """Authorize ``amount`` without transferring it."""

    @abstractmethod
    def capture(self, hold_ref: str, amount: Money, *, idempotency_key: str) -> GatewayResult:
        """Turn a hold into an actual transfer."""

    @abstractmethod
    def cancel_hold(self, hold_ref: str, *, idempotency_key: str) -> GatewayResult:
        """Release a hold, returning the whole amount to the payer."""

    @abstractmethod
    def refund(self, transaction_ref: str, amount: Money, description: str, *,
               idempotency_key: str) -> GatewayResult:
        """Return ``amount`` of a captured payment."""
