"""In-memory gateway for tests and local development.

Calls are recorded on the class so that every instance built by
``get_gateway()`` shares them. ``fail_on`` makes the named operations raise.
"""

from __future__ import annotations

import uuid
from typing import Any, Dict, List, Set

from shared.domain.value_objects import Money

from .base import GatewayError, GatewayResult, PaymentGateway


class RecordingGateway(PaymentGateway):
    calls: List[Dict[str, Any]] = []
    fail_on: Set[str] = set()

    @classmethod
    def reset(cls) -> None:
        cls.calls = []
        cls.fail_on = set()

    @classmethod
    def operations(cls) -> List[str]:
        return [call["operation"] for call in cls.calls]

    @classmethod
    def last(cls, operation: str) -> Dict[str, Any]:
        return [call for call in cls.calls if call["operation"] == operation][-1]

    def _record(self, operation: str, **data: Any) -> GatewayResult:
        if operation in self.fail_on:
            raise GatewayError(f"{operation}: declined", payload={"operation": operation})
        reference = f"{operation}-{uuid.uuid4().hex[:12]}"
        type(self).calls.append({"operation": operation, "reference": reference, **data})
        return GatewayResult(reference=reference, payload={"operation": operation})

    def hold(self, order_ref: str, amount: Money, *, idempotency_key: str) -> GatewayResult:
        return self._record("hold", order_ref=order_ref, amount=amount, idempotency_key=idempotency_key)

    def capture(self, hold_ref: str, amount: Money, *, idempotency_key: str) -> GatewayResult:
        return self._record("capture", hold_ref=hold_ref, amount=amount, idempotency_key=idempotency_key)

    def cancel_hold(self, hold_ref: str, *, idempotency_key: str) -> GatewayResult:
        return self._record("cancel_hold", hold_ref=hold_ref, idempotency_key=idempotency_key)

    def refund(self, transaction_ref: str, amount: Money, description: str, *,
               idempotency_key: str) -> GatewayResult:
        return self._record(
            "refund",
            transaction_ref=transaction_ref,
            amount=amount,
            description=description,
            idempotency_key=idempotency_key,
        )
