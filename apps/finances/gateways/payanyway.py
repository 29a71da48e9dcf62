"""
Payanyway (MONETA) payment gateway client

HTTP integration for holding, capturing and refunding order payments.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Dict

import requests
from django.conf import settings

from shared.domain.value_objects import Money

from .base import GatewayError, GatewayResult, PaymentGateway

logger = logging.getLogger(__name__)


class PayanywayGateway(PaymentGateway):
    """Клиент API Payanyway.

    Суммы передаются в копейках, каждый запрос подписывается SHA256 от
    отсортированных параметров и секретного ключа.
    """

    def __init__(self, base_url: str | None = None, account_id: str | None = None,
                 secret_key: str | None = None, timeout: int | None = None, session=None):
        self.base_url = base_url or settings.PAYMENT_GATEWAY_BASE_URL
        self.account_id = account_id or settings.PAYMENT_GATEWAY_ACCOUNT_ID
        self.secret_key = secret_key or settings.PAYMENT_GATEWAY_SECRET_KEY
        self.timeout = timeout or settings.PAYMENT_GATEWAY_TIMEOUT
        self.session = session or requests.Session()

    def generate_signature(self, data: Dict[str, Any]) -> str:
        """
        Генерация подписи для запроса к API
        """
        sorted_data = sorted(data.items())
        sign_string = "&".join([f"{k}={v}" for k, v in sorted_data])
        sign_string += f"&{self.secret_key}"
        return hashlib.sha256(sign_string.encode()).hexdigest()

    @staticmethod
    def _minor_units(amount: Money) -> int:
        return int(amount.quantized() * 100)

    def _request(self, method: str, payload: Dict[str, Any], idempotency_key: str) -> Dict[str, Any]:
        payload = {"account_id": self.account_id, **payload}
        payload["signature"] = self.generate_signature(payload)
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Idempotency-Key": idempotency_key,
        }

        logger.info(f"Payanyway request {method}, idempotency key {idempotency_key}")
        try:
            response = self.session.post(
                f"{self.base_url}{method}",
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
            logger.error(f"Payanyway {method}: no reliable answer: {e}")
            raise GatewayError(f"{method}: outcome unknown", ambiguous=True) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Payanyway {method}: request error: {e}")
            raise GatewayError(f"{method}: request error") from e

        try:
            response.raise_for_status()
            result = response.json()
        except (requests.exceptions.HTTPError, ValueError) as e:
            logger.error(f"Payanyway {method}: bad response {response.status_code}: {e}")
            raise GatewayError(
                f"{method}: bad response",
                ambiguous=response.status_code >= 500,
                payload={"status_code": response.status_code},
            ) from e

        if not result.get("success"):
            error_msg = (result.get("error") or {}).get("message", "Unknown error")
            logger.error(f"Payanyway {method} returned error: {error_msg}")
            raise GatewayError(f"{method}: {error_msg}", payload=result)
        return result

    @staticmethod
    def _result(result: Dict[str, Any], field: str, method: str) -> GatewayResult:
        reference = result.get(field)
        if reference in (None, ""):
            # Операция прошла, но ссылку на неё мы не знаем.
            logger.error(f"Payanyway {method}: success without {field}")
            raise GatewayError(f"{method}: no {field} in response", ambiguous=True, payload=result)
        return GatewayResult(reference=str(reference), payload=result)

    def hold(self, order_ref: str, amount: Money, *, idempotency_key: str) -> GatewayResult:
        result = self._request(
            "payments/hold",
            {"order_id": order_ref, "amount": self._minor_units(amount), "currency": amount.currency},
            idempotency_key,
        )
        return self._result(result, "operation_id", "payments/hold")

    def capture(self, hold_ref: str, amount: Money, *, idempotency_key: str) -> GatewayResult:
        result = self._request(
            "payments/confirm",
            {"operation_id": hold_ref, "amount": self._minor_units(amount)},
            idempotency_key,
        )
        return GatewayResult(reference=str(result.get("operation_id", hold_ref)), payload=result)

    def cancel_hold(self, hold_ref: str, *, idempotency_key: str) -> GatewayResult:
        result = self._request("payments/cancel", {"operation_id": hold_ref}, idempotency_key)
        return GatewayResult(reference=str(result.get("operation_id", hold_ref)), payload=result)

    def refund(self, transaction_ref: str, amount: Money, description: str, *,
               idempotency_key: str) -> GatewayResult:
        result = self._request(
            "payments/refund",
            {
                "operation_id": transaction_ref,
                "amount": self._minor_units(amount),
                "description": description or "Возврат по заказу",
            },
            idempotency_key,
        )
        return self._result(result, "refund_id", "payments/refund")
