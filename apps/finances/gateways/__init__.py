"""Payment gateway capability.

``get_gateway()`` builds the gateway configured by ``settings.PAYMENT_GATEWAY``.
"""

from __future__ import annotations

from django.conf import settings  # type: ignore
from django.utils.module_loading import import_string  # type: ignore

from .base import GatewayError, GatewayResult, PaymentGateway

__all__ = ["GatewayError", "GatewayResult", "PaymentGateway", "get_gateway"]


def get_gateway() -> PaymentGateway:
    gateway_class = import_string(settings.PAYMENT_GATEWAY)
    return gateway_class()
