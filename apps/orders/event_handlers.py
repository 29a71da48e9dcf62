"""Handlers for order domain events."""

from __future__ import annotations

import json
import logging

from shared.application.message_bus import message_bus
from shared.domain.base import DomainEvent

from .domain.events import OrderCanceled, OrderCompleted, OrderCreated, OrderSuspended

audit_logger = logging.getLogger("apps.orders.audit")


def log_order_event(event: DomainEvent) -> None:
    """Аудит: каждое событие заказа пишется в журнал одной JSON-строкой."""
    payload = event.to_dict()
    payload.update(
        {
            key: value
            for key, value in vars(event).items()
            if key not in ("event_id", "occurred_at", "aggregate_id")
        }
    )
    audit_logger.info(json.dumps(payload, default=str, ensure_ascii=False))


def register_handlers() -> None:
    for event_type in (OrderCreated, OrderCompleted, OrderCanceled, OrderSuspended):
        message_bus.register_event_handler(event_type, log_order_event)
