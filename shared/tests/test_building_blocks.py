"""Money, domain errors, the message bus and the unit of work."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from unittest import mock

import pytest
from django.test import TestCase
from rest_framework.exceptions import NotAuthenticated

from shared.application.message_bus import MessageBus
from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import DomainEvent, EventRecorder
from shared.domain.errors import DomainError, NotFound
from shared.domain.value_objects import Money
from shared.infrastructure.api_errors import domain_exception_handler


@dataclass(kw_only=True)
class SomethingHappened(DomainEvent):
    value: int


class Aggregate(EventRecorder):
    pk = 1


def test_money_arithmetic():
    total = Money(Decimal("1000")) * 2 + Money(Decimal("500"))

    assert total == Money(Decimal("2500"))
    assert total.percent(80) == Money(Decimal("2000.00"))
    assert Money("0.125").quantized() == Decimal("0.13")


def test_money_rejects_invalid_values():
    with pytest.raises(ValueError):
        Money(Decimal("-1"))
    with pytest.raises(ValueError):
        Money(Decimal("1"), "KZT")
    with pytest.raises(ValueError):
        Money(Decimal("1")) + Money(Decimal("1"), "USD")
    with pytest.raises(TypeError):
        Money(Decimal("1")) * 1.5


def test_domain_error_payload():
    error = NotFound("Нет такого заказа", code="order_not_found", extra={"order_id": 7})

    assert error.to_dict() == {"code": "order_not_found", "detail": "Нет такого заказа", "order_id": 7}
    assert DomainError().message == DomainError.default_message


def test_exception_handler_renders_domain_errors():
    response = domain_exception_handler(NotFound(), {"view": None})

    assert response.status_code == 404
    assert response.data["code"] == "not_found"


def test_exception_handler_defers_to_drf():
    response = domain_exception_handler(NotAuthenticated(), {"view": None, "request": None})

    assert response.status_code == 401


def test_message_bus_isolates_failing_handlers():
    bus = MessageBus()
    seen = []
    broken = mock.Mock(side_effect=RuntimeError("boom"), __name__="broken")
    bus.register_event_handler(SomethingHappened, broken)
    bus.register_event_handler(SomethingHappened, seen.append)
    bus.register_event_handler(SomethingHappened, seen.append)

    event = SomethingHappened(value=1)
    bus.publish_events([event])

    assert seen == [event]
    assert len(bus.handlers_for(SomethingHappened)) == 2


class UnitOfWorkTests(TestCase):

    def test_events_are_published_after_commit(self) -> None:
        aggregate = Aggregate()
        aggregate.add_event(SomethingHappened(value=2))

        with mock.patch("shared.application.message_bus.message_bus.publish_events") as publish:
            with self.captureOnCommitCallbacks(execute=True):
                with DjangoUnitOfWork() as uow:
                    uow.collect_events(aggregate)

        publish.assert_called_once()
        self.assertEqual(aggregate.events, [])

    def test_events_are_dropped_on_rollback(self) -> None:
        aggregate = Aggregate()
        aggregate.add_event(SomethingHappened(value=3))

        with mock.patch("shared.application.message_bus.message_bus.publish_events") as publish:
            with self.captureOnCommitCallbacks(execute=True):
                with self.assertRaises(RuntimeError):
                    with DjangoUnitOfWork() as uow:
                        uow.collect_events(aggregate)
                        raise RuntimeError("rollback")

        publish.assert_not_called()
