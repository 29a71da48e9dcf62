"""Payanyway client: request shape and error mapping."""

from __future__ import annotations

from decimal import Decimal
from unittest import mock

import pytest
import requests

from apps.finances.gateways.base import GatewayError
from apps.finances.gateways.payanyway import PayanywayGateway
from shared.domain.value_objects import Money


def _response(status_code=200, payload=None):
    response = mock.Mock(status_code=status_code)
    response.json.return_value = payload if payload is not None else {}
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code}")
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def session():
    return mock.Mock()


@pytest.fixture
def gateway(session):
    return PayanywayGateway(
        base_url="https://pay.test/v1/",
        account_id="42",
        secret_key="secret",
        timeout=5,
        session=session,
    )


def test_hold_sends_kopecks_and_idempotency_key(gateway, session):
    session.post.return_value = _response(payload={"success": True, "operation_id": 777})

    result = gateway.hold("15", Money(Decimal("2500.50")), idempotency_key="uuid:hold")

    assert result.reference == "777"
    url = session.post.call_args.args[0]
    kwargs = session.post.call_args.kwargs
    assert url == "https://pay.test/v1/payments/hold"
    assert kwargs["json"]["amount"] == 250050
    assert kwargs["json"]["account_id"] == "42"
    assert kwargs["headers"]["Idempotency-Key"] == "uuid:hold"
    assert kwargs["timeout"] == 5


def test_signature_covers_sorted_params(gateway):
    expected = gateway.generate_signature({"b": 2, "a": 1})

    assert expected == gateway.generate_signature({"a": 1, "b": 2})
    assert expected != gateway.generate_signature({"a": 1, "b": 3})


def test_refund_uses_refund_id(gateway, session):
    session.post.return_value = _response(payload={"success": True, "refund_id": "r-1"})

    result = gateway.refund("op-1", Money(Decimal("2000")), "", idempotency_key="uuid:refund")

    assert result.reference == "r-1"
    assert session.post.call_args.kwargs["json"]["description"] == "Возврат по заказу"


def test_timeout_is_ambiguous(gateway, session):
    session.post.side_effect = requests.exceptions.Timeout("slow")

    with pytest.raises(GatewayError) as exc_info:
        gateway.capture("op-1", Money(Decimal("10")), idempotency_key="uuid:capture")
    assert exc_info.value.ambiguous


def test_server_error_is_ambiguous_client_error_is_not(gateway, session):
    session.post.return_value = _response(status_code=503)
    with pytest.raises(GatewayError) as server_error:
        gateway.cancel_hold("op-1", idempotency_key="uuid:cancel_hold")

    session.post.return_value = _response(status_code=400)
    with pytest.raises(GatewayError) as client_error:
        gateway.cancel_hold("op-1", idempotency_key="uuid:cancel_hold")

    assert server_error.value.ambiguous
    assert not client_error.value.ambiguous


def test_declined_operation(gateway, session):
    session.post.return_value = _response(payload={"success": False, "error": {"message": "Insufficient funds"}})

    with pytest.raises(GatewayError, match="Insufficient funds") as exc_info:
        gateway.hold("15", Money(Decimal("10")), idempotency_key="uuid:hold")
    assert not exc_info.value.ambiguous


@pytest.mark.parametrize(
    "call",
    [
        lambda gateway: gateway.hold("15", Money(Decimal("10")), idempotency_key="uuid:hold"),
        lambda gateway: gateway.refund("op-1", Money(Decimal("10")), "", idempotency_key="uuid:refund"),
    ],
    ids=["hold", "refund"],
)
def test_success_without_reference_is_ambiguous(gateway, session, call):
    session.post.return_value = _response(payload={"success": True})

    with pytest.raises(GatewayError) as exc_info:
        call(gateway)
    assert exc_info.value.ambiguous
