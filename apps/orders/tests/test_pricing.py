"""Order amount calculation and client total verification."""

from __future__ import annotations

from decimal import Decimal

import pytest

from apps.excursions.models import Excursion, ExcursionTimePoint
from apps.orders.domain.pricing import compute_amount, order_extras, verify_submitted_total
from apps.orders.exceptions import AmountMismatch, ValidationError
from shared.domain.value_objects import Money


def _point(**prices) -> ExcursionTimePoint:
    excursion = Excursion(
        price_adult=Decimal("1000.00"),
        price_children=Decimal("500.00"),
        props={"transfer": {"price": "300.00"}},
    )
    return ExcursionTimePoint(excursion=excursion, title="Точка", **prices)


def test_two_adults_and_a_child():
    amount = compute_amount(_point(), 2, 1)

    assert amount == Money(Decimal("2500.00"))


def test_submitted_total_mismatch_is_rejected():
    amount = compute_amount(_point(), 2, 1)

    with pytest.raises(AmountMismatch) as exc_info:
        verify_submitted_total(amount, Decimal("2400"))
    assert exc_info.value.extra["expected"] == "2500.00"


def test_matching_total_passes_in_any_notation():
    amount = compute_amount(_point(), 2, 1)

    verify_submitted_total(amount, "2500")
    verify_submitted_total(amount, Decimal("2500.00"))


def test_at_least_one_adult_is_charged():
    assert compute_amount(_point(), 0, 2) == Money(Decimal("2000.00"))


def test_point_prices_override_excursion_prices():
    point = _point(price_adult=Decimal("1200.00"))

    assert compute_amount(point, 1, 1) == Money(Decimal("1700.00"))


def test_same_inputs_same_amount():
    point = _point()

    assert compute_amount(point, 3, 2, Decimal("300")) == compute_amount(point, 3, 2, Decimal("300"))


def test_transfer_extra_only_when_requested():
    excursion = _point().excursion

    assert order_extras(excursion, transfer=False) == Decimal("0")
    assert order_extras(excursion, transfer=True) == Decimal("300.00")
    assert compute_amount(_point(), 1, 0, order_extras(excursion, True)) == Money(Decimal("1300.00"))


def test_negative_headcount_is_invalid():
    with pytest.raises(ValidationError):
        compute_amount(_point(), -1, 0)


def test_garbage_total_is_invalid():
    with pytest.raises(ValidationError):
        verify_submitted_total(Money(Decimal("10")), "ten")
