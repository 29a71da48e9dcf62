"""Order amount calculation.

The server always recomputes the amount; a total submitted by the client
is only compared against it and never corrected.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from apps.orders.exceptions import AmountMismatch, ValidationError
from shared.domain.value_objects import Money

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.excursions.models import Excursion, ExcursionTimePoint

logger = logging.getLogger(__name__)


def compute_amount(
    point: "ExcursionTimePoint",
    adults: int,
    children: int,
    extras: Decimal = Decimal("0"),
    currency: str = "RUB",
) -> Money:
    """``price_adult * max(adults, 1) + price_children * children + extras``.

    Point prices fall back to the excursion prices.
    """
    if adults < 0 or children < 0:
        raise ValidationError("Количество участников не может быть отрицательным.")
    adult_part = Money(point.effective_price_adult(), currency) * max(adults, 1)
    children_part = Money(point.effective_price_children(), currency) * children
    return adult_part + children_part + Money(extras, currency)


def order_extras(excursion: "Excursion", transfer: bool) -> Decimal:
    """Transfer price from the excursion props when a transfer is requested."""
    if not transfer:
        return Decimal("0")
    option = (excursion.props or {}).get("transfer") or {}
    try:
        return Decimal(str(option.get("price") or 0))
    except InvalidOperation:
        raise ValidationError("Некорректная цена трансфера у экскурсии.")


def verify_submitted_total(computed: Money, submitted) -> None:
    try:
        submitted_amount = Decimal(str(submitted))
    except InvalidOperation:
        raise ValidationError("Некорректная сумма заказа.")
    if computed.quantized() != submitted_amount.quantize(Decimal("0.01")):
        logger.warning(f"Amount mismatch: computed {computed.quantized()}, submitted {submitted_amount}")
        raise AmountMismatch(extra={"expected": str(computed.quantized())})
