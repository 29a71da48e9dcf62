"""Booking admission: may this buyer book this session now?"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Optional

from django.conf import settings  # type: ignore
from django.utils import timezone  # type: ignore

from apps.appconfig.services import ConfigStore, config_store

from ..domain import time_policy
from ..exceptions import BookingTooEarly, BookingWindowClosed, DuplicateBooking
from ..models import Order
from ..queries import same_booking

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.excursions.models import Excursion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Admission:
    allowed: bool
    reason: str = ""
    code: str = ""

    def raise_if_denied(self) -> None:
        if self.allowed:
            return
        error_class = BookingWindowClosed if self.code == BookingWindowClosed.code else BookingTooEarly
        raise error_class(self.reason)


class BookingAdmissionController:
    """Gates order creation by the booking window and repeat purchases.

    ``admit`` must run inside the transaction that inserts the order, with
    the meeting point row locked, so that the duplicate check and the
    insert are serialized.
    """

    def __init__(self, config: Optional[ConfigStore] = None, max_advance_days: Optional[int] = None):
        self.config = config or config_store
        self.max_advance_days = (
            max_advance_days if max_advance_days is not None else settings.BOOKING_MAX_ADVANCE_DAYS
        )

    def can_book(
        self,
        excursion: "Excursion",
        date_start: date,
        time_start: time,
        now: Optional[datetime] = None,
    ) -> Admission:
        now = now or timezone.now()
        session_at = time_policy.session_start(date_start, time_start)

        if now >= time_policy.booking_cutoff(excursion, session_at, self.config):
            return Admission(False, BookingWindowClosed.default_message, BookingWindowClosed.code)
        if now <= session_at - timedelta(days=self.max_advance_days):
            return Admission(False, BookingTooEarly.default_message, BookingTooEarly.code)
        return Admission(True)

    def is_duplicate(self, buyer_id, excursion_id, point_id, date_start, time_start, adult_count) -> bool:
        return Order.objects.filter(
            same_booking(buyer_id, excursion_id, point_id, date_start, time_start, adult_count)
        ).exists()

    def admit(
        self,
        excursion: "Excursion",
        buyer_id,
        point_id,
        date_start: date,
        time_start: time,
        adult_count: int,
        *,
        ignore_duplicate_check: bool = False,
        now: Optional[datetime] = None,
    ) -> None:
        admission = self.can_book(excursion, date_start, time_start, now)
        if not admission.allowed:
            logger.info(
                f"Booking of excursion {excursion.pk} at {date_start} {time_start} refused: {admission.code}"
            )
        admission.raise_if_denied()

        if ignore_duplicate_check:
            return
        if self.is_duplicate(buyer_id, excursion.pk, point_id, date_start, time_start, adult_count):
            logger.info(f"Duplicate booking of excursion {excursion.pk} by user {buyer_id}")
            raise DuplicateBooking(
                extra={
                    "description": 'Чтобы проигнорировать проверку, передайте поле "ignore_repeat_order" '
                                   'со значением "true".',
                }
            )
