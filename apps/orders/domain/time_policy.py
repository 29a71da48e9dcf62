"""Booking-window and refund time rules.

Pure functions: every value that changes over time (``now``) or is
configured by admins (``config``) is passed in. ``config`` is anything with
the typed accessors of ``apps.appconfig.services.ConfigStore``.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING

from django.utils import timezone  # type: ignore

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.appconfig.services import ConfigStore
    from apps.excursions.models import Excursion
    from apps.orders.models import Order


def session_start(date_start: date, time_start: time) -> datetime:
    """Aware datetime of the session in the platform time zone."""
    return timezone.make_aware(datetime.combine(date_start, time_start))


def min_booking_days(excursion: "Excursion", config: "ConfigStore") -> int:
    """Lead days before a session for the excursion's kind.

    VIP excursions use ``vip`` whatever the subtype; otherwise individual
    and group subtypes use their own values and anything else gets 0.
    """
    days = config.time_min_booking()
    if excursion.type == "vip":
        return int(days.get("vip", 0))
    if excursion.subtype == "individual":
        return int(days.get("individual", 0))
    if excursion.subtype == "group":
        return int(days.get("group", 0))
    return 0


def booking_cutoff(excursion: "Excursion", session_at: datetime, config: "ConfigStore") -> datetime:
    """Last moment a booking for ``session_at`` is still accepted."""
    cutoff = session_at - timedelta(days=min_booking_days(excursion, config))
    before = (excursion.props or {}).get("booking_before") or {}
    return cutoff - timedelta(days=int(before.get("day") or 0), hours=int(before.get("hour") or 0))


def is_come_min_booking_time(
    excursion: "Excursion",
    session_at: datetime,
    config: "ConfigStore",
    now: datetime,
) -> bool:
    """Late booking: the lead time has already started, funds are captured at once."""
    return now >= session_at - timedelta(days=min_booking_days(excursion, config))


def no_penalty_date(date_start: date) -> date:
    """Last day on which a refund is returned in full."""
    return date_start - timedelta(days=1)


def refund_penalty_percent(date_start: date, config: "ConfigStore", now: datetime) -> int:
    """Share of the amount (in percent) returned on refund."""
    threshold = session_start(no_penalty_date(date_start), time.min)
    if now <= threshold:
        return 100
    return 100 - config.percentage_penalty()


def calculate_date_finish(date_start: date, time_start: time, config: "ConfigStore") -> datetime:
    return session_start(date_start, time_start) + timedelta(days=config.expired_days())


def order_expired(order: "Order", config: "ConfigStore", now: datetime) -> bool:
    """Session is over: start + duration + ``expired_days`` has passed."""
    duration = order.point.excursion_time.duration or order.excursion.duration
    finish = session_start(order.date_start, order.time_start) + duration
    return now >= finish + timedelta(days=config.expired_days())
