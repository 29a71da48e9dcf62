"""Object builders shared by the order tests."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Dict, Optional

from django.utils import timezone

from apps.appconfig.models import AppConfig
from apps.excursions.models import Excursion, ExcursionTime, ExcursionTimePoint, MapLocation
from apps.users.models import User


class StaticConfig:
    """In-memory stand-in for ``ConfigStore`` accessors."""

    def __init__(self, *, vip: int = 0, individual: int = 0, group: int = 0,
                 percentage_penalty: int = 0, expired_days: int = 0):
        self._days = {"vip": vip, "individual": individual, "group": group}
        self._penalty = percentage_penalty
        self._expired_days = expired_days

    def time_min_booking(self) -> Dict[str, int]:
        return dict(self._days)

    def percentage_penalty(self) -> int:
        return self._penalty

    def expired_days(self) -> int:
        return self._expired_days


def moment(year: int, month: int, day: int, hour: int = 0, minute: int = 0) -> datetime:
    """Aware datetime in the platform time zone."""
    return timezone.make_aware(datetime(year, month, day, hour, minute))


def set_config(*, vip: int = 3, individual: int = 2, group: int = 1,
               percentage_penalty: int = 20, expired_days: int = 1) -> None:
    values = {
        AppConfig.Keys.TIME_MIN_BOOKING.value: {"vip": vip, "individual": individual, "group": group},
        AppConfig.Keys.PERCENTAGE_PENALTY.value: percentage_penalty,
        AppConfig.Keys.EXPIRED_DAYS.value: expired_days,
    }
    for key, value in values.items():
        AppConfig.objects.update_or_create(key=key, defaults={"value": value})


def make_user(email: str, role: str = User.RoleChoices.BUYER, **extra: Any) -> User:
    return User.objects.create_user(email=email, password="Pass12345", role=role, **extra)


def make_excursion(owner: User, *, type: str = Excursion.Type.EXC, subtype: str = Excursion.Subtype.GROUP,
                   price_adult: str = "1000.00", price_children: str = "500.00",
                   props: Optional[dict] = None, **extra: Any) -> Excursion:
    return Excursion.objects.create(
        owner=owner,
        name=extra.pop("name", "Ночной Петербург"),
        type=type,
        subtype=subtype,
        price_adult=Decimal(price_adult),
        price_children=Decimal(price_children),
        props=props if props is not None else {"duration": 120},
        **extra,
    )


def make_point(excursion: Excursion, *, session_date: Optional[date] = None,
               session_time: time = time(10, 0), duration: Optional[timedelta] = None,
               **prices: Any) -> ExcursionTimePoint:
    excursion_time = ExcursionTime.objects.create(
        excursion=excursion,
        date=session_date,
        time=session_time,
        duration=duration,
    )
    point = ExcursionTimePoint.objects.create(
        excursion_time=excursion_time,
        excursion=excursion,
        title="Дворцовая площадь",
        address="Дворцовая пл., 2",
        **prices,
    )
    MapLocation.objects.create(point=point, lat=Decimal("59.938951"), lng=Decimal("30.315635"))
    return point


def make_order(buyer: User, point: ExcursionTimePoint, *, session_date: Optional[date] = None,
               amount: str = "2500.00", bill_status: Optional[str] = None, **extra: Any):
    """Order row written directly, bypassing admission and payments."""
    from apps.finances.models import BillAction
    from apps.orders.models import Order

    session_date = session_date or point.excursion_time.date or date(2024, 6, 10)
    session_time = point.excursion_time.time
    order = Order.objects.create(
        buyer=buyer,
        excursion=point.excursion,
        point=point,
        number_adult=extra.pop("number_adult", 2),
        number_children=extra.pop("number_children", 1),
        amount=Decimal(amount),
        date_start=session_date,
        time_start=session_time,
        date_finish=timezone.make_aware(datetime.combine(session_date, session_time)) + timedelta(days=1),
        **extra,
    )
    if bill_status is not None:
        BillAction.objects.create(
            order=order,
            status=bill_status,
            amount=order.amount,
            hold_ref="hold-existing",
            capture_ref="capture-existing" if bill_status == BillAction.Status.CONFIRMED else "",
        )
    return order
