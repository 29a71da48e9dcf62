"""Named order filters.

Each function returns a ``Q`` predicate; they compose with ``&`` / ``|``::

    Order.objects.filter(holding_funds() & without_complaints() & not_confirmed())
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model  # type: ignore
from django.db.models import Q  # type: ignore
from django.utils import timezone  # type: ignore

from apps.excursions.models import Excursion, ExcursionTime
from apps.finances.models import BillAction

from .domain.status import OrderStatus
from .models import Order

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.appconfig.services import ConfigStore


def _started_before(moment: datetime) -> Q:
    """Session (date_start + time_start) is strictly before ``moment``."""
    local = timezone.localtime(moment)
    return Q(date_start__lt=local.date()) | Q(date_start=local.date(), time_start__lt=local.time())


def _starts_by(moment: datetime) -> Q:
    """Session starts at or before ``moment``."""
    local = timezone.localtime(moment)
    return Q(date_start__lt=local.date()) | Q(date_start=local.date(), time_start__lte=local.time())


def not_confirmed() -> Q:
    return Q(date_confirm__isnull=True, employee__isnull=True)


def confirmed() -> Q:
    return Q(date_confirm__isnull=False, employee__isnull=False)


def not_expired(config: "ConfigStore", now: datetime) -> Q:
    """Session start + ``expired_days`` has not passed yet."""
    return ~_started_before(now - timedelta(days=config.expired_days()))


def active(config: "ConfigStore", now: datetime) -> Q:
    return not_expired(config, now) & not_confirmed()


def user_sales(user) -> Q:
    """Orders for excursions owned by ``user``."""
    return Q(excursion__owner=user)


def without_complaints() -> Q:
    return Q(complaints__isnull=True)


def holding_funds() -> Q:
    return Q(transaction__status=BillAction.Status.HOLDING)


def for_time(excursion_time: "ExcursionTime") -> Q:
    return Q(excursion_id=excursion_time.excursion_id, point__excursion_time=excursion_time)


def same_booking(buyer_id, excursion_id, point_id, date_start, time_start, number_adult) -> Q:
    """Identical booking that has not been completed yet."""
    return Q(
        buyer_id=buyer_id,
        excursion_id=excursion_id,
        point_id=point_id,
        date_start=date_start,
        time_start=time_start,
        number_adult=number_adult,
    ) & ~Q(status=OrderStatus.COMPLETED)


def sessions_over(config: "ConfigStore", now: datetime) -> Q:
    """Coarse database filter for finished sessions.

    Excursion duration is stored in props, so this only drops sessions that
    started after ``now - expired_days``; refine with
    ``time_policy.order_expired``.
    """
    return _started_before(now - timedelta(days=config.expired_days()))


def min_day_orders(config: "ConfigStore", now: datetime) -> Q:
    """Orders whose session has entered the lead window of its excursion kind.

    vip excursions use the ``vip`` days whatever the subtype, other
    individual and group excursions use their own values. Personal
    excursions have no lead window.
    """
    days = config.time_min_booking()
    not_vip = ~Q(excursion__type=Excursion.Type.VIP)
    return (
        (Q(excursion__type=Excursion.Type.VIP) & _starts_by(now + timedelta(days=int(days.get("vip", 0)))))
        | (
            not_vip
            & Q(excursion__subtype=Excursion.Subtype.INDIVIDUAL)
            & _starts_by(now + timedelta(days=int(days.get("individual", 0))))
        )
        | (
            not_vip
            & Q(excursion__subtype=Excursion.Subtype.GROUP)
            & _starts_by(now + timedelta(days=int(days.get("group", 0))))
        )
    )


def visible_to(user) -> Q:
    """Orders the user may see in listings."""
    if user.is_platform_admin():
        return Q()
    own = Q(buyer=user) | Q(order_user=user)
    if user.is_employee() and user.employer_id is not None:
        return own | Q(excursion__owner_id=user.employer_id)
    if user.is_partner():
        return own | user_sales(user)
    return own


def users_who_ordered(excursion_time: "ExcursionTime", config: "ConfigStore", now: datetime | None = None):
    """Buyers with active orders for the session, e.g. to notify them of changes."""
    now = now or timezone.now()
    order_ids = Order.objects.filter(for_time(excursion_time) & active(config, now)).values("buyer_id")
    return get_user_model().objects.filter(pk__in=order_ids)


def lock_order(order: Order) -> Order:
    """Lock the order row and reload its state.

    Must be called inside ``transaction.atomic()``.
    """
    Order.all_objects.select_for_update().filter(pk=order.pk).values_list("pk", flat=True).get()
    order.refresh_from_db()
    return order
