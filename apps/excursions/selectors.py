"""Read-only lookups used by the order engine."""

from __future__ import annotations

from shared.domain.errors import NotFound
from shared.infrastructure.locking import lock_queryset_if_possible

from .models import Excursion, ExcursionTimePoint


def get_excursion(excursion_id: int) -> Excursion:
    try:
        return Excursion.objects.select_related("owner").get(pk=excursion_id)
    except Excursion.DoesNotExist:
        raise NotFound(f"Экскурсия {excursion_id} не найдена.", code="excursion_not_found")


def get_time_point(point_id: int, *, excursion_id: int | None = None, lock: bool = False) -> ExcursionTimePoint:
    """Точка сбора вместе с сеансом и экскурсией.

    ``lock=True`` берёт ``SELECT ... FOR UPDATE`` на строку точки: все брони
    одной точки сериализуются внутри ``transaction.atomic()``.
    """
    qs = ExcursionTimePoint.objects.all()
    if excursion_id is not None:
        qs = qs.filter(excursion_id=excursion_id)
    try:
        if lock:
            # Lock only the point row; joined rows stay unlocked.
            lock_queryset_if_possible(qs.filter(pk=point_id)).values_list("pk", flat=True).get()
        return qs.select_related("excursion_time", "excursion", "excursion__owner").get(pk=point_id)
    except ExcursionTimePoint.DoesNotExist:
        raise NotFound(f"Точка сбора {point_id} не найдена.", code="point_not_found")
