"""Filters for order listings."""

from __future__ import annotations

import django_filters  # type: ignore
from django.db.models import Q  # type: ignore

from .models import Order


class OrderFilterSet(django_filters.FilterSet):
    search = django_filters.CharFilter(method="filter_search", label="ID заказа или название экскурсии")
    date = django_filters.DateFilter(field_name="date_start")
    date_from = django_filters.DateFilter(field_name="date_start", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date_start", lookup_expr="lte")
    buyer = django_filters.NumberFilter(field_name="buyer_id")
    employee = django_filters.NumberFilter(field_name="employee_id")
    excursion = django_filters.NumberFilter(field_name="excursion_id")
    status = django_filters.TypedChoiceFilter(choices=Order.Status.choices, coerce=int)

    class Meta:
        model = Order
        fields = ["search", "date", "date_from", "date_to", "buyer", "employee", "excursion", "status"]

    def filter_search(self, queryset, name, value):  # type: ignore
        value = (value or "").strip()
        if not value:
            return queryset
        condition = Q(excursion__name__icontains=value)
        if value.isdigit():
            condition |= Q(pk=int(value))
        return queryset.filter(condition)
