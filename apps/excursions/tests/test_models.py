"""Excursion catalogue models and selectors."""

from __future__ import annotations

from datetime import time, timedelta
from decimal import Decimal

import pytest
from django.test import TestCase

from apps.excursions.models import Excursion, ExcursionTime, ExcursionTimePoint, MapLocation, parse_duration
from apps.excursions.selectors import get_excursion, get_time_point
from apps.users.models import User
from shared.domain.errors import NotFound


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, timedelta(0)),
        (90, timedelta(minutes=90)),
        ("02:30", timedelta(hours=2, minutes=30)),
        ("1:05:30", timedelta(hours=1, minutes=5, seconds=30)),
    ],
)
def test_parse_duration(value, expected):
    assert parse_duration(value) == expected


def test_parse_duration_rejects_garbage():
    with pytest.raises(ValueError):
        parse_duration("two hours")


class ExcursionModelTests(TestCase):

    def setUp(self) -> None:
        owner = User.objects.create_user(email="partner@example.com", role=User.RoleChoices.PARTNER)
        self.excursion = Excursion.objects.create(
            owner=owner,
            name="Петергоф",
            price_adult=Decimal("1500.00"),
            price_children=Decimal("700.00"),
            props={"duration": "03:00"},
        )
        self.excursion_time = ExcursionTime.objects.create(excursion=self.excursion, time=time(9, 30))
        self.point = ExcursionTimePoint.objects.create(
            excursion_time=self.excursion_time,
            excursion=self.excursion,
            title="Эрмитаж",
            price_children=Decimal("500.00"),
        )
        MapLocation.objects.create(point=self.point, lat=Decimal("59.94"), lng=Decimal("30.31"))

    def test_duration_from_props(self) -> None:
        self.assertEqual(self.excursion.duration, timedelta(hours=3))

    def test_point_prices_fall_back_to_excursion(self) -> None:
        self.assertEqual(self.point.effective_price_adult(), Decimal("1500.00"))
        self.assertEqual(self.point.effective_price_children(), Decimal("500.00"))

    def test_snapshot(self) -> None:
        snapshot = ExcursionTimePoint.objects.get(pk=self.point.pk).snapshot()

        self.assertEqual(snapshot["title"], "Эрмитаж")
        self.assertEqual(snapshot["time"], "09:30")
        self.assertEqual(snapshot["location"], {"lat": "59.940000", "lng": "30.310000"})

    def test_deleting_session_cascades_to_map(self) -> None:
        self.excursion_time.delete()

        self.assertFalse(ExcursionTimePoint.objects.exists())
        self.assertFalse(MapLocation.objects.exists())

    def test_selectors(self) -> None:
        self.assertEqual(get_excursion(self.excursion.pk), self.excursion)
        self.assertEqual(get_time_point(self.point.pk, excursion_id=self.excursion.pk), self.point)
        with self.assertRaises(NotFound):
            get_time_point(self.point.pk, excursion_id=self.excursion.pk + 1)
        with self.assertRaises(NotFound):
            get_excursion(self.excursion.pk + 1)
