"""Periodic capture of holds left on finished sessions."""

from __future__ import annotations

from datetime import date
from unittest import mock

from django.test import TestCase

from apps.finances.gateways.fake import RecordingGateway
from apps.finances.models import BillAction
from apps.orders.domain.status import OrderStatus
from apps.orders.models import Complaint
from apps.excursions.models import Excursion
from apps.orders.tasks import capture_finished_holds, capture_lead_time_holds
from apps.users.models import User

from .factories import make_excursion, make_order, make_point, make_user, moment, set_config


class CaptureFinishedHoldsTests(TestCase):

    def setUp(self) -> None:
        set_config(expired_days=1)
        self.buyer = make_user("buyer@example.com")
        owner = make_user("partner@example.com", role=User.RoleChoices.PARTNER)
        # Session 10 June 10:00, 2 hours long; grace period ends 11 June 12:00.
        self.excursion = make_excursion(owner, props={"duration": 120})
        self.point = make_point(self.excursion, session_date=date(2024, 6, 10))

    def _run(self, now):
        with mock.patch("django.utils.timezone.now", return_value=now):
            return capture_finished_holds()

    def test_finished_hold_is_captured(self) -> None:
        order = make_order(self.buyer, self.point, bill_status=BillAction.Status.HOLDING)

        result = self._run(moment(2024, 6, 11, 12))

        self.assertEqual(result, {"captured": 1, "failed": 0})
        self.assertEqual(BillAction.objects.get(order=order).status, BillAction.Status.CONFIRMED)
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.PENDING)

    def test_session_still_in_grace_period(self) -> None:
        make_order(self.buyer, self.point, bill_status=BillAction.Status.HOLDING)

        result = self._run(moment(2024, 6, 11, 11, 59))

        self.assertEqual(result, {"captured": 0, "failed": 0})
        self.assertEqual(RecordingGateway.operations(), [])

    def test_orders_with_complaints_are_skipped(self) -> None:
        order = make_order(self.buyer, self.point, bill_status=BillAction.Status.HOLDING,
                           status=OrderStatus.SUSPENDED)
        Complaint.objects.create(order=order, user=self.buyer, type="NO_SHOW")

        self.assertEqual(self._run(moment(2024, 6, 20)), {"captured": 0, "failed": 0})

    def test_captured_orders_are_skipped(self) -> None:
        make_order(self.buyer, self.point, bill_status=BillAction.Status.CONFIRMED)

        self.assertEqual(self._run(moment(2024, 6, 20)), {"captured": 0, "failed": 0})

    def test_gateway_failure_is_left_for_next_run(self) -> None:
        order = make_order(self.buyer, self.point, bill_status=BillAction.Status.HOLDING)
        RecordingGateway.fail_on = {"capture"}

        self.assertEqual(self._run(moment(2024, 6, 20)), {"captured": 0, "failed": 1})
        self.assertEqual(BillAction.objects.get(order=order).status, BillAction.Status.HOLDING)

        RecordingGateway.fail_on = set()
        self.assertEqual(self._run(moment(2024, 6, 20, 1)), {"captured": 1, "failed": 0})

    def test_bad_excursion_duration_does_not_stop_the_run(self) -> None:
        owner = self.excursion.owner
        broken = make_excursion(owner, name="Сломанная", props={"duration": "2 hours"})
        broken_order = make_order(self.buyer, make_point(broken, session_date=date(2024, 6, 10)),
                                  bill_status=BillAction.Status.HOLDING)
        order = make_order(self.buyer, self.point, bill_status=BillAction.Status.HOLDING)

        result = self._run(moment(2024, 6, 20))

        self.assertEqual(result, {"captured": 1, "failed": 1})
        self.assertEqual(BillAction.objects.get(order=broken_order).status, BillAction.Status.HOLDING)
        self.assertEqual(BillAction.objects.get(order=order).status, BillAction.Status.CONFIRMED)


class CaptureLeadTimeHoldsTests(TestCase):

    def setUp(self) -> None:
        set_config(vip=3, individual=2, group=1)
        self.buyer = make_user("buyer@example.com")
        self.owner = make_user("partner@example.com", role=User.RoleChoices.PARTNER)

    def _order(self, **excursion):
        point = make_point(make_excursion(self.owner, **excursion), session_date=date(2024, 6, 10))
        return make_order(self.buyer, point, bill_status=BillAction.Status.HOLDING)

    def _run(self, now):
        with mock.patch("django.utils.timezone.now", return_value=now):
            return capture_lead_time_holds()

    def test_group_hold_is_captured_when_lead_window_starts(self) -> None:
        order = self._order(subtype=Excursion.Subtype.GROUP)

        self.assertEqual(self._run(moment(2024, 6, 9, 9, 59)), {"captured": 0, "failed": 0})
        self.assertEqual(self._run(moment(2024, 6, 9, 10)), {"captured": 1, "failed": 0})

        bill_action = BillAction.objects.get(order=order)
        self.assertEqual(bill_action.status, BillAction.Status.CONFIRMED)
        self.assertEqual(RecordingGateway.operations(), ["capture"])
        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.PENDING)

    def test_vip_uses_vip_days_whatever_the_subtype(self) -> None:
        vip = self._order(type=Excursion.Type.VIP, subtype=Excursion.Subtype.GROUP)
        individual = self._order(subtype=Excursion.Subtype.INDIVIDUAL)

        self.assertEqual(self._run(moment(2024, 6, 7, 10)), {"captured": 1, "failed": 0})
        self.assertEqual(BillAction.objects.get(order=vip).status, BillAction.Status.CONFIRMED)
        self.assertEqual(BillAction.objects.get(order=individual).status, BillAction.Status.HOLDING)

        self.assertEqual(self._run(moment(2024, 6, 8, 10)), {"captured": 1, "failed": 0})
        self.assertEqual(BillAction.objects.get(order=individual).status, BillAction.Status.CONFIRMED)

    def test_personal_excursions_have_no_lead_window(self) -> None:
        self._order(subtype=Excursion.Subtype.PERSONAL)

        self.assertEqual(self._run(moment(2024, 6, 9, 23)), {"captured": 0, "failed": 0})

    def test_orders_with_complaints_keep_their_hold(self) -> None:
        order = self._order(subtype=Excursion.Subtype.GROUP)
        Complaint.objects.create(order=order, user=self.buyer, type="NO_SHOW")

        self.assertEqual(self._run(moment(2024, 6, 9, 12)), {"captured": 0, "failed": 0})
        self.assertEqual(BillAction.objects.get(order=order).status, BillAction.Status.HOLDING)
