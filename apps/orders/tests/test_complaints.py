"""Complaints suspend orders once, for the buyer, in time."""

from __future__ import annotations

from datetime import date

from django.test import TestCase

from apps.finances.models import BillAction
from apps.orders.domain.status import OrderStatus
from apps.orders.exceptions import ComplaintDenied, ValidationError
from apps.orders.models import Complaint
from apps.orders.services import ComplaintArbiter, OrderService
from apps.users.models import User

from .factories import StaticConfig, make_excursion, make_order, make_point, make_user, moment


class ComplaintArbiterTests(TestCase):

    def setUp(self) -> None:
        self.arbiter = ComplaintArbiter()
        self.buyer = make_user("buyer@example.com")
        self.owner = make_user("partner@example.com", role=User.RoleChoices.PARTNER)
        self.point = make_point(make_excursion(self.owner), session_date=date(2024, 6, 10))
        self.order = make_order(self.buyer, self.point, bill_status=BillAction.Status.HOLDING)

    def test_report_for_eligible_buyer(self) -> None:
        result = self.arbiter.can_complain(self.order, self.buyer, now=moment(2024, 6, 10, 15))

        self.assertTrue(result["status"])
        self.assertTrue(result["check_user"])
        self.assertTrue(result["check_ticket"])
        self.assertTrue(result["check_date"])
        self.assertFalse(result["complaint_exists"])
        self.assertEqual(result["expired_date"], "12.06.2024 10:00")

    def test_filing_suspends_order(self) -> None:
        complaint = self.arbiter.file_complaint(
            self.order, self.buyer, "no_show", "Гид не пришёл", now=moment(2024, 6, 10, 15)
        )

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.SUSPENDED)
        self.assertEqual(complaint.type, "NO_SHOW")

    def test_only_one_complaint_per_order(self) -> None:
        self.arbiter.file_complaint(self.order, self.buyer, "no_show", now=moment(2024, 6, 10, 15))

        result = self.arbiter.can_complain(self.order, self.buyer, now=moment(2024, 6, 10, 16))
        self.assertFalse(result["status"])
        self.assertTrue(result["complaint_exists"])
        with self.assertRaises(ComplaintDenied):
            self.arbiter.file_complaint(self.order, self.buyer, "other", now=moment(2024, 6, 10, 16))
        self.assertEqual(Complaint.objects.filter(order=self.order).count(), 1)

    def test_only_buyer_may_complain(self) -> None:
        stranger = make_user("stranger@example.com")

        with self.assertRaises(ComplaintDenied) as ctx:
            self.arbiter.file_complaint(self.order, stranger, "no_show", now=moment(2024, 6, 10, 15))
        self.assertFalse(ctx.exception.extra["check_user"])

    def test_redeemed_ticket_cannot_be_complained_about(self) -> None:
        staff = make_user("staff@example.com", role=User.RoleChoices.EMPLOYEE, employer=self.owner)
        redeemed = make_order(
            self.buyer,
            self.point,
            employee=staff,
            date_confirm=moment(2024, 6, 10, 9, 55),
            status=OrderStatus.COMPLETED,
        )

        result = self.arbiter.can_complain(redeemed, self.buyer, now=moment(2024, 6, 10, 15))

        self.assertFalse(result["status"])
        self.assertFalse(result["check_ticket"])

    def test_complaint_deadline(self) -> None:
        self.assertTrue(self.arbiter.can_complain(self.order, self.buyer, now=moment(2024, 6, 12, 10))["status"])
        self.assertFalse(
            self.arbiter.can_complain(self.order, self.buyer, now=moment(2024, 6, 12, 10, 1))["check_date"]
        )

    def test_canceled_order_cannot_be_complained_about(self) -> None:
        self.order.status = OrderStatus.CANCELED
        self.order.save(update_fields=["status"])

        result = self.arbiter.can_complain(self.order, self.buyer, now=moment(2024, 6, 10, 15))

        self.assertFalse(result["status"])
        self.assertFalse(result["check_status"])

    def test_type_is_required(self) -> None:
        with self.assertRaises(ValidationError):
            self.arbiter.file_complaint(self.order, self.buyer, "", now=moment(2024, 6, 10, 15))


class ComplaintServiceTests(TestCase):

    def setUp(self) -> None:
        self.service = OrderService(config=StaticConfig(group=1, percentage_penalty=20, expired_days=1))
        self.buyer = make_user("buyer@example.com")
        owner = make_user("partner@example.com", role=User.RoleChoices.PARTNER)
        self.order = make_order(
            self.buyer,
            make_point(make_excursion(owner), session_date=date(2024, 6, 10)),
            bill_status=BillAction.Status.HOLDING,
        )

    def test_suspension_is_audited_after_commit(self) -> None:
        with self.assertLogs("apps.orders.audit", level="INFO") as logs:
            with self.captureOnCommitCallbacks(execute=True):
                self.service.file_complaint(self.order.pk, self.buyer, "no_show", now=moment(2024, 6, 10, 15))

        self.assertIn("OrderSuspended", logs.output[0])

    def test_suspended_order_keeps_held_funds(self) -> None:
        self.service.file_complaint(self.order.pk, self.buyer, "no_show", now=moment(2024, 6, 10, 15))

        self.assertEqual(BillAction.objects.get(order=self.order).status, BillAction.Status.HOLDING)
        self.assertTrue(self.service.can_refund(self.order.pk, now=moment(2024, 6, 10, 15))["status"])
