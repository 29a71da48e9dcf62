"""Ticket redemption."""

from __future__ import annotations

from datetime import date

from django.test import TestCase

from apps.finances.gateways.fake import RecordingGateway
from apps.finances.models import BillAction
from apps.orders.domain.status import OrderStatus
from apps.orders.exceptions import AccessDenied, ExternalPaymentFailure, InvalidTransition, NotFound
from apps.orders.models import QrCode
from apps.orders.services import ConfirmationFlow, PaymentCoordinator
from apps.users.models import User

from .factories import StaticConfig, make_excursion, make_order, make_point, make_user, moment

REDEEMED_AT = moment(2024, 6, 10, 9, 50)


class ConfirmationFlowTests(TestCase):

    def setUp(self) -> None:
        self.flow = ConfirmationFlow(
            payments=PaymentCoordinator(gateway=RecordingGateway(), config=StaticConfig(group=1))
        )
        self.buyer = make_user("buyer@example.com")
        self.owner = make_user("partner@example.com", role=User.RoleChoices.PARTNER)
        self.staff = make_user("staff@example.com", role=User.RoleChoices.EMPLOYEE, employer=self.owner)
        point = make_point(make_excursion(self.owner), session_date=date(2024, 6, 10))
        self.order = make_order(self.buyer, point, bill_status=BillAction.Status.HOLDING)
        self.qr_code = QrCode.issue(self.order)

    def test_employee_redeems_ticket(self) -> None:
        order = self.flow.confirm(self.order, self.staff, at=REDEEMED_AT)

        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.COMPLETED)
        self.assertEqual(order.date_confirm, REDEEMED_AT)
        self.assertEqual(order.employee, self.staff)
        self.assertEqual(RecordingGateway.operations(), ["capture"])
        self.assertEqual(BillAction.objects.get(order=order).status, BillAction.Status.FINISHED)

    def test_owner_redeems_by_code(self) -> None:
        order = self.flow.confirm_by_code(self.qr_code.code, self.owner, at=REDEEMED_AT)

        self.assertEqual(order.pk, self.order.pk)
        self.assertTrue(order.is_confirmed())

    def test_unknown_code(self) -> None:
        with self.assertRaises(NotFound):
            self.flow.confirm_by_code("missing", self.staff)

    def test_other_partners_staff_is_refused(self) -> None:
        other_partner = make_user("other@example.com", role=User.RoleChoices.PARTNER)
        other_staff = make_user("other-staff@example.com", role=User.RoleChoices.EMPLOYEE, employer=other_partner)

        with self.assertRaises(AccessDenied):
            self.flow.confirm(self.order, other_staff, at=REDEEMED_AT)

        self.order.refresh_from_db()
        self.assertIsNone(self.order.date_confirm)
        self.assertEqual(RecordingGateway.operations(), [])

    def test_ticket_is_redeemed_once(self) -> None:
        self.flow.confirm(self.order, self.staff, at=REDEEMED_AT)

        with self.assertRaises(InvalidTransition):
            self.flow.confirm(self.order, self.owner, at=REDEEMED_AT)
        self.assertEqual(RecordingGateway.operations(), ["capture"])

    def test_suspended_order_can_still_be_redeemed(self) -> None:
        self.order.status = OrderStatus.SUSPENDED
        self.order.save(update_fields=["status"])

        order = self.flow.confirm(self.order, self.staff, at=REDEEMED_AT)

        order.refresh_from_db()
        self.assertEqual(order.status, OrderStatus.COMPLETED)
        self.assertEqual(order.employee, self.staff)
        self.assertEqual(RecordingGateway.operations(), ["capture"])

    def test_canceled_order_is_not_redeemed(self) -> None:
        self.order.status = OrderStatus.CANCELED
        self.order.save(update_fields=["status"])

        with self.assertRaises(InvalidTransition):
            self.flow.confirm(self.order, self.staff, at=REDEEMED_AT)
        self.assertEqual(RecordingGateway.operations(), [])

    def test_capture_failure_rolls_redemption_back(self) -> None:
        RecordingGateway.fail_on = {"capture"}

        with self.assertRaises(ExternalPaymentFailure):
            self.flow.confirm(self.order, self.staff, at=REDEEMED_AT)

        self.assertIsNone(self.order.date_confirm)
        self.assertIsNone(self.order.employee_id)
        self.assertEqual(self.order.status, OrderStatus.PENDING)
        self.order.refresh_from_db()
        self.assertIsNone(self.order.date_confirm)
        self.assertEqual(BillAction.objects.get(order=self.order).status, BillAction.Status.HOLDING)
