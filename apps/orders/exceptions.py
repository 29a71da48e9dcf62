"""Errors raised by the order engine.

All of them are user-facing and carry a stable ``code``; the API layer
renders them through ``shared.infrastructure.api_errors``.
"""

from __future__ import annotations

from shared.domain.errors import DomainError, NotFound

__all__ = [
    "AccessDenied",
    "AmountMismatch",
    "BookingTooEarly",
    "BookingWindowClosed",
    "ComplaintDenied",
    "DomainError",
    "DuplicateBooking",
    "ExternalPaymentFailure",
    "InvalidTransition",
    "NotFound",
    "RefundDenied",
    "ValidationError",
]


class ValidationError(DomainError):
    code = "validation_error"
    default_message = "Некорректные данные заказа."
    http_status = 400


class AmountMismatch(DomainError):
    code = "amount_mismatch"
    default_message = "Ошибка в калькуляции суммы заказа."
    http_status = 400


class BookingWindowClosed(DomainError):
    code = "booking_window_closed"
    default_message = "Бронирование на этот сеанс уже закрыто."
    http_status = 403


class BookingTooEarly(DomainError):
    code = "booking_too_early"
    default_message = "Бронирование на этот сеанс ещё не открыто."
    http_status = 403


class DuplicateBooking(DomainError):
    code = "duplicate_booking"
    default_message = "Такой заказ уже был оформлен."
    http_status = 409


class RefundDenied(DomainError):
    code = "refund_denied"
    default_message = "Возврат по заказу невозможен."
    http_status = 403


class ComplaintDenied(DomainError):
    code = "complaint_denied"
    default_message = "Жалоба на заказ невозможна."
    http_status = 403


class AccessDenied(DomainError):
    code = "access_denied"
    default_message = "Недостаточно прав для операции с заказом."
    http_status = 403


class InvalidTransition(DomainError):
    code = "invalid_transition"
    default_message = "Недопустимая смена статуса заказа."
    http_status = 409


class ExternalPaymentFailure(DomainError):
    """Gateway call failed; nothing was committed locally.

    The message is generic on purpose: gateway details go to the log only.
    """

    code = "payment_failure"
    default_message = "Платёжный сервис не подтвердил операцию, повторите попытку позже."
    http_status = 502

    def __init__(self, message: str | None = None, *, ambiguous: bool = False, **kwargs):
        super().__init__(message, **kwargs)
        self.ambiguous = ambiguous
