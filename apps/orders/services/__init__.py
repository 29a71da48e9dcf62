"""Order application services."""

from .admission import Admission, BookingAdmissionController
from .complaints import ComplaintArbiter
from .confirmation import ConfirmationFlow
from .orders import OrderService
from .payments import PaymentCoordinator

__all__ = [
    "Admission",
    "BookingAdmissionController",
    "ComplaintArbiter",
    "ConfirmationFlow",
    "OrderService",
    "PaymentCoordinator",
]
