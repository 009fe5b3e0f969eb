from .availability_service import AvailabilityService
from .booking_service import BookingService, BookingTransitionError
from .emergency_service import EmergencyService
from .notifications import NotificationDispatcher
from .payment_webhook import PaymentWebhookHandler, WebhookSignatureError

__all__ = [
    "AvailabilityService",
    "BookingService",
    "BookingTransitionError",
    "EmergencyService",
    "NotificationDispatcher",
    "PaymentWebhookHandler",
    "WebhookSignatureError",
]
