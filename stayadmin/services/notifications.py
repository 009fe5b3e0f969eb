"""
Notification dispatch

Hands a confirmed booking to the notification function, which fans it out
to chat and email. Delivery and retries belong to that function.
"""

import logging
from typing import Optional

import httpx

from ..config import settings
from ..models.booking import Booking

logger = logging.getLogger(__name__)


def booking_payload(booking: Booking) -> dict:
    return {
        "id": booking.id,
        "guest_name": booking.guest_name,
        "guest_email": booking.guest_email,
        "guest_phone": booking.guest_phone,
        "check_in": booking.check_in.isoformat(),
        "check_out": booking.check_out.isoformat(),
        "room_name": booking.room_name,
        "booking_type": booking.booking_type,
        "adults": booking.adults_count,
        "children": booking.children_count,
        "total_amount": float(booking.total_amount or 0),
    }


class NotificationDispatcher:

    def __init__(self, function_url: Optional[str] = None, timeout: Optional[float] = None):
        self.function_url = function_url if function_url is not None else settings.notification_function_url
        self.timeout = timeout or settings.notification_timeout_seconds

    def dispatch_booking_confirmed(self, booking: Booking) -> bool:
        """
        Post the booking to the notification function.
        Returns True when the function accepted it.
        """
        if not self.function_url:
            logger.info(f"Notification function not configured, skipping booking {booking.id}")
            return False

        with httpx.Client(timeout=self.timeout) as client:
            response = client.post(self.function_url, json={"booking": booking_payload(booking)})

        if response.status_code >= 400:
            logger.error(f"Notification dispatch for booking {booking.id} failed: {response.status_code} {response.text[:200]}")
            return False

        logger.info(f"Notification dispatched for booking {booking.id}")
        return True


def get_notification_dispatcher() -> NotificationDispatcher:
    """FastAPI dependency, overridable in tests"""
    return NotificationDispatcher()
