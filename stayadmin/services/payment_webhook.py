"""
Payment Webhook

Verifies and dispatches payment processor events.

The signature header has the form ``t=<unix ts>,v1=<hex digest>`` where the
digest is HMAC-SHA256 over ``"<ts>.<raw body>"`` keyed by the webhook secret.
"""

import hashlib
import hmac
import json
import logging
import secrets
import time
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from ..config import settings
from .booking_service import BookingService
from .notifications import NotificationDispatcher

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Stripe-Signature"

PAYMENT_SUCCEEDED = "payment_intent.succeeded"
PAYMENT_FAILED = "payment_intent.payment_failed"


class WebhookSignatureError(Exception):
    pass


def parse_signature_header(header: str) -> Tuple[Optional[int], list]:
    """Split a signature header into its timestamp and v1 digests"""
    timestamp = None
    signatures = []
    for part in (header or "").split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                timestamp = None
        elif key == "v1" and value:
            signatures.append(value)
    return timestamp, signatures


def compute_signature(secret: str, timestamp: int, body: bytes) -> str:
    signed = f"{timestamp}.".encode() + body
    return hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()


def verify_signature(
    body: bytes,
    header: Optional[str],
    secret: str,
    tolerance: int,
    now: Optional[float] = None
) -> None:
    """Raise WebhookSignatureError unless the header signs this body recently."""
    if not header:
        raise WebhookSignatureError("Missing signature header")

    timestamp, signatures = parse_signature_header(header)
    if timestamp is None or not signatures:
        raise WebhookSignatureError("Malformed signature header")

    current = now if now is not None else time.time()
    if abs(current - timestamp) > tolerance:
        raise WebhookSignatureError("Signature timestamp outside tolerance")

    expected = compute_signature(secret, timestamp, body)
    if not any(secrets.compare_digest(expected, sig) for sig in signatures):
        raise WebhookSignatureError("Signature mismatch")


class PaymentWebhookHandler:
    """
    Flow:
    1. Verify the signature header (skipped when no secret is configured)
    2. Parse the event
    3. Confirm or cancel the booking tied to the payment intent
    """

    def __init__(
        self,
        db: Session,
        secret: Optional[str] = None,
        tolerance: Optional[int] = None,
        notifier: Optional[NotificationDispatcher] = None
    ):
        self.db = db
        self.secret = secret if secret is not None else settings.payment_webhook_secret
        self.tolerance = tolerance or settings.payment_webhook_tolerance
        self.bookings = BookingService(db, notifier=notifier)

    def handle(self, body: bytes, signature: Optional[str]) -> dict:
        if self.secret:
            verify_signature(body, signature, self.secret, self.tolerance)
        else:
            logger.warning("Payment webhook secret not configured, skipping signature check")

        try:
            event = json.loads(body)
        except ValueError as e:
            raise WebhookSignatureError(f"Invalid JSON payload: {e}")
        if not isinstance(event, dict):
            raise WebhookSignatureError("Payload must be a JSON object")

        event_type = event.get("type")
        data = event.get("data")
        intent = data.get("object") if isinstance(data, dict) else None
        if not isinstance(intent, dict):
            intent = {}
        intent_id = intent.get("id")

        if event_type == PAYMENT_SUCCEEDED and intent_id:
            method_types = intent.get("payment_method_types") or ["card"]
            booking = self.bookings.confirm_by_payment_intent(intent_id, payment_method=method_types[0])
            logger.info(f"Payment succeeded for intent {intent_id}")
            return {"received": True, "booking_id": booking.id if booking else None}

        if event_type == PAYMENT_FAILED and intent_id:
            error = intent.get("last_payment_error") or {}
            booking = self.bookings.fail_payment(intent_id, message=error.get("message"))
            logger.info(f"Payment failed for intent {intent_id}")
            return {"received": True, "booking_id": booking.id if booking else None}

        logger.info(f"Unhandled payment event type: {event_type}")
        return {"received": True, "booking_id": None}
