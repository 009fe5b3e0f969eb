"""
Booking Service

Booking list, creation and status transitions.
Confirmation hands the booking to the notification dispatcher; a failed
dispatch is logged and never undoes the confirmation.
"""

import logging
from typing import List, Optional

import httpx
from sqlalchemy.orm import Session, joinedload

from ..models.booking import Booking, BookingStatus
from ..schemas.booking import BookingCreate
from ..utils.logging_config import get_logger
from .notifications import NotificationDispatcher

logger = logging.getLogger(__name__)
structured_logger = get_logger(__name__)


class BookingTransitionError(Exception):
    """Raised when a status change is not allowed from the current status"""
    pass


class BookingService:

    def __init__(self, db: Session, notifier: Optional[NotificationDispatcher] = None):
        self.db = db
        self.notifier = notifier or NotificationDispatcher()

    def list(self, status: Optional[str] = None) -> List[Booking]:
        """Bookings newest check-in first, optionally filtered by status"""
        query = self.db.query(Booking).options(joinedload(Booking.room))
        if status:
            query = query.filter(Booking.status == status)
        return query.order_by(Booking.check_in.desc(), Booking.id.desc()).all()

    def get(self, booking_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def get_by_payment_intent(self, payment_intent_id: str) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.payment_intent_id == payment_intent_id).first()

    def create(self, data: BookingCreate) -> Booking:
        values = data.model_dump()
        values["booking_type"] = data.booking_type.value
        booking = Booking(**values)
        booking.status = BookingStatus.PENDING.value
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)
        logger.info(f"Created booking {booking.id} for {booking.guest_name} ({booking.check_in} -> {booking.check_out})")
        return booking

    def _transition(self, booking: Booking, new_status: BookingStatus, notes: Optional[str] = None) -> Booking:
        old_status = booking.status
        if old_status == BookingStatus.CANCELLED.value and new_status != BookingStatus.CANCELLED:
            raise BookingTransitionError(f"Booking {booking.id} is cancelled")

        booking.status = new_status.value
        if notes:
            booking.notes = f"{booking.notes}\n{notes}" if booking.notes else notes
        self.db.commit()
        self.db.refresh(booking)

        if old_status != new_status.value:
            structured_logger.booking_status_changed(booking.id, old_status, new_status.value)
        return booking

    def _notify(self, booking: Booking) -> None:
        try:
            self.notifier.dispatch_booking_confirmed(booking)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to send notifications for booking {booking.id}: {e}")

    def confirm(self, booking: Booking, payment_method: Optional[str] = None) -> Booking:
        """
        Mark a booking confirmed and notify the guest.
        Confirming an already confirmed booking is a no-op and sends nothing.
        """
        if booking.status == BookingStatus.CONFIRMED.value:
            return booking
        if booking.status == BookingStatus.CANCELLED.value:
            raise BookingTransitionError(f"Booking {booking.id} is cancelled")

        if payment_method:
            booking.payment_method = payment_method
        booking = self._transition(booking, BookingStatus.CONFIRMED)
        self._notify(booking)
        return booking

    def cancel(self, booking: Booking, reason: Optional[str] = None) -> Booking:
        return self._transition(booking, BookingStatus.CANCELLED, notes=reason)

    def confirm_by_payment_intent(self, payment_intent_id: str, payment_method: str = "card") -> Optional[Booking]:
        booking = self.get_by_payment_intent(payment_intent_id)
        if not booking:
            logger.warning(f"No booking for payment intent {payment_intent_id}")
            return None
        return self.confirm(booking, payment_method=payment_method)

    def fail_payment(self, payment_intent_id: str, message: Optional[str] = None) -> Optional[Booking]:
        booking = self.get_by_payment_intent(payment_intent_id)
        if not booking:
            logger.warning(f"No booking for payment intent {payment_intent_id}")
            return None
        if booking.status == BookingStatus.CONFIRMED.value:
            logger.warning(f"Ignoring payment failure for confirmed booking {booking.id}")
            return booking
        return self.cancel(booking, reason=f"Payment failed: {message or 'unknown error'}")
