from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, Numeric, Text, ForeignKey, DateTime, Index
from sqlalchemy.orm import relationship
from ..database import Base
import enum


class BookingStatus(str, enum.Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class BookingType(str, enum.Enum):
    SINGLE = "single"
    DOUBLE = "double"  # Both rooms, must be blocked on every channel


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="SET NULL"), nullable=True)
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    guest_name = Column(String(200), nullable=False)
    guest_email = Column(String(255), nullable=True)
    guest_phone = Column(String(30), nullable=True)
    adults_count = Column(Integer, default=1)
    children_count = Column(Integer, default=0)
    total_amount = Column(Numeric(10, 2), default=0)
    status = Column(String(20), default=BookingStatus.PENDING.value)
    booking_type = Column(String(20), default=BookingType.SINGLE.value)
    notes = Column(Text, nullable=True)

    # Payment processor reference
    payment_intent_id = Column(String(255), nullable=True)
    payment_method = Column(String(50), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    room = relationship("Room", back_populates="bookings")

    __table_args__ = (
        Index("ix_booking_payment_intent", "payment_intent_id"),
        Index("ix_booking_check_in", "check_in"),
    )

    @property
    def nights(self) -> int:
        return (self.check_out - self.check_in).days

    @property
    def room_name(self):
        return self.room.name if self.room else None

    def __repr__(self):
        return f"<Booking {self.guest_name} - {self.check_in}>"
