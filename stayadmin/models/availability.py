"""
Availability Model

Daily availability/price state per room.
A missing row means "open, base price".
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime, Boolean, Numeric, Text, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from ..database import Base


MANUAL_BLOCK = "manual_block"
EMERGENCY_BLOCK = "emergency"


class AvailabilityRecord(Base):
    """
    Availability and price override for one room on one day.

    (room_id, date) is the natural key: every write is an upsert on it.
    """
    __tablename__ = "availability"

    id = Column(Integer, primary_key=True, autoincrement=True)

    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)

    available = Column(Boolean, nullable=False, default=True)
    price_override = Column(Numeric(10, 2), nullable=True)  # NULL = use room base price
    blocked_reason = Column(String(100), nullable=True)  # manual_block, emergency
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    room = relationship("Room", back_populates="availability")

    __table_args__ = (
        UniqueConstraint('room_id', 'date', name='uq_availability_room_date'),
        Index('ix_availability_date', 'date'),
    )

    def __repr__(self):
        status = "open" if self.available else f"closed:{self.blocked_reason}"
        return f"<AvailabilityRecord room={self.room_id} {self.date} {status}>"
