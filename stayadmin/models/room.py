from datetime import datetime
from sqlalchemy import Column, Integer, String, Numeric, Text, Boolean, DateTime
from sqlalchemy.orm import relationship
from ..database import Base


class Room(Base):
    """
    Bookable room.

    base_price is the nightly fallback for any day without a price override.
    Pricing edits go through AvailabilityRecord.price_override, not here.
    """
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(100), nullable=True, unique=True)
    description = Column(Text, nullable=True)
    base_price = Column(Numeric(10, 2), nullable=False)
    max_guests = Column(Integer, default=2)
    active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    availability = relationship("AvailabilityRecord", back_populates="room", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="room")

    def __repr__(self):
        return f"<Room {self.id} {self.name} base={self.base_price}>"
