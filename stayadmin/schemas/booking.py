from datetime import date, datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, model_validator

from ..models.booking import BookingStatus, BookingType


class BookingCreate(BaseModel):
    room_id: Optional[int] = None
    check_in: date
    check_out: date
    guest_name: str = Field(..., min_length=1, max_length=200)
    guest_email: Optional[str] = Field(None, max_length=255)
    guest_phone: Optional[str] = Field(None, max_length=30)
    adults_count: int = Field(default=1, ge=1)
    children_count: int = Field(default=0, ge=0)
    total_amount: Decimal = Field(default=Decimal("0"), ge=0)
    booking_type: BookingType = BookingType.SINGLE
    payment_intent_id: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None

    @model_validator(mode="after")
    def validate_dates(self):
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        return self


class BookingResponse(BaseModel):
    id: int
    room_id: Optional[int] = None
    room_name: Optional[str] = None
    check_in: date
    check_out: date
    nights: int
    guest_name: str
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    adults_count: int
    children_count: int
    total_amount: Decimal
    status: BookingStatus
    booking_type: BookingType
    payment_intent_id: Optional[str] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
