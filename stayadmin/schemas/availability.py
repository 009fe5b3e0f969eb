"""
Availability Schemas

Pydantic models for the availability read/bulk-write API.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, model_validator


class AvailabilityResponse(BaseModel):
    """One stored room-day"""
    id: int
    room_id: int
    date: date
    available: bool
    price_override: Optional[Decimal] = None
    blocked_reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BulkUpdateItem(BaseModel):
    """
    One day of a bulk edit, keyed by (room_id, date).

    Closed days never carry a price override; open days never carry a
    blocked reason.
    """
    room_id: int
    date: date
    available: bool = True
    price_override: Optional[Decimal] = Field(None, ge=0, description="NULL means use the room base price")
    blocked_reason: Optional[str] = Field(None, max_length=100)

    @model_validator(mode="after")
    def normalize_block_state(self):
        if not self.available:
            self.price_override = None
            self.blocked_reason = self.blocked_reason or "manual_block"
        else:
            self.blocked_reason = None
        return self


class BulkUpdateRequest(BaseModel):
    items: List[BulkUpdateItem] = Field(..., max_length=10000)


class AvailabilityUpdate(BaseModel):
    """Partial update of a single stored row"""
    available: Optional[bool] = None
    price_override: Optional[Decimal] = Field(None, ge=0)
    notes: Optional[str] = None


class ResetRequest(BaseModel):
    """Reopen dates and drop their overrides"""
    room_id: int
    dates: List[date] = Field(..., min_length=1)
