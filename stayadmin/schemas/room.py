from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class RoomBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=100)
    description: Optional[str] = None
    base_price: Decimal = Field(..., gt=0, description="Nightly price without override")
    max_guests: int = Field(default=2, ge=1)
    active: bool = True


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    base_price: Optional[Decimal] = Field(None, gt=0)
    max_guests: Optional[int] = Field(None, ge=1)
    active: Optional[bool] = None


class RoomResponse(RoomBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
