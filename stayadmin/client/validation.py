"""
Input validation for calendar edits.

Price and date-range rules live in pydantic models so the same messages
surface whether input arrives from a text field or a drag gesture.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..config import settings
from ..utils.dates import selection_horizon
from .errors import ValidationError


class PriceInput(BaseModel):
    price: Decimal = Field(..., gt=0, le=settings.max_nightly_price)


class DateRangeInput(BaseModel):
    start: date
    end: date
    horizon: date

    @field_validator("end")
    @classmethod
    def end_not_before_start(cls, v: date, info: ValidationInfo) -> date:
        start = info.data.get("start")
        if start and v < start:
            raise ValueError("End date must not be before start date")
        return v

    @field_validator("horizon")
    @classmethod
    def within_horizon(cls, v: date, info: ValidationInfo) -> date:
        for key in ("start", "end"):
            day = info.data.get(key)
            if day and day > v:
                raise ValueError(f"{key.capitalize()} date is beyond the booking horizon ({v.isoformat()})")
        return v


def _first_error(exc: PydanticValidationError) -> tuple:
    error = exc.errors()[0]
    field = error["loc"][0] if error.get("loc") else None
    message = error["msg"]
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return message, field


def validate_price(value) -> Decimal:
    """Parse and range-check a nightly price. Raises ValidationError."""
    try:
        return PriceInput(price=value).price
    except PydanticValidationError as e:
        error = e.errors()[0]
        if error["type"] in ("greater_than", "less_than_equal"):
            message = f"Price must be greater than 0 and at most {settings.max_nightly_price}"
        else:
            message = "Price must be a number"
        raise ValidationError(message, field="price")


def validate_date_range(start, end, today: Optional[date] = None) -> tuple:
    """Validate a manually entered range. Returns (start, end) as dates."""
    horizon = selection_horizon(today, months=settings.selection_horizon_months)
    try:
        model = DateRangeInput(start=start, end=end, horizon=horizon)
    except PydanticValidationError as e:
        message, field = _first_error(e)
        if field == "horizon":
            field = "end"
        raise ValidationError(message, field=field)
    return model.start, model.end
