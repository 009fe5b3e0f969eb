"""
Availability Router

Month-window reads and the keyed bulk upsert the calendar editor submits.
"""

from fastapi import APIRouter, Depends, HTTPException, status, Query, Request
from sqlalchemy.orm import Session
from typing import List
from datetime import date
import logging

from ..database import get_db
from ..models.operator import Operator
from ..schemas.availability import (
    AvailabilityResponse, BulkUpdateRequest, AvailabilityUpdate, ResetRequest
)
from ..services.availability_service import AvailabilityService
from ..utils.dependencies import get_current_operator
from ..utils.rate_limiter import limiter, get_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/availability", tags=["Availability"])


@router.get("", response_model=List[AvailabilityResponse])
@router.get("/", response_model=List[AvailabilityResponse])
async def get_month(
    month: str = Query(..., description="Calendar month as yyyy-MM"),
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    """All records dated within the month, ordered by date"""
    try:
        return AvailabilityService(db).get_month(month)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.get("/range", response_model=List[AvailabilityResponse])
async def get_range(
    start: date = Query(...),
    end: date = Query(...),
    db: Session = Depends(get_db)
):
    """Public range read used by the booking page"""
    if end < start:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="end must not be before start")
    return AvailabilityService(db).get_range(start, end)


@router.post("/bulk", response_model=List[AvailabilityResponse])
@limiter.limit(get_rate_limit("availability_bulk"))
async def bulk_update(
    request: Request,
    payload: BulkUpdateRequest,
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    """
    Upsert one row per (room_id, date).
    Existing rows for a key are overwritten; every affected row is returned.
    """
    records = AvailabilityService(db).bulk_upsert(payload.items)
    logger.info(f"Bulk availability update by {current_operator.username}: {len(records)} rows")
    return records


@router.patch("/{record_id}", response_model=AvailabilityResponse)
async def update_record(
    record_id: int,
    updates: AvailabilityUpdate,
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    service = AvailabilityService(db)
    record = service.get(record_id)
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Availability record not found")
    return service.update_one(record, updates)


@router.post("/reset")
async def reset_dates(
    payload: ResetRequest,
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    """Reopen dates and fall back to the room base price"""
    count = AvailabilityService(db).reset(payload.room_id, payload.dates)
    return {"reset": count}
