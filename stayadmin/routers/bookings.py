from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ..database import get_db
from ..models.booking import BookingStatus
from ..models.operator import Operator
from ..models.room import Room
from ..schemas.booking import BookingCreate, BookingResponse
from ..services.booking_service import BookingService, BookingTransitionError
from ..services.notifications import NotificationDispatcher, get_notification_dispatcher
from ..utils.dependencies import get_current_operator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


def _get_or_404(service: BookingService, booking_id: int):
    booking = service.get(booking_id)
    if not booking:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Booking not found")
    return booking


@router.get("", response_model=List[BookingResponse])
@router.get("/", response_model=List[BookingResponse])
async def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    """Bookings, newest check-in first"""
    return BookingService(db).list(status_filter.value if status_filter else None)


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    return _get_or_404(BookingService(db), booking_id)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(booking_data: BookingCreate, db: Session = Depends(get_db)):
    """Guest checkout creates a pending booking; payment confirms it"""
    if booking_data.room_id is not None:
        if not db.query(Room).filter(Room.id == booking_data.room_id).first():
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return BookingService(db).create(booking_data)


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notification_dispatcher),
    current_operator: Operator = Depends(get_current_operator)
):
    service = BookingService(db, notifier=notifier)
    booking = _get_or_404(service, booking_id)
    try:
        return service.confirm(booking)
    except BookingTransitionError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    service = BookingService(db)
    booking = _get_or_404(service, booking_id)
    return service.cancel(booking, reason=f"Cancelled by {current_operator.username}")
