from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
import logging

from ..database import get_db
from ..models.room import Room
from ..models.operator import Operator
from ..schemas.room import RoomCreate, RoomUpdate, RoomResponse
from ..utils.dependencies import get_current_operator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/rooms", tags=["Rooms"])


@router.get("", response_model=List[RoomResponse])
@router.get("/", response_model=List[RoomResponse])
async def list_rooms(
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    """All rooms ordered by id"""
    return db.query(Room).order_by(Room.id).all()


@router.get("/public", response_model=List[RoomResponse])
async def list_public_rooms(db: Session = Depends(get_db)):
    """Active rooms for the booking page"""
    return db.query(Room).filter(Room.active == True).order_by(Room.id).all()


@router.get("/{room_id}", response_model=RoomResponse)
async def get_room(room_id: int, db: Session = Depends(get_db)):
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return room


@router.post("", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
async def create_room(
    room_data: RoomCreate,
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    if room_data.slug and db.query(Room).filter(Room.slug == room_data.slug).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Slug already in use")

    room = Room(**room_data.model_dump())
    db.add(room)
    db.commit()
    db.refresh(room)
    logger.info(f"Room {room.id} created by {current_operator.username}")
    return room


@router.patch("/{room_id}", response_model=RoomResponse)
async def update_room(
    room_id: int,
    room_data: RoomUpdate,
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")

    for key, value in room_data.model_dump(exclude_unset=True).items():
        setattr(room, key, value)

    db.commit()
    db.refresh(room)
    logger.info(f"Room {room.id} updated by {current_operator.username}")
    return room
