from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session
from typing import Optional

from ..database import get_db
from ..models.operator import Operator
from ..schemas.emergency import EmergencyStatus, EmergencyActivation, EmergencyDeactivateRequest
from ..services.emergency_service import EmergencyService
from ..utils.dependencies import get_current_operator
from ..utils.rate_limiter import limiter, get_rate_limit

router = APIRouter(prefix="/api/emergency", tags=["Emergency"])


@router.get("", response_model=EmergencyStatus)
@router.get("/", response_model=EmergencyStatus)
async def get_status(db: Session = Depends(get_db)):
    """Public: the booking page hides checkout while active"""
    service = EmergencyService(db)
    result = service.status()
    db.commit()
    return result


@router.post("/activate", response_model=EmergencyActivation)
@limiter.limit(get_rate_limit("emergency"))
async def activate(
    request: Request,
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    """Close the current month and return the snapshot needed to undo it"""
    return EmergencyService(db).activate(current_operator)


@router.post("/deactivate", response_model=EmergencyStatus)
@limiter.limit(get_rate_limit("emergency"))
async def deactivate(
    request: Request,
    payload: Optional[EmergencyDeactivateRequest] = None,
    db: Session = Depends(get_db),
    current_operator: Operator = Depends(get_current_operator)
):
    snapshot = payload.snapshot if payload else None
    return EmergencyService(db).deactivate(current_operator, snapshot)
