from fastapi import APIRouter, Depends, HTTPException, status, Request
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from datetime import datetime
import logging

from ..database import get_db
from ..models.operator import Operator
from ..schemas.auth import Token, OperatorResponse
from ..utils.security import verify_password, create_access_token
from ..utils.rate_limiter import limiter, get_rate_limit
from ..utils.dependencies import get_current_operator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=Token)
@limiter.limit(get_rate_limit("login"))
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    """Exchange operator credentials for a bearer token"""
    # Trim whitespace that mobile keyboards may add
    username = form_data.username.strip()
    password = form_data.password.strip() if form_data.password else ""

    operator = db.query(Operator).filter(Operator.username == username).first()
    if not operator or not verify_password(password, operator.hashed_password):
        logger.warning(f"Failed login for {username!r}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not operator.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled"
        )

    operator.last_login = datetime.utcnow()
    db.commit()

    logger.info(f"Operator {operator.username} logged in")
    return Token(access_token=create_access_token({"sub": operator.username}))


@router.get("/me", response_model=OperatorResponse)
async def me(current_operator: Operator = Depends(get_current_operator)):
    return current_operator
