from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.operator import Operator
from .security import verify_access_token
from .logging_config import user_id_var

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_current_operator(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db)
) -> Operator:
    """Resolve the bearer token to an active operator or fail with 401"""
    credentials_error = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_error

    payload = verify_access_token(token)
    if not payload or not payload.get("sub"):
        raise credentials_error

    operator = db.query(Operator).filter(Operator.username == payload["sub"]).first()
    if not operator or not operator.is_active:
        raise credentials_error

    user_id_var.set(str(operator.id))
    return operator
