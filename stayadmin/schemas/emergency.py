from datetime import datetime
from typing import Optional, List, Any, Dict
from pydantic import BaseModel


class EmergencyStatus(BaseModel):
    active: bool
    activated_at: Optional[datetime] = None
    activated_by: Optional[str] = None


class EmergencyActivation(EmergencyStatus):
    # Opaque to callers: replay it verbatim on deactivate
    snapshot: List[Dict[str, Any]] = []


class EmergencyDeactivateRequest(BaseModel):
    snapshot: Optional[List[Dict[str, Any]]] = None
