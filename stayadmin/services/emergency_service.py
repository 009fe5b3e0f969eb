"""
Emergency Service

Global "stop all bookings" switch.

activate() and deactivate() are the two halves of one compensating
transaction: activate snapshots the current month's availability, closes
every stored day and persists the snapshot; deactivate replays the snapshot
through the same keyed upsert and clears the flag.
"""

import logging
from datetime import date, datetime
from typing import List, Dict, Any, Optional

from sqlalchemy.orm import Session

from ..models.availability import EMERGENCY_BLOCK
from ..models.operator import Operator
from ..models.setting import AppSetting, EMERGENCY_KEY
from ..schemas.availability import AvailabilityResponse, BulkUpdateItem
from ..utils.dates import month_token
from ..utils.logging_config import get_logger
from .availability_service import AvailabilityService

logger = logging.getLogger(__name__)
structured_logger = get_logger(__name__)


class EmergencyService:

    def __init__(self, db: Session, today: Optional[date] = None):
        self.db = db
        self.today = today or date.today()
        self.availability = AvailabilityService(db)

    def _get_setting(self) -> AppSetting:
        setting = self.db.query(AppSetting).filter(AppSetting.key == EMERGENCY_KEY).first()
        if not setting:
            setting = AppSetting(key=EMERGENCY_KEY, value={"active": False}, public=True)
            self.db.add(setting)
            self.db.flush()
        return setting

    def status(self) -> Dict[str, Any]:
        value = self._get_setting().value or {}
        return {
            "active": bool(value.get("active")),
            "activated_at": value.get("activated_at"),
            "activated_by": value.get("activated_by"),
        }

    def activate(self, operator: Operator) -> Dict[str, Any]:
        """
        Close every stored day of the current month and raise the flag.

        Idempotent: while already active the stored snapshot is returned
        untouched, so a second call never snapshots the closed state.
        """
        setting = self._get_setting()
        value = setting.value or {}
        if value.get("active"):
            logger.info(f"Emergency already active, returning stored snapshot ({operator.username})")
            return {**self.status(), "snapshot": value.get("snapshot", [])}

        records = self.availability.get_month(month_token(self.today))
        snapshot: List[Dict[str, Any]] = [
            AvailabilityResponse.model_validate(r).model_dump(mode="json") for r in records
        ]

        closures = [
            BulkUpdateItem(
                room_id=r.room_id,
                date=r.date,
                available=False,
                price_override=None,
                blocked_reason=EMERGENCY_BLOCK,
            )
            for r in records
        ]
        self.availability.bulk_upsert(closures)

        # JSON columns only notice reassignment
        setting.value = {
            "active": True,
            "activated_at": datetime.utcnow().isoformat(),
            "activated_by": operator.username,
            "snapshot": snapshot,
        }
        self.db.commit()

        structured_logger.emergency_toggled(True, operator.username, len(snapshot))
        return {**self.status(), "snapshot": snapshot}

    def deactivate(self, operator: Operator, snapshot: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        """
        Replay the snapshot verbatim and clear the flag.

        The caller's snapshot wins; otherwise the one stored on activation
        is used. Idempotent when the flag is already clear.
        """
        setting = self._get_setting()
        value = setting.value or {}
        if not value.get("active") and snapshot is None:
            return self.status()

        to_replay = snapshot if snapshot is not None else value.get("snapshot", [])
        items = [BulkUpdateItem.model_validate(row) for row in to_replay]
        self.availability.bulk_upsert(items)

        setting.value = {"active": False}
        self.db.commit()

        structured_logger.emergency_toggled(False, operator.username, len(items))
        return self.status()
