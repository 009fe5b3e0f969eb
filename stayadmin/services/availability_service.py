"""
Availability Service

Reads and writes the per-room daily availability calendar.
Every write is an upsert keyed by (room_id, date).
"""

import logging
from datetime import date, datetime
from typing import List, Optional, Iterable, Tuple

from sqlalchemy.orm import Session

from ..models.availability import AvailabilityRecord, MANUAL_BLOCK
from ..schemas.availability import BulkUpdateItem, AvailabilityUpdate
from ..utils.dates import month_bounds
from ..utils.db_helpers import upsert_statement
from ..utils.logging_config import get_logger

logger = logging.getLogger(__name__)
structured_logger = get_logger(__name__)

UPSERT_COLUMNS = ["available", "price_override", "blocked_reason", "updated_at"]


class AvailabilityService:
    """
    Service for the availability calendar.

    Key responsibilities:
    - Month-window and range reads
    - Bulk upsert with overwrite-on-conflict
    - Single-row edits and resets
    """

    def __init__(self, db: Session):
        self.db = db

    def get_range(self, start_date: date, end_date: date) -> List[AvailabilityRecord]:
        """All records with start_date <= date <= end_date, ordered by date."""
        return self.db.query(AvailabilityRecord).filter(
            AvailabilityRecord.date >= start_date,
            AvailabilityRecord.date <= end_date
        ).order_by(AvailabilityRecord.date, AvailabilityRecord.room_id).all()

    def get_month(self, token: str) -> List[AvailabilityRecord]:
        """All records in the calendar month named by a yyyy-MM token."""
        start_date, end_date = month_bounds(token)
        return self.get_range(start_date, end_date)

    def _dedupe(self, items: Iterable[BulkUpdateItem]) -> List[BulkUpdateItem]:
        """Keep the last item per (room_id, date); one statement cannot touch a key twice."""
        by_key = {}
        for item in items:
            by_key[(item.room_id, item.date)] = item
        return list(by_key.values())

    def _fetch_keys(self, keys: List[Tuple[int, date]]) -> List[AvailabilityRecord]:
        if not keys:
            return []
        wanted = set(keys)
        candidates = self.db.query(AvailabilityRecord).filter(
            AvailabilityRecord.room_id.in_({room_id for room_id, _ in wanted}),
            AvailabilityRecord.date.in_({day for _, day in wanted})
        ).order_by(AvailabilityRecord.date, AvailabilityRecord.room_id).all()
        return [r for r in candidates if (r.room_id, r.date) in wanted]

    def bulk_upsert(self, items: List[BulkUpdateItem]) -> List[AvailabilityRecord]:
        """
        Upsert a batch of room-days in one statement.

        Conflicts on (room_id, date) overwrite the stored row.
        Returns every affected row, with ids and timestamps.
        """
        items = self._dedupe(items)
        if not items:
            logger.warning("bulk_upsert called with no items")
            return []

        now = datetime.utcnow()
        rows = [
            {
                "room_id": item.room_id,
                "date": item.date,
                "available": item.available,
                "price_override": item.price_override,
                "blocked_reason": item.blocked_reason,
                "created_at": now,
                "updated_at": now,
            }
            for item in items
        ]

        stmt = upsert_statement(
            self.db,
            AvailabilityRecord.__table__,
            rows,
            conflict_columns=["room_id", "date"],
            update_columns=UPSERT_COLUMNS,
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        # Rows written by the core statement are not in the identity map yet
        self.db.expire_all()
        affected = self._fetch_keys([(item.room_id, item.date) for item in items])

        structured_logger.availability_upserted(
            room_ids=sorted({item.room_id for item in items}),
            days=len(affected)
        )
        return affected

    def get(self, record_id: int) -> Optional[AvailabilityRecord]:
        return self.db.query(AvailabilityRecord).filter(AvailabilityRecord.id == record_id).first()

    def update_one(self, record: AvailabilityRecord, updates: AvailabilityUpdate) -> AvailabilityRecord:
        """
        Apply a partial update to one row.

        Closing a day drops its override and marks it manually blocked;
        opening it clears the blocked reason.
        """
        data = updates.model_dump(exclude_unset=True)
        for key, value in data.items():
            setattr(record, key, value)

        if record.available:
            record.blocked_reason = None
        else:
            record.price_override = None
            record.blocked_reason = MANUAL_BLOCK

        self.db.commit()
        self.db.refresh(record)
        logger.info(f"Updated availability {record.id}: room={record.room_id} date={record.date}")
        return record

    def reset(self, room_id: int, dates: List[date]) -> int:
        """
        Reopen dates and drop overrides so the room base price applies again.
        Returns count of rows reset.
        """
        count = self.db.query(AvailabilityRecord).filter(
            AvailabilityRecord.room_id == room_id,
            AvailabilityRecord.date.in_(dates)
        ).update({
            "available": True,
            "blocked_reason": None,
            "price_override": None,
            "updated_at": datetime.utcnow(),
        }, synchronize_session=False)
        self.db.commit()

        logger.info(f"Reset {count} dates for room {room_id}")
        return count
