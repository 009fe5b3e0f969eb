"""
Availability Query Cache

In-memory map of room-day records keyed by (room_id, date).

Window fetches and post-submission merges both go through merge(), which
upserts per key and never replaces the whole cache. A missing key means
"open at the room's base price".
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..utils.dates import parse_month_token
from .api import AdminApiClient
from .errors import TransportError, MalformedResponseError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "room_id", "date")


def coerce_bool(value: Any) -> bool:
    """Accept real booleans and 'true'/'false' strings; anything else is False"""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return False


def coerce_price(value: Any) -> Optional[Decimal]:
    """Numbers and numeric strings become Decimal; anything unusable is None"""
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite():
        return None
    return price


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


@dataclass
class CachedRecord:
    id: int
    room_id: int
    date: date
    available: bool
    price_override: Optional[Decimal] = None
    blocked_reason: Optional[str] = None
    notes: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def key(self) -> Tuple[int, date]:
        return (self.room_id, self.date)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "CachedRecord":
        """
        Build a record from a server row, sanitising loosely typed fields.
        Raises MalformedResponseError when a key field is missing or unusable.
        """
        if not isinstance(payload, dict):
            raise MalformedResponseError("Record is not an object")
        missing = [f for f in REQUIRED_FIELDS if payload.get(f) in (None, "")]
        if missing:
            raise MalformedResponseError(f"Record missing {', '.join(missing)}", payload)
        try:
            room_id = int(payload["room_id"])
            day = _parse_date(payload["date"])
        except (TypeError, ValueError):
            raise MalformedResponseError("Record has an unusable room_id or date", payload)

        return cls(
            id=payload["id"],
            room_id=room_id,
            date=day,
            available=coerce_bool(payload.get("available")),
            price_override=coerce_price(payload.get("price_override")),
            blocked_reason=payload.get("blocked_reason"),
            notes=payload.get("notes"),
            updated_at=payload.get("updated_at"),
        )


@dataclass
class DayState:
    is_available: bool
    display_price: Decimal
    has_override: bool
    base_price: Decimal


class AvailabilityCache:

    def __init__(self, api: AdminApiClient, base_price_lookup: Callable[[int], Decimal]):
        self.api = api
        self.base_price_lookup = base_price_lookup
        self._records: Dict[Tuple[int, date], CachedRecord] = {}
        self.error: Optional[str] = None
        self.loading = False

    @property
    def records(self) -> List[CachedRecord]:
        return sorted(self._records.values(), key=lambda r: (r.date, r.room_id))

    def get(self, day: date, room_id: int) -> Optional[CachedRecord]:
        return self._records.get((room_id, day))

    def merge(self, payloads: Iterable[Dict[str, Any]]) -> int:
        """
        Upsert server rows into the cache by (room_id, date).
        Rows missing id, room_id or date are dropped. Returns rows merged.
        """
        merged = 0
        for payload in payloads or []:
            try:
                record = CachedRecord.from_payload(payload)
            except MalformedResponseError as e:
                logger.warning(f"Dropping malformed availability record: {e}")
                continue
            self._records[record.key] = record
            merged += 1
        return merged

    async def fetch_window(self, month: str) -> bool:
        """
        Fetch one calendar month and merge it in.
        On failure the cache is left as it was and error is set.
        """
        try:
            parse_month_token(month)
        except ValueError as e:
            self.error = f"Invalid month {month!r}: {e}"
            logger.warning(self.error)
            return False
        self.loading = True
        try:
            rows = await self.api.get_availability(month)
        except (TransportError, MalformedResponseError) as e:
            self.error = f"Could not load availability for {month}: {e}"
            logger.error(self.error)
            return False
        finally:
            self.loading = False

        if not isinstance(rows, list):
            self.error = f"Unexpected availability response for {month}"
            logger.error(self.error)
            return False

        count = self.merge(rows)
        self.error = None
        logger.info(f"Loaded {count} availability records for {month}")
        return True

    def resolve(self, day: date, room_id: int) -> DayState:
        """Effective state of one room-day; absent rows are open at base price"""
        base_price = Decimal(str(self.base_price_lookup(room_id) or 0))
        record = self._records.get((room_id, day))
        if record is None:
            return DayState(
                is_available=True,
                display_price=base_price,
                has_override=False,
                base_price=base_price,
            )

        has_override = record.price_override is not None
        return DayState(
            is_available=record.available,
            display_price=record.price_override if has_override else base_price,
            has_override=has_override,
            base_price=base_price,
        )

    def clear(self) -> None:
        self._records.clear()
        self.error = None
