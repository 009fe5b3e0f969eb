"""
Bulk Edit Orchestrator

Turns the current date selection plus an operator intent into one batch of
per-day upserts keyed by (room_id, date), submits it, and merges the
authoritative rows back into the availability cache.

Intents:
- set_price(p): open every day at price p
- set_availability(True): open every day, pinning today's base price as override
- set_availability(False): close every day with reason "manual_block"
- revert_to_base_price(): open every day with no override, so later base
  price changes apply

Only one submission may be in flight; while SUBMITTING every intent is a
no-op. A failed submission leaves the cache and the selection untouched.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from ..models.availability import MANUAL_BLOCK
from ..utils.dates import each_day
from .api import AdminApiClient
from .availability_cache import AvailabilityCache
from .errors import TransportError, MalformedResponseError, ValidationError
from .notices import NoticeBoard
from .selection import DateRangeSelector
from .validation import validate_price

logger = logging.getLogger(__name__)


class EditorState(str, enum.Enum):
    IDLE = "idle"
    SELECTING = "selecting"
    SUBMITTING = "submitting"
    ERROR = "error"


@dataclass
class BulkUpdateItem:
    room_id: int
    date: date
    available: bool
    price_override: Optional[Decimal] = None
    blocked_reason: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "room_id": self.room_id,
            "date": self.date.isoformat(),
            "available": self.available,
            "price_override": float(self.price_override) if self.price_override is not None else None,
            "blocked_reason": self.blocked_reason,
        }


@dataclass
class PriceSummary:
    """What the price field shows for the current selection"""
    kind: str  # "price", "base", "mixed" or "none"
    price: Optional[Decimal] = None


# ================================
# BATCH BUILDERS
# ================================

def build_price_items(room_id: int, start: date, end: date, price: Decimal) -> List[BulkUpdateItem]:
    return [
        BulkUpdateItem(room_id=room_id, date=day, available=True, price_override=price)
        for day in each_day(start, end)
    ]


def build_availability_items(
    room_id: int,
    start: date,
    end: date,
    available: bool,
    base_price: Optional[Decimal] = None
) -> List[BulkUpdateItem]:
    if available:
        # Opening freezes the current base price as an explicit override
        pinned = base_price if base_price else None
        return [
            BulkUpdateItem(room_id=room_id, date=day, available=True, price_override=pinned)
            for day in each_day(start, end)
        ]
    return [
        BulkUpdateItem(
            room_id=room_id,
            date=day,
            available=False,
            price_override=None,
            blocked_reason=MANUAL_BLOCK,
        )
        for day in each_day(start, end)
    ]


def build_revert_items(room_id: int, start: date, end: date) -> List[BulkUpdateItem]:
    return [
        BulkUpdateItem(room_id=room_id, date=day, available=True, price_override=None)
        for day in each_day(start, end)
    ]


class BulkEditOrchestrator:

    def __init__(
        self,
        selector: DateRangeSelector,
        cache: AvailabilityCache,
        api: AdminApiClient,
        base_price_lookup: Callable[[int], Decimal],
        notices: Optional[NoticeBoard] = None,
        room_id: Optional[int] = None
    ):
        self.selector = selector
        self.cache = cache
        self.api = api
        self.base_price_lookup = base_price_lookup
        self.notices = notices or NoticeBoard()
        self.room_id = room_id
        self._state = EditorState.IDLE
        self._failed_selection = None
        self.last_error: Optional[str] = None
        self.validation_error: Optional[str] = None

    @property
    def state(self) -> EditorState:
        # An error belongs to the selection it happened on
        if self._state == EditorState.ERROR and self.selector.selection != self._failed_selection:
            self._state = EditorState.IDLE
        if self._state == EditorState.IDLE and not self.selector.selection.is_empty:
            return EditorState.SELECTING
        return self._state

    @property
    def busy(self) -> bool:
        return self._state == EditorState.SUBMITTING

    def _resolved_range(self):
        selection = self.selector.selection
        if selection.start is None:
            return None
        return selection.start, selection.end or selection.start

    def _ready(self) -> bool:
        if self.busy:
            logger.debug("Bulk edit already in flight, ignoring intent")
            return False
        if self.room_id is None or self._resolved_range() is None:
            self.notices.error("Select a room and at least one day first")
            return False
        if self._state == EditorState.ERROR:
            self._state = EditorState.IDLE
        return True

    # ================================
    # INTENTS
    # ================================

    async def set_price(self, price) -> Optional[int]:
        if not self._ready():
            return None
        try:
            value = validate_price(price)
        except ValidationError as e:
            self.validation_error = e.message
            return None
        self.validation_error = None

        start, end = self._resolved_range()
        return await self._submit(build_price_items(self.room_id, start, end, value))

    async def set_availability(self, available: bool) -> Optional[int]:
        if not self._ready():
            return None
        start, end = self._resolved_range()
        base_price = self.base_price_lookup(self.room_id)
        return await self._submit(
            build_availability_items(self.room_id, start, end, available, base_price=base_price)
        )

    async def revert_to_base_price(self) -> Optional[int]:
        if not self._ready():
            return None
        start, end = self._resolved_range()
        return await self._submit(build_revert_items(self.room_id, start, end))

    def _fail(self, message: str) -> None:
        self._state = EditorState.ERROR
        self._failed_selection = self.selector.selection
        self.last_error = message
        self.notices.error(f"Update failed: {message}")
        return None

    async def _submit(self, items: List[BulkUpdateItem]) -> Optional[int]:
        """
        Send one batch. Returns the number of days written, or None on failure.
        """
        self._state = EditorState.SUBMITTING
        self.last_error = None
        try:
            rows = await self.api.bulk_update([item.to_payload() for item in items])
            if not isinstance(rows, list):
                raise MalformedResponseError("Bulk update returned an unexpected body")
        except (TransportError, MalformedResponseError) as e:
            return self._fail(str(e))
        except Exception as e:
            logger.exception(f"Unexpected error during bulk update: {e}")
            return self._fail(str(e) or e.__class__.__name__)

        self.cache.merge(rows)
        self.selector.clear()
        self._state = EditorState.IDLE
        self.notices.success(f"Updated {len(items)} day(s)")
        return len(items)

    # ================================
    # SUMMARY
    # ================================

    def price_summary(self) -> PriceSummary:
        """
        Price shown for the selection: one shared price, the base price,
        "mixed", or nothing when every selected day is closed.
        """
        resolved = self._resolved_range()
        if self.room_id is None or resolved is None:
            return PriceSummary(kind="none")

        prices = set()
        any_override = False
        for day in each_day(*resolved):
            state = self.cache.resolve(day, self.room_id)
            if not state.is_available:
                continue
            prices.add(state.display_price)
            any_override = any_override or state.has_override

        if not prices:
            return PriceSummary(kind="none")
        if len(prices) > 1:
            return PriceSummary(kind="mixed")
        price = prices.pop()
        return PriceSummary(kind="price" if any_override else "base", price=price)
