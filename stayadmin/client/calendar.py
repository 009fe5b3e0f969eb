"""
Calendar Controller

Wires the selector, cache, room directory, bulk editor and emergency switch
into one calendar screen. The emergency gate is checked here: while
emergency mode is active the selector and editor are unreachable.
"""

import logging
from datetime import date
from typing import Callable, Optional

from ..utils.dates import month_token, parse_month_token
from .api import AdminApiClient
from .availability_cache import AvailabilityCache
from .bulk_edit import BulkEditOrchestrator
from .emergency import EmergencySwitch
from .errors import (
    CalendarLockedError, AuthenticationRequiredError, TransportError, MalformedResponseError
)
from .notices import NoticeBoard
from .room_directory import RoomDirectory
from .selection import DateRangeSelector

logger = logging.getLogger(__name__)

LOCKED_MESSAGE = "Emergency mode is active. Calendar editing is disabled until it is turned off."


class CalendarController:

    def __init__(
        self,
        api: AdminApiClient,
        state_file: Optional[str] = None,
        today: Optional[Callable[[], date]] = None
    ):
        self.api = api
        self._today = today or date.today
        self.notices = NoticeBoard()
        self.rooms = RoomDirectory(api)
        self.cache = AvailabilityCache(api, self.rooms.get_base_price)
        self._selector = DateRangeSelector(today=self._today)
        self._editor = BulkEditOrchestrator(
            self._selector,
            self.cache,
            api,
            self.rooms.get_base_price,
            notices=self.notices,
        )
        self.emergency = EmergencySwitch(api, self.cache, state_file=state_file, today=self._today)
        self.month = month_token(self._today())

    @property
    def locked(self) -> bool:
        return self.emergency.is_active

    @property
    def notice(self) -> Optional[str]:
        """Message that replaces the calendar surface, if any"""
        return LOCKED_MESSAGE if self.locked else None

    @property
    def selector(self) -> DateRangeSelector:
        if self.locked:
            raise CalendarLockedError(LOCKED_MESSAGE)
        return self._selector

    @property
    def editor(self) -> BulkEditOrchestrator:
        if self.locked:
            raise CalendarLockedError(LOCKED_MESSAGE)
        return self._editor

    @property
    def room_id(self) -> Optional[int]:
        return self._editor.room_id

    async def load(self) -> None:
        """Rooms first so resolve() has base prices, then the current month"""
        try:
            await self.rooms.load()
        except (TransportError, MalformedResponseError) as e:
            self.notices.error(f"Could not load rooms: {e}")
            return
        if self.room_id is None and self.rooms.rooms:
            self.select_room(self.rooms.rooms[0].id)
        await self.cache.fetch_window(self.month)

    def select_room(self, room_id: int) -> None:
        if room_id != self._editor.room_id:
            self._selector.clear()
        self._editor.room_id = room_id

    async def show_month(self, month: str) -> bool:
        try:
            parse_month_token(month)
        except ValueError as e:
            self.cache.error = f"Invalid month {month!r}: {e}"
            self.notices.error(self.cache.error)
            return False
        self.month = month
        ok = await self.cache.fetch_window(month)
        if not ok:
            self.notices.error(self.cache.error)
        return ok

    async def toggle_emergency(self, active: bool) -> bool:
        """Turn emergency mode on or off; failures become notices"""
        try:
            if active:
                await self.emergency.activate()
                self._selector.clear()
            else:
                await self.emergency.deactivate()
        except (AuthenticationRequiredError, TransportError, MalformedResponseError) as e:
            self.notices.error(str(e))
            return False

        self.notices.success("Emergency mode activated" if active else "Emergency mode deactivated")
        return True
