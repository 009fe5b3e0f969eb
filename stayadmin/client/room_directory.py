"""
Room Directory

Read-only room metadata for the calendar. Its get_base_price is the
lookup injected into the cache and the bulk editor.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional

from .api import AdminApiClient
from .availability_cache import coerce_price

logger = logging.getLogger(__name__)


@dataclass
class RoomInfo:
    id: int
    name: str
    base_price: Decimal
    max_guests: int = 2
    active: bool = True


class RoomDirectory:

    def __init__(self, api: Optional[AdminApiClient] = None):
        self.api = api
        self._rooms: Dict[int, RoomInfo] = {}

    async def load(self) -> List[RoomInfo]:
        """Replace the directory with the server's rooms, ordered by id"""
        rows = await self.api.get_rooms()
        self.set_rooms(
            RoomInfo(
                id=int(row["id"]),
                name=row.get("name") or f"Room {row['id']}",
                base_price=coerce_price(row.get("base_price")) or Decimal("0"),
                max_guests=row.get("max_guests") or 2,
                active=bool(row.get("active", True)),
            )
            for row in rows
        )
        logger.info(f"Loaded {len(self._rooms)} rooms")
        return self.rooms

    def set_rooms(self, rooms) -> None:
        self._rooms = {room.id: room for room in rooms}

    @property
    def rooms(self) -> List[RoomInfo]:
        return [self._rooms[room_id] for room_id in sorted(self._rooms)]

    def get(self, room_id: int) -> Optional[RoomInfo]:
        return self._rooms.get(room_id)

    def get_base_price(self, room_id: int) -> Decimal:
        """Base price of the room, 0 when the room is unknown"""
        room = self._rooms.get(room_id)
        return room.base_price if room else Decimal("0")
