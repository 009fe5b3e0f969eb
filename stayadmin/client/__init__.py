"""
Calendar editing core of the admin tool.
"""

from .api import AdminApiClient
from .availability_cache import AvailabilityCache, CachedRecord, DayState
from .bulk_edit import (
    BulkEditOrchestrator, BulkUpdateItem, EditorState, PriceSummary,
    build_price_items, build_availability_items, build_revert_items
)
from .calendar import CalendarController
from .emergency import EmergencySwitch
from .errors import (
    ValidationError, TransportError, MalformedResponseError,
    AuthenticationRequiredError, CalendarLockedError
)
from .notices import Notice, NoticeBoard
from .room_directory import RoomDirectory, RoomInfo
from .selection import DateRangeSelector, SelectionRange

__all__ = [
    "AdminApiClient",
    "AvailabilityCache",
    "CachedRecord",
    "DayState",
    "BulkEditOrchestrator",
    "BulkUpdateItem",
    "EditorState",
    "PriceSummary",
    "build_price_items",
    "build_availability_items",
    "build_revert_items",
    "CalendarController",
    "EmergencySwitch",
    "ValidationError",
    "TransportError",
    "MalformedResponseError",
    "AuthenticationRequiredError",
    "CalendarLockedError",
    "Notice",
    "NoticeBoard",
    "RoomDirectory",
    "RoomInfo",
    "DateRangeSelector",
    "SelectionRange",
]
