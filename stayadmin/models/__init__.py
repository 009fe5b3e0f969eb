# Models package
from .room import Room
from .availability import AvailabilityRecord, MANUAL_BLOCK, EMERGENCY_BLOCK
from .booking import Booking, BookingStatus, BookingType
from .setting import AppSetting, EMERGENCY_KEY
from .operator import Operator

__all__ = [
    "Room",
    "AvailabilityRecord", "MANUAL_BLOCK", "EMERGENCY_BLOCK",
    "Booking", "BookingStatus", "BookingType",
    "AppSetting", "EMERGENCY_KEY",
    "Operator",
]
