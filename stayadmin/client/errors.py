"""
Admin client error taxonomy.

ValidationError is caught next to the control that produced it and is never
submitted. TransportError covers any failed round-trip to the service.
MalformedResponseError marks a single unusable record; callers drop the
record and keep going.
"""

from typing import Optional


class StayAdminClientError(Exception):
    """Base class for admin client errors"""
    pass


class ValidationError(StayAdminClientError):

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class TransportError(StayAdminClientError):

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MalformedResponseError(StayAdminClientError):

    def __init__(self, message: str, payload: Optional[dict] = None):
        super().__init__(message)
        self.payload = payload


class AuthenticationRequiredError(StayAdminClientError):
    """An operation needs a signed-in operator"""
    pass


class CalendarLockedError(StayAdminClientError):
    """The calendar editor is unreachable while emergency mode is active"""
    pass
