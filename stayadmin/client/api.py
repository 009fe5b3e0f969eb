"""
Admin API Client

Async wrapper over the stayadmin service used by the calendar editor.

- Bearer-token authentication (obtained with login())
- Every failed round-trip surfaces as TransportError with the HTTP status
- No client-side timeout beyond the transport default
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..config import settings
from .errors import TransportError, MalformedResponseError

logger = logging.getLogger(__name__)


class AdminApiClient:

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = (base_url or settings.api_url).rstrip("/")
        self.token = token
        self._transport = transport

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                headers=self._headers(),
                transport=self._transport
            ) as client:
                response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise TransportError(f"Could not reach the server: {e}")

        if response.status_code >= 400:
            detail = response.text[:200]
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("detail"):
                detail = body["detail"]
            logger.error(f"{method} {path} returned {response.status_code}: {detail}")
            raise TransportError(str(detail), status_code=response.status_code)

        try:
            return response.json()
        except ValueError:
            raise MalformedResponseError(f"{method} {path} returned a non-JSON body")

    # ================================
    # AUTH
    # ================================

    async def login(self, username: str, password: str) -> str:
        data = await self._request(
            "POST", "/api/auth/login",
            data={"username": username, "password": password}
        )
        self.token = data["access_token"]
        logger.info(f"Signed in as {username}")
        return self.token

    # ================================
    # CALENDAR
    # ================================

    async def get_availability(self, month: str) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/availability", params={"month": month})

    async def bulk_update(self, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return await self._request("POST", "/api/availability/bulk", json={"items": items})

    async def get_rooms(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/rooms")

    # ================================
    # EMERGENCY
    # ================================

    async def emergency_status(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/emergency")

    async def emergency_activate(self) -> Dict[str, Any]:
        return await self._request("POST", "/api/emergency/activate")

    async def emergency_deactivate(self, snapshot: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        return await self._request("POST", "/api/emergency/deactivate", json={"snapshot": snapshot})

    # ================================
    # BOOKINGS
    # ================================

    async def get_bookings(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"status": status} if status else None
        return await self._request("GET", "/api/bookings", params=params)

    async def confirm_booking(self, booking_id: int) -> Dict[str, Any]:
        return await self._request("POST", f"/api/bookings/{booking_id}/confirm")

    async def cancel_booking(self, booking_id: int) -> Dict[str, Any]:
        return await self._request("POST", f"/api/bookings/{booking_id}/cancel")
