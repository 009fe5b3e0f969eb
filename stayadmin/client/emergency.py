"""
Emergency Switch

activate() and deactivate() are the two halves of one compensating
transaction. The snapshot returned by activate() is opaque here: it is kept
in a local JSON state file exactly as received and sent back unchanged by
deactivate().
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from ..config import settings
from ..utils.dates import month_token
from .api import AdminApiClient
from .availability_cache import AvailabilityCache
from .errors import AuthenticationRequiredError

logger = logging.getLogger(__name__)


class EmergencySwitch:

    def __init__(
        self,
        api: AdminApiClient,
        cache: AvailabilityCache,
        state_file: Optional[str] = None,
        today: Optional[Callable[[], date]] = None
    ):
        self.api = api
        self.cache = cache
        self.state_path = Path(state_file or settings.emergency_state_file)
        self._today = today or date.today
        self._state = self._load()

    # ================================
    # LOCAL STATE
    # ================================

    def _load(self) -> Dict[str, Any]:
        if not self.state_path.exists():
            return {"active": False}
        try:
            return json.loads(self.state_path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning(f"Ignoring unreadable emergency state file {self.state_path}")
            return {"active": False}

    def _save(self, state: Dict[str, Any]) -> None:
        self.state_path.parent.mkdir(parents=True, exist_ok=True)
        self.state_path.write_text(json.dumps(state, ensure_ascii=False), encoding="utf-8")
        self._state = state

    @property
    def is_active(self) -> bool:
        return bool(self._state.get("active"))

    @property
    def snapshot(self) -> Optional[list]:
        return self._state.get("snapshot")

    def _require_operator(self) -> None:
        if not self.api.is_authenticated:
            raise AuthenticationRequiredError("Sign in to change emergency mode")

    # ================================
    # OPERATIONS
    # ================================

    async def sync(self) -> bool:
        """Refresh the local flag from the server, keeping any stored snapshot"""
        status = await self.api.emergency_status()
        active = bool(status.get("active"))
        if active != self.is_active:
            state = dict(self._state, active=active)
            if not active:
                state.pop("snapshot", None)
            self._save(state)
        return self.is_active

    async def activate(self) -> None:
        self._require_operator()
        result = await self.api.emergency_activate()
        self._save({
            "active": True,
            "activated_at": result.get("activated_at"),
            "activated_by": result.get("activated_by"),
            "snapshot": result.get("snapshot", []),
        })
        logger.warning(f"Emergency mode activated, {len(self.snapshot)} record(s) snapshotted")

    async def deactivate(self) -> None:
        self._require_operator()
        await self.api.emergency_deactivate(self.snapshot)
        self._save({"active": False})
        logger.warning("Emergency mode deactivated")

        await self.cache.fetch_window(month_token(self._today()))
