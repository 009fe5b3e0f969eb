"""
Tests for EmergencySwitch and the calendar lock
"""

import asyncio
import json
import pytest
from datetime import date
from unittest.mock import MagicMock, AsyncMock

from stayadmin.client.calendar import CalendarController, LOCKED_MESSAGE
from stayadmin.client.emergency import EmergencySwitch
from stayadmin.client.errors import AuthenticationRequiredError, CalendarLockedError

SNAPSHOT = [
    {"id": 1, "room_id": 1, "date": "2026-07-01", "available": True, "price_override": "110.00",
     "blocked_reason": None, "notes": "late checkout"},
    {"id": 2, "room_id": 1, "date": "2026-07-02", "available": False, "price_override": None,
     "blocked_reason": "manual_block", "notes": None},
]


@pytest.fixture
def api():
    api = MagicMock()
    api.is_authenticated = True
    api.emergency_activate = AsyncMock(return_value={
        "active": True, "activated_at": "2026-07-01T09:00:00", "activated_by": "frontdesk", "snapshot": SNAPSHOT
    })
    api.emergency_deactivate = AsyncMock(return_value={"active": False})
    api.emergency_status = AsyncMock(return_value={"active": False})
    return api


@pytest.fixture
def cache():
    cache = MagicMock()
    cache.fetch_window = AsyncMock(return_value=True)
    return cache


@pytest.fixture
def state_file(tmp_path):
    return str(tmp_path / "emergency.json")


@pytest.fixture
def switch(api, cache, state_file):
    return EmergencySwitch(api, cache, state_file=state_file, today=lambda: date(2026, 7, 15))


class TestEmergencySwitch:

    def test_activate_persists_flag_and_snapshot(self, switch, state_file):
        asyncio.run(switch.activate())

        assert switch.is_active is True
        with open(state_file, encoding="utf-8") as f:
            stored = json.load(f)
        assert stored["active"] is True
        assert stored["snapshot"] == SNAPSHOT

    def test_deactivate_replays_snapshot_verbatim_and_refetches(self, switch, api, cache):
        asyncio.run(switch.activate())
        asyncio.run(switch.deactivate())

        api.emergency_deactivate.assert_awaited_once_with(SNAPSHOT)
        cache.fetch_window.assert_awaited_once_with("2026-07")
        assert switch.is_active is False

    def test_state_survives_restart(self, switch, api, cache, state_file):
        asyncio.run(switch.activate())

        reloaded = EmergencySwitch(api, cache, state_file=state_file)
        assert reloaded.is_active is True
        assert reloaded.snapshot == SNAPSHOT

    def test_requires_signed_in_operator(self, switch, api):
        api.is_authenticated = False

        with pytest.raises(AuthenticationRequiredError):
            asyncio.run(switch.activate())
        with pytest.raises(AuthenticationRequiredError):
            asyncio.run(switch.deactivate())

        api.emergency_activate.assert_not_awaited()
        api.emergency_deactivate.assert_not_awaited()

    def test_sync_picks_up_remote_flag(self, switch, api):
        api.emergency_status = AsyncMock(return_value={"active": True})
        assert asyncio.run(switch.sync()) is True

    def test_unreadable_state_file_is_ignored(self, api, cache, state_file):
        with open(state_file, "w", encoding="utf-8") as f:
            f.write("{not json")

        assert EmergencySwitch(api, cache, state_file=state_file).is_active is False


class TestCalendarLock:

    @pytest.fixture
    def controller(self, api, state_file):
        api.get_rooms = AsyncMock(return_value=[{"id": 1, "name": "Garden Room", "base_price": "100.00"}])
        api.get_availability = AsyncMock(return_value=[])
        return CalendarController(api, state_file=state_file, today=lambda: date(2026, 7, 15))

    def test_editor_unreachable_while_active(self, controller):
        asyncio.run(controller.toggle_emergency(True))

        assert controller.notice == LOCKED_MESSAGE
        with pytest.raises(CalendarLockedError):
            controller.selector
        with pytest.raises(CalendarLockedError):
            controller.editor

    def test_unlock_restores_editor(self, controller, api):
        asyncio.run(controller.toggle_emergency(True))
        asyncio.run(controller.toggle_emergency(False))

        assert controller.notice is None
        assert controller.editor is not None
        api.get_availability.assert_awaited_with("2026-07")

    def test_toggle_without_sign_in_becomes_notice(self, controller, api):
        api.is_authenticated = False

        assert asyncio.run(controller.toggle_emergency(True)) is False
        assert controller.notices.latest.kind == "error"
        assert controller.locked is False

    def test_load_selects_first_room(self, controller):
        asyncio.run(controller.load())

        assert controller.room_id == 1
        assert controller.cache.resolve(date(2026, 7, 20), 1).display_price == 100

    def test_switching_room_clears_selection(self, controller):
        controller.select_room(1)
        controller.selector.pointer_down(date(2026, 7, 20))

        controller.select_room(2)

        assert controller.selector.selection.is_empty

    def test_invalid_month_becomes_notice(self, controller, api):
        assert asyncio.run(controller.show_month("2026-13")) is False

        assert controller.month == "2026-07"
        assert controller.notices.latest.kind == "error"
        assert "2026-13" in controller.cache.error
        api.get_availability.assert_not_awaited()
