"""
Tests for DateRangeSelector

Tests cover:
- Click/drag gestures and the start <= end invariant
- Single-day confirmation on a second click
- Selection horizon
- Typed date entry through validation
"""

import pytest
from datetime import date, timedelta

from stayadmin.client.selection import DateRangeSelector

TODAY = date(2026, 3, 10)


@pytest.fixture
def selector():
    return DateRangeSelector(today=lambda: TODAY)


class TestPointerGestures:

    def test_first_pointer_down_opens_selection(self, selector):
        selector.pointer_down(date(2026, 7, 1))

        assert selector.selection.start == date(2026, 7, 1)
        assert selector.selection.end is None
        assert selector.dragging is True

    def test_second_click_on_start_confirms_single_day(self, selector):
        selector.pointer_down(date(2026, 7, 1))
        selector.pointer_up()
        selector.pointer_down(date(2026, 7, 1))

        assert selector.selection.start == date(2026, 7, 1)
        assert selector.selection.end == date(2026, 7, 1)

    def test_second_click_earlier_day_is_order_normalized(self, selector):
        selector.pointer_down(date(2026, 7, 5))
        selector.pointer_up()
        selector.pointer_down(date(2026, 7, 2))

        assert selector.selection.start == date(2026, 7, 2)
        assert selector.selection.end == date(2026, 7, 5)

    def test_click_after_closed_selection_starts_new_one(self, selector):
        selector.pointer_down(date(2026, 7, 1))
        selector.pointer_down(date(2026, 7, 3))
        selector.pointer_up()

        selector.pointer_down(date(2026, 8, 10))

        assert selector.selection.start == date(2026, 8, 10)
        assert selector.selection.end is None

    def test_backwards_drag_is_swapped_on_pointer_up(self, selector):
        selector.pointer_down(date(2026, 7, 10))
        selector.pointer_enter(date(2026, 7, 8))
        selector.pointer_enter(date(2026, 7, 6))

        # Live drag may be inverted until release
        assert selector.selection.end == date(2026, 7, 6)

        selector.pointer_up()
        assert selector.selection.start == date(2026, 7, 6)
        assert selector.selection.end == date(2026, 7, 10)
        assert selector.dragging is False

    def test_enter_on_start_cell_with_open_end_is_ignored(self, selector):
        selector.pointer_down(date(2026, 7, 10))
        selector.pointer_enter(date(2026, 7, 10))

        assert selector.selection.end is None

    def test_enter_without_drag_is_ignored(self, selector):
        selector.pointer_down(date(2026, 7, 10))
        selector.pointer_up()
        selector.pointer_enter(date(2026, 7, 12))

        assert selector.selection.end is None

    def test_pointer_down_beyond_horizon_is_noop(self, selector):
        selector.pointer_down(date(2026, 7, 1))
        before = selector.selection

        selector.pointer_down(date(2027, 7, 11))  # today + 16 months + 1 day

        assert selector.selection == before

    def test_horizon_day_itself_is_selectable(self, selector):
        selector.pointer_down(date(2027, 7, 10))
        assert selector.selection.start == date(2027, 7, 10)

    @pytest.mark.parametrize("sequence", [
        [("down", 5), ("enter", 1), ("up",)],
        [("down", 5), ("enter", 9), ("enter", 2), ("up",)],
        [("down", 3), ("up",), ("down", 1), ("up",)],
        [("down", 3), ("enter", 3), ("enter", 4), ("enter", 3), ("up",)],
        [("down", 8), ("up",), ("down", 8), ("up",), ("down", 2), ("enter", 1), ("up",)],
    ])
    def test_selection_is_ordered_after_every_release(self, selector, sequence):
        base = date(2026, 7, 1)
        for step in sequence:
            if step[0] == "down":
                selector.pointer_down(base + timedelta(days=step[1]))
            elif step[0] == "enter":
                selector.pointer_enter(base + timedelta(days=step[1]))
            else:
                selector.pointer_up()
                sel = selector.selection
                if sel.end is not None:
                    assert sel.start <= sel.end
                else:
                    assert sel.start is not None


class TestTypedDates:

    def test_valid_range_replaces_selection(self, selector):
        assert selector.enter_dates("2026-07-01", "2026-07-03") is True
        assert selector.selection.start == date(2026, 7, 1)
        assert selector.selection.end == date(2026, 7, 3)
        assert selector.error is None

    def test_end_before_start_keeps_previous_selection(self, selector):
        selector.enter_dates(date(2026, 7, 1), date(2026, 7, 3))

        assert selector.enter_dates(date(2026, 7, 5), date(2026, 7, 4)) is False
        assert selector.selection.start == date(2026, 7, 1)
        assert selector.selection.end == date(2026, 7, 3)
        assert "before start" in selector.error

    def test_range_beyond_horizon_rejected(self, selector):
        assert selector.enter_dates(date(2027, 7, 1), date(2027, 8, 1)) is False
        assert selector.selection.is_empty
        assert "horizon" in selector.error

    def test_clear_resets_everything(self, selector):
        selector.pointer_down(date(2026, 7, 1))
        selector.clear()

        assert selector.selection.is_empty
        assert selector.dragging is False
