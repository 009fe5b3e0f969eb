"""
Tests for AvailabilityCache

Tests cover:
- Additive merge keyed by (room_id, date)
- Default-open resolution
- Sanitising loosely typed rows
- Fetch failure leaves the cache untouched
"""

import asyncio
import pytest
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock, AsyncMock

from stayadmin.client.availability_cache import AvailabilityCache, coerce_bool, coerce_price
from stayadmin.client.errors import TransportError


def row(id, room_id, day, available=True, price_override=None, blocked_reason=None):
    return {
        "id": id,
        "room_id": room_id,
        "date": day,
        "available": available,
        "price_override": price_override,
        "blocked_reason": blocked_reason,
    }


@pytest.fixture
def api():
    return MagicMock()


@pytest.fixture
def cache(api):
    prices = {1: Decimal("100"), 2: Decimal("80")}
    return AvailabilityCache(api, lambda room_id: prices.get(room_id, Decimal("0")))


class TestMerge:

    def test_merge_never_duplicates_a_key(self, cache):
        cache.merge([row(1, 1, "2026-07-01", price_override=110)])
        cache.merge([row(7, 1, "2026-07-01", price_override=120)])
        cache.merge([row(8, 1, "2026-07-01", available=False, blocked_reason="manual_block")])

        keys = [(r.room_id, r.date) for r in cache.records]
        assert len(keys) == len(set(keys)) == 1
        assert cache.get(date(2026, 7, 1), 1).available is False

    def test_windows_for_different_months_accumulate(self, cache):
        cache.merge([row(1, 1, "2026-07-31")])
        cache.merge([row(2, 1, "2026-08-01")])

        assert len(cache.records) == 2

    def test_malformed_rows_are_dropped(self, cache):
        merged = cache.merge([
            row(1, 1, "2026-07-01"),
            {"room_id": 1, "date": "2026-07-02", "available": True},
            {"id": 3, "date": "2026-07-03"},
            {"id": 4, "room_id": 1},
            {"id": 5, "room_id": 1, "date": "not-a-date"},
            "garbage",
        ])

        assert merged == 1
        assert [r.date for r in cache.records] == [date(2026, 7, 1)]

    def test_loose_types_are_sanitised(self, cache):
        cache.merge([
            row(1, 1, "2026-07-01", available="true", price_override="125.50"),
            row(2, 1, "2026-07-02", available="nope", price_override="abc"),
            row(3, 1, "2026-07-03T00:00:00", available="FALSE", price_override=99),
        ])

        first = cache.get(date(2026, 7, 1), 1)
        assert first.available is True
        assert first.price_override == Decimal("125.50")

        second = cache.get(date(2026, 7, 2), 1)
        assert second.available is False
        assert second.price_override is None

        third = cache.get(date(2026, 7, 3), 1)
        assert third.available is False
        assert third.price_override == Decimal("99")


class TestResolve:

    def test_missing_record_is_open_at_base_price(self, cache):
        state = cache.resolve(date(2027, 1, 1), 1)

        assert state.is_available is True
        assert state.display_price == Decimal("100")
        assert state.has_override is False

    def test_unknown_room_resolves_to_zero(self, cache):
        state = cache.resolve(date(2027, 1, 1), 99)
        assert state.display_price == Decimal("0")

    def test_override_wins_over_base(self, cache):
        cache.merge([row(1, 2, "2026-07-01", price_override="95")])

        state = cache.resolve(date(2026, 7, 1), 2)
        assert state.display_price == Decimal("95")
        assert state.base_price == Decimal("80")
        assert state.has_override is True

    def test_record_without_override_shows_base(self, cache):
        cache.merge([row(1, 1, "2026-07-01", available=False, blocked_reason="manual_block")])

        state = cache.resolve(date(2026, 7, 1), 1)
        assert state.is_available is False
        assert state.display_price == Decimal("100")


class TestFetchWindow:

    def test_fetch_merges_rows(self, api, cache):
        api.get_availability = AsyncMock(return_value=[row(1, 1, "2026-07-01"), row(2, 1, "2026-07-02")])

        assert asyncio.run(cache.fetch_window("2026-07")) is True

        api.get_availability.assert_awaited_once_with("2026-07")
        assert len(cache.records) == 2
        assert cache.error is None
        assert cache.loading is False

    def test_fetch_failure_leaves_cache_unchanged(self, api, cache):
        cache.merge([row(1, 1, "2026-06-30", price_override=110)])
        api.get_availability = AsyncMock(side_effect=TransportError("boom", status_code=503))

        assert asyncio.run(cache.fetch_window("2026-07")) is False

        assert len(cache.records) == 1
        assert cache.get(date(2026, 6, 30), 1).price_override == Decimal("110")
        assert "2026-07" in cache.error
        assert cache.loading is False

    def test_invalid_month_token(self, api, cache):
        api.get_availability = AsyncMock()

        assert asyncio.run(cache.fetch_window("2026-13")) is False

        api.get_availability.assert_not_awaited()
        assert "2026-13" in cache.error
        assert cache.loading is False


class TestCoercion:

    @pytest.mark.parametrize("value,expected", [
        (True, True), (False, False), ("true", True), ("false", False),
        ("yes", False), (1, False), (None, False),
    ])
    def test_coerce_bool(self, value, expected):
        assert coerce_bool(value) is expected

    @pytest.mark.parametrize("value,expected", [
        ("10", Decimal("10")), (12.5, Decimal("12.5")), (None, None),
        ("", None), ("NaN", None), (True, None),
    ])
    def test_coerce_price(self, value, expected):
        assert coerce_price(value) == expected
