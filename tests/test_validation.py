"""
Tests for price and date-range validation
"""

import pytest
from datetime import date
from decimal import Decimal

from stayadmin.client.errors import ValidationError
from stayadmin.client.validation import validate_price, validate_date_range


class TestPriceValidation:

    @pytest.mark.parametrize("value,expected", [
        (150, Decimal("150")),
        ("99.5", Decimal("99.5")),
        (999, Decimal("999")),
        ("0.01", Decimal("0.01")),
    ])
    def test_accepts_prices_in_range(self, value, expected):
        assert validate_price(value) == expected

    @pytest.mark.parametrize("value", [0, -5, 1000, "1000.01"])
    def test_rejects_out_of_range(self, value):
        with pytest.raises(ValidationError) as exc:
            validate_price(value)
        assert exc.value.field == "price"
        assert "at most 999" in exc.value.message

    @pytest.mark.parametrize("value", ["abc", "", None])
    def test_rejects_non_numbers(self, value):
        with pytest.raises(ValidationError) as exc:
            validate_price(value)
        assert exc.value.message == "Price must be a number"


class TestDateRangeValidation:

    def test_same_day_range_is_valid(self):
        start, end = validate_date_range("2026-07-01", "2026-07-01", today=date(2026, 6, 1))
        assert start == end == date(2026, 7, 1)

    def test_end_before_start(self):
        with pytest.raises(ValidationError) as exc:
            validate_date_range(date(2026, 7, 2), date(2026, 7, 1), today=date(2026, 6, 1))
        assert exc.value.field == "end"

    def test_beyond_horizon(self):
        with pytest.raises(ValidationError) as exc:
            validate_date_range(date(2026, 7, 1), date(2027, 10, 2), today=date(2026, 6, 1))
        assert exc.value.field == "end"
        assert "2027-10-01" in exc.value.message

    def test_unparsable_date(self):
        with pytest.raises(ValidationError) as exc:
            validate_date_range("next tuesday", "2026-07-01", today=date(2026, 6, 1))
        assert exc.value.field == "start"
