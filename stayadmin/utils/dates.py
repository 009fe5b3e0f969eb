"""
Calendar date helpers shared by the API and the admin client.
"""

import calendar
import re
from datetime import date, timedelta
from typing import Iterator, Optional, Tuple

from dateutil.relativedelta import relativedelta

MONTH_TOKEN_RE = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")


def parse_month_token(token: str) -> Tuple[int, int]:
    """Parse a 'yyyy-MM' month token. Raises ValueError on anything else."""
    match = MONTH_TOKEN_RE.match(token or "")
    if not match:
        raise ValueError(f"Invalid month token: {token!r} (expected yyyy-MM)")
    return int(match.group(1)), int(match.group(2))


def month_bounds(token: str) -> Tuple[date, date]:
    """First and last calendar day of the month named by token."""
    year, month = parse_month_token(token)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def month_token(day: date) -> str:
    return day.strftime("%Y-%m")


def each_day(start: date, end: date) -> Iterator[date]:
    """Every day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def selection_horizon(today: Optional[date] = None, months: int = 16) -> date:
    """Farthest selectable day: today plus the given number of months."""
    return (today or date.today()) + relativedelta(months=months)
