"""
Date-Range Selector

Turns calendar pointer gestures and typed dates into a {start, end} pair.

After every completed gesture start <= end holds; pointer_up() is the one
place a backwards drag gets swapped. Days beyond the selection horizon
cannot be picked.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ..config import settings
from ..utils.dates import selection_horizon
from .errors import ValidationError
from .validation import validate_date_range

logger = logging.getLogger(__name__)


@dataclass
class SelectionRange:
    start: Optional[date] = None
    end: Optional[date] = None

    @property
    def is_empty(self) -> bool:
        return self.start is None

    @property
    def is_closed(self) -> bool:
        return self.start is not None and self.end is not None


class DateRangeSelector:

    def __init__(self, today: Optional[Callable[[], date]] = None):
        self._today = today or date.today
        self.selection = SelectionRange()
        self.dragging = False
        self.error: Optional[str] = None

    @property
    def horizon(self) -> date:
        return selection_horizon(self._today(), months=settings.selection_horizon_months)

    def is_selectable(self, day: date) -> bool:
        return day <= self.horizon

    def pointer_down(self, day: date) -> None:
        if not self.is_selectable(day):
            return

        start, end = self.selection.start, self.selection.end
        if start is None or end is not None:
            # Fresh selection, or a click after a closed one
            self.selection = SelectionRange(day, None)
            self.dragging = True
        elif day == start:
            self.selection = SelectionRange(start, start)
        else:
            self.selection = SelectionRange(min(start, day), max(start, day))
        self.error = None

    def pointer_enter(self, day: date) -> None:
        if not self.dragging or self.selection.start is None:
            return
        if not self.is_selectable(day):
            return
        if self.selection.end is None and day == self.selection.start:
            return
        self.selection = SelectionRange(self.selection.start, day)

    def pointer_up(self) -> None:
        self.dragging = False
        start, end = self.selection.start, self.selection.end
        if start is not None and end is not None and start > end:
            self.selection = SelectionRange(end, start)

    def enter_dates(self, start, end) -> bool:
        """
        Accept a typed range after validation.
        A rejected range keeps the previous selection and sets error.
        """
        try:
            start_date, end_date = validate_date_range(start, end, today=self._today())
        except ValidationError as e:
            self.error = e.message
            logger.info(f"Rejected date range {start!r} - {end!r}: {e.message}")
            return False

        self.dragging = False
        self.selection = SelectionRange(start_date, end_date)
        self.error = None
        return True

    def clear(self) -> None:
        self.selection = SelectionRange()
        self.dragging = False
        self.error = None
