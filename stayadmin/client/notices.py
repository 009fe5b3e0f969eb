"""
Transient notices shown to the operator after an action.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

logger = logging.getLogger(__name__)

SUCCESS = "success"
ERROR = "error"
INFO = "info"


@dataclass
class Notice:
    kind: str
    message: str
    created_at: datetime = field(default_factory=datetime.utcnow)


class NoticeBoard:
    """Ordered log of notices; the UI layer drains it to show toasts."""

    def __init__(self):
        self._notices: List[Notice] = []

    def post(self, kind: str, message: str) -> Notice:
        notice = Notice(kind=kind, message=message)
        self._notices.append(notice)
        if kind == ERROR:
            logger.warning(message)
        else:
            logger.info(message)
        return notice

    def success(self, message: str) -> Notice:
        return self.post(SUCCESS, message)

    def error(self, message: str) -> Notice:
        return self.post(ERROR, message)

    def info(self, message: str) -> Notice:
        return self.post(INFO, message)

    @property
    def notices(self) -> List[Notice]:
        return list(self._notices)

    @property
    def latest(self) -> Optional[Notice]:
        return self._notices[-1] if self._notices else None

    def drain(self) -> List[Notice]:
        drained, self._notices = self._notices, []
        return drained
