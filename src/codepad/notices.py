"""Transient user-facing notices (the editor's toasts).

Notices never block and never change editor state.  They queue up until the
front end drains them.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List

logger = logging.getLogger(__name__)

NOTICE_DURATION_MS = 3000

_LOG_LEVELS = {
    "loading": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.WARNING,
}


@dataclass(frozen=True)
class Notice:
    level: str
    message: str
    duration_ms: int = NOTICE_DURATION_MS


class NoticeBoard:
    """Bounded FIFO of pending notices."""

    def __init__(self, maxlen: int = 50) -> None:
        self._pending: Deque[Notice] = deque(maxlen=maxlen)

    def post(self, level: str, message: str) -> Notice:
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unknown notice level: {level}")
        notice = Notice(level=level, message=message)
        self._pending.append(notice)
        logger.log(_LOG_LEVELS[level], "Notice (%s): %s", level, message)
        return notice

    def loading(self, message: str) -> Notice:
        return self.post("loading", message)

    def success(self, message: str) -> Notice:
        return self.post("success", message)

    def warning(self, message: str) -> Notice:
        return self.post("warning", message)

    def error(self, message: str) -> Notice:
        return self.post("error", message)

    def peek(self) -> List[Notice]:
        return list(self._pending)

    def drain(self) -> List[Notice]:
        notices = list(self._pending)
        self._pending.clear()
        return notices
