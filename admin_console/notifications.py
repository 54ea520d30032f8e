"""
Notification Module

User-facing notices raised by controllers (success, info, error). Notices are
non-blocking: emitting one never interrupts the operation that raised it.
Rendering them (toasts, banners) is the front end's job.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional


class NoticeLevel(Enum):
    """Severity of a notice"""
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Notice:
    """A single user-facing notice"""
    level: NoticeLevel
    message: str
    title: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "message": self.message,
            "title": self.title,
            "created_at": self.created_at.isoformat()
        }


class Notifier(ABC):
    """Abstract sink for notices"""

    @abstractmethod
    def notify(self, notice: Notice) -> None:
        """Deliver a notice"""
        pass

    def success(self, message: str, title: Optional[str] = None) -> None:
        self.notify(Notice(NoticeLevel.SUCCESS, message, title))

    def info(self, message: str, title: Optional[str] = None) -> None:
        self.notify(Notice(NoticeLevel.INFO, message, title))

    def warning(self, message: str, title: Optional[str] = None) -> None:
        self.notify(Notice(NoticeLevel.WARNING, message, title))

    def error(self, message: str, title: Optional[str] = None) -> None:
        self.notify(Notice(NoticeLevel.ERROR, message, title))


class LogNotifier(Notifier):
    """Writes notices to the log instead of showing them"""

    _levels = {
        NoticeLevel.SUCCESS: logging.INFO,
        NoticeLevel.INFO: logging.INFO,
        NoticeLevel.WARNING: logging.WARNING,
        NoticeLevel.ERROR: logging.ERROR,
    }

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("admin_console.notices")

    def notify(self, notice: Notice) -> None:
        self.logger.log(self._levels[notice.level], f"[{notice.level.value}] {notice.message}")


class InAppNotifier(Notifier):
    """Keeps notices in memory so a front end can drain them"""

    def __init__(self, max_notices: int = 100):
        self.max_notices = max_notices
        self._notices: List[Notice] = []

    def notify(self, notice: Notice) -> None:
        self._notices.append(notice)
        if len(self._notices) > self.max_notices:
            del self._notices[:-self.max_notices]

    @property
    def notices(self) -> List[Notice]:
        return list(self._notices)

    def latest(self) -> Optional[Notice]:
        return self._notices[-1] if self._notices else None

    def drain(self) -> List[Notice]:
        """Return and clear pending notices"""
        notices, self._notices = self._notices, []
        return notices
