"""User-visible, non-blocking notifications raised by the store and editor."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


class NotificationKind(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    kind: NotificationKind
    title: str
    subtitle: Optional[str] = None

    @classmethod
    def success(cls, title: str, subtitle: Optional[str] = None) -> "Notification":
        return cls(NotificationKind.SUCCESS, title, subtitle)

    @classmethod
    def warning(cls, title: str, subtitle: Optional[str] = None) -> "Notification":
        return cls(NotificationKind.WARNING, title, subtitle)

    @classmethod
    def error(cls, title: str, subtitle: Optional[str] = None) -> "Notification":
        return cls(NotificationKind.ERROR, title, subtitle)


Notifier = Callable[[Notification], None]
