"""
User-facing feedback and navigation for storefront pages.

The storefront pages never print or redirect on their own: they push
notifications to a `Notifier` and routes to a `Navigator`, which a UI layer
(or a test) reads back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

logger = logging.getLogger(__name__)


class PageState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"


class NotificationLevel(str, Enum):
    ERROR = "error"
    SUCCESS = "success"


@dataclass(frozen=True)
class Notification:
    level: NotificationLevel
    message: str


class Notifier:
    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    def error(self, message: str) -> None:
        logger.warning("Notify error: %s", message)
        self.notifications.append(Notification(NotificationLevel.ERROR, message))

    def success(self, message: str) -> None:
        logger.info("Notify success: %s", message)
        self.notifications.append(Notification(NotificationLevel.SUCCESS, message))

    @property
    def errors(self) -> List[str]:
        return [n.message for n in self.notifications if n.level is NotificationLevel.ERROR]

    @property
    def successes(self) -> List[str]:
        return [n.message for n in self.notifications if n.level is NotificationLevel.SUCCESS]

    def last(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None

    def clear(self) -> None:
        self.notifications.clear()


class Navigator:
    """Route history; `push` is the only way pages redirect the user."""

    def __init__(self, start: str = "/") -> None:
        self.history: List[str] = [start]

    @property
    def current(self) -> str:
        return self.history[-1]

    def push(self, path: str) -> None:
        logger.info("Navigate: %s -> %s", self.current, path)
        self.history.append(path)
