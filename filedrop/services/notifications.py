from __future__ import annotations

import logging
from collections import deque
from dataclasses import asdict, dataclass
from datetime import datetime, timezone

from filedrop.core.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    level: str
    message: str
    created_at: str


class NotificationSink:
    """
    Fire-and-forget user notifications.
    Keeps the last N messages in memory; the UI polls GET /notifications.
    """

    def __init__(self, maxlen: int):
        self._items: deque[Notification] = deque(maxlen=maxlen)

    def error(self, message: str) -> None:
        self._push("error", message)

    def info(self, message: str) -> None:
        self._push("info", message)

    def _push(self, level: str, message: str) -> None:
        self._items.append(
            Notification(
                level=level,
                message=message,
                created_at=datetime.now(timezone.utc).isoformat(),
            )
        )
        logger.debug("notify level=%s message=%s", level, message)

    def recent(self) -> list[dict]:
        return [asdict(n) for n in self._items]

    def clear(self) -> None:
        self._items.clear()


def default_notification_sink() -> NotificationSink:
    return NotificationSink(settings.NOTIFICATION_BUFFER_SIZE)
