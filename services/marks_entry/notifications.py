import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)

_LOG_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class Notification:
    title: str
    description: str = ""
    level: str = "info"


class Notifier:
    """Collects the transient messages (toasts) shown to the teacher"""

    def __init__(self):
        self.history: List[Notification] = []

    def notify(self, title: str, description: str = "", level: str = "info") -> Notification:
        note = Notification(title, description, level)
        logger.log(_LOG_LEVELS.get(level, logging.INFO), "%s %s", title, description)
        self.history.append(note)
        return note

    def success(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description, "success")

    def warning(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description, "warning")

    def error(self, title: str, description: str = "") -> Notification:
        return self.notify(title, description, "error")

    def drain(self) -> List[Notification]:
        notes, self.history = self.history, []
        return notes
