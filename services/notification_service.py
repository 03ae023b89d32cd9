import logging
from dataclasses import dataclass, field
from datetime import datetime

from utils.date_helpers import now_utc

logger = logging.getLogger(__name__)

_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
}


@dataclass
class Notification:
    message: str
    severity: str   # 'info' | 'warning' | 'error'
    created_at: datetime = field(default_factory=now_utc)


class LogNotifier:
    """Notification sink for headless runs: writes each notice to the log.

    Fire-and-forget; the last few notices are kept for callers that want to
    show them later.
    """

    def __init__(self, keep: int = 20):
        self._keep = keep
        self.recent: list[Notification] = []

    def notify(self, message: str, severity: str = "info") -> None:
        logger.log(_LEVELS.get(severity, logging.INFO), "%s", message)
        self.recent.append(Notification(message, severity))
        self.recent = self.recent[-self._keep:] if self._keep else []
