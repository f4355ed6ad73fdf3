"""Notification sink and navigator used by the bill form in request scope"""

import logging
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class Notification:
    kind: str  # success | error
    message: str
    description: Optional[str] = None


class CollectingNotifier:
    """Keeps notifications so the API can return them with the response"""

    def __init__(self):
        self.notifications: List[Notification] = []

    def notify(self, kind: str, message: str, description: Optional[str] = None) -> None:
        self.notifications.append(Notification(kind=kind, message=message, description=description))
        level = logging.ERROR if kind == "error" else logging.INFO
        logging.log(level, f"Notification: {message}", extra={"kind": kind, "description": description})


class RedirectRecorder:
    """Records the redirect target chosen after a successful submit"""

    def __init__(self):
        self.path: Optional[str] = None

    def redirect(self, path: str) -> None:
        self.path = path
