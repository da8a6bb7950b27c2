"""
User feedback channel.

A transient notification surface that receives exactly one success or
failure message per submission attempt. Publishing a second notification
for an attempt that already has one is dropped.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Set

SUCCESS = 'success'
ERROR = 'error'


@dataclass(frozen=True)
class Notification:
    attempt: int
    category: str
    message: str

    def to_dict(self) -> dict:
        return {'category': self.category, 'message': self.message}


class NotificationChannel(ABC):
    """Base channel: de-duplicates per attempt, subclasses deliver."""

    def __init__(self):
        self._seen: Set[int] = set()

    def publish(self, notification: Notification) -> bool:
        """Deliver ``notification`` unless its attempt already has one."""
        if notification.attempt in self._seen:
            return False
        self._seen.add(notification.attempt)
        self.deliver(notification)
        return True

    @abstractmethod
    def deliver(self, notification: Notification) -> None:
        """Show ``notification`` to the user."""


class CollectingChannel(NotificationChannel):
    """Keeps delivered notifications in memory, newest last."""

    def __init__(self):
        super().__init__()
        self.notifications: List[Notification] = []

    def deliver(self, notification: Notification) -> None:
        self.notifications.append(notification)

    @property
    def last(self) -> Optional[Notification]:
        return self.notifications[-1] if self.notifications else None


class Navigator:
    """Records the navigation requested after a successful submission."""

    def __init__(self):
        self.target: Optional[str] = None

    def __call__(self, target: str) -> None:
        self.target = target
