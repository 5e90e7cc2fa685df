"""Notification hooks fired at session transitions."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pose_timer.domain.poses import Pose


class SessionNotifier(Protocol):
    """Receives session transition events, e.g. to play a sound."""

    def pose_changed(self, position: int, pose: Pose) -> None:
        """Called when a new pose becomes current (0-based position)."""

    def countdown(self, seconds_left: int) -> None:
        """Called once per second while the pose is about to end."""

    def session_completed(self) -> None:
        """Called when the last pose has finished."""


class NullNotifier(SessionNotifier):
    """Notifier that ignores every event."""

    def pose_changed(self, position: int, pose: Pose) -> None:
        return None

    def countdown(self, seconds_left: int) -> None:
        return None

    def session_completed(self) -> None:
        return None


@dataclass
class LoggingNotifier(SessionNotifier):
    """Notifier that writes session events to the application log."""

    session_label: str = "session"

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def pose_changed(self, position: int, pose: Pose) -> None:
        self._logger.info(
            "%s: pose %d is now %s", self.session_label, position + 1, pose.id
        )

    def countdown(self, seconds_left: int) -> None:
        self._logger.debug("%s: %ds left", self.session_label, seconds_left)

    def session_completed(self) -> None:
        self._logger.info("%s: completed", self.session_label)
