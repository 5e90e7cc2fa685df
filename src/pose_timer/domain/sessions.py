"""Domain models for timed drawing sessions."""

from dataclasses import dataclass
from enum import StrEnum

from pose_timer.domain.poses import Pose


class SessionType(StrEnum):
    """How the length of a session is specified."""

    COUNT = "count"
    DURATION = "duration"


@dataclass(frozen=True)
class SessionConfiguration:
    """Immutable settings for one drawing session."""

    pose_length_seconds: int
    session_type: SessionType = SessionType.COUNT
    pose_count: int = 10
    session_duration_minutes: int = 20
    match_terms: tuple[str, ...] = ()
    playlist_id: int | None = None

    @property
    def resolved_pose_count(self) -> int:
        """Number of poses the session should contain."""
        if self.session_type is SessionType.DURATION:
            if self.pose_length_seconds <= 0:
                return 1
            total_seconds = self.session_duration_minutes * 60
            return max(1, total_seconds // self.pose_length_seconds)
        return self.pose_count


@dataclass(frozen=True)
class SessionSnapshot:
    """Presentation readout for a running session."""

    current_pose: Pose | None
    position: int
    total: int
    remaining_seconds: int
    progress_percent: float
    is_running: bool
    is_completed: bool

    @property
    def remaining_display(self) -> str:
        """Remaining time formatted as mm:ss."""
        minutes, seconds = divmod(max(self.remaining_seconds, 0), 60)
        return f"{minutes:02d}:{seconds:02d}"
