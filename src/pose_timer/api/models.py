"""Pydantic models for HTTP request and response payloads."""

from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, Field

from pose_timer.domain.poses import Difficulty, Pose
from pose_timer.domain.sessions import SessionSnapshot, SessionType


class PoseModel(BaseModel):
    """Pose payload."""

    id: int
    image_url: str
    keywords: list[str]
    difficulty_level: int | None = None
    difficulty_label: str | None = None
    difficulty_reason: str | None = None

    @classmethod
    def from_pose(cls, pose: Pose) -> "PoseModel":
        return cls(
            id=pose.id,
            image_url=pose.image_url,
            keywords=list(pose.keywords),
            difficulty_level=int(pose.difficulty) if pose.difficulty else None,
            difficulty_label=pose.difficulty.label if pose.difficulty else None,
            difficulty_reason=pose.difficulty_reason,
        )


class PoseCreateRequest(BaseModel):
    """Request to add a pose to the library."""

    image_url: str = Field(min_length=1)
    keywords: list[str] = Field(default_factory=list)


class KeywordsUpdateRequest(BaseModel):
    """Request to replace a pose's keywords."""

    keywords: list[str]


class DifficultyUpdateRequest(BaseModel):
    """Request to set a pose's difficulty by hand."""

    difficulty_level: Difficulty
    difficulty_reason: str | None = None


class DescriptionRequest(BaseModel):
    """Free-text pose description to turn into match terms."""

    description: str = Field(min_length=1)


class SessionCreateRequest(BaseModel):
    """Session configuration as submitted by the setup screen."""

    pose_length_seconds: int = Field(ge=5, le=1800)
    session_type: SessionType = SessionType.COUNT
    pose_count: int = Field(default=10, ge=1, le=100)
    session_duration_minutes: int = Field(default=20, ge=1, le=360)
    match_terms: list[str] | None = None
    description: str | None = None
    difficulty_level: Difficulty | None = None
    playlist_id: int | None = None
    randomize: bool | None = None
    autostart: bool = False


class SessionAction(StrEnum):
    """Controls available on a running session."""

    START = "start"
    PAUSE = "pause"
    NEXT = "next"
    PREVIOUS = "previous"
    RESTART = "restart"


class SessionResponse(BaseModel):
    """Session readout for the timer screen."""

    id: UUID
    current_pose: PoseModel | None
    position: int
    total: int
    remaining_seconds: int
    remaining_display: str
    progress_percent: float
    is_running: bool
    is_completed: bool

    @classmethod
    def from_snapshot(
        cls, session_id: UUID, snapshot: SessionSnapshot
    ) -> "SessionResponse":
        pose = snapshot.current_pose
        return cls(
            id=session_id,
            current_pose=PoseModel.from_pose(pose) if pose else None,
            position=snapshot.position,
            total=snapshot.total,
            remaining_seconds=snapshot.remaining_seconds,
            remaining_display=snapshot.remaining_display,
            progress_percent=round(snapshot.progress_percent, 2),
            is_running=snapshot.is_running,
            is_completed=snapshot.is_completed,
        )
