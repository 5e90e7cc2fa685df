"""Domain models for the pose library."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import IntEnum


class Difficulty(IntEnum):
    """Difficulty classification stored as a numeric level."""

    EASY = 1
    MEDIUM = 2
    HARD = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_level(cls, level: object) -> "Difficulty | None":
        """Parse a stored level, returning None for unknown values."""
        if isinstance(level, bool) or not isinstance(level, int | str):
            return None
        try:
            return cls(int(level))
        except ValueError:
            return None


@dataclass(frozen=True)
class Pose:
    """A reference pose image with its descriptive keywords."""

    id: int
    image_url: str
    keywords: tuple[str, ...] = ()
    difficulty: Difficulty | None = None
    difficulty_reason: str | None = None


@dataclass(frozen=True)
class ScoredPose:
    """A pose paired with its relevance score during ranking."""

    pose: Pose
    score: int = field(default=0)


def unique_keywords(keywords: Iterable[str]) -> list[str]:
    """Strip keywords and drop blanks and exact duplicates, keeping order."""
    seen: set[str] = set()
    result: list[str] = []
    for keyword in keywords:
        value = keyword.strip()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result
