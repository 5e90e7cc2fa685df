"""Services for managing the pose library."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pose_timer.domain.poses import Difficulty, Pose, unique_keywords
from pose_timer.services.keywords import KeywordService

logger = logging.getLogger(__name__)


class PoseRepository(Protocol):
    """Persistence interface for reference poses."""

    def list_poses(self) -> list[Pose]:
        """Return every pose in storage order."""

    def get_pose(self, pose_id: int) -> Pose | None:
        """Return a pose by id, if present."""

    def create_pose(self, image_url: str, keywords: list[str]) -> Pose:
        """Create a pose and return it."""

    def update_keywords(self, pose_id: int, keywords: list[str]) -> Pose | None:
        """Replace a pose's keywords and return it."""

    def update_difficulty(
        self, pose_id: int, difficulty: Difficulty, reason: str | None
    ) -> Pose | None:
        """Set a pose's difficulty and return it."""

    def list_by_difficulty(self, difficulty: Difficulty) -> list[Pose]:
        """Return poses with the given difficulty."""

    def delete_pose(self, pose_id: int) -> bool:
        """Delete a pose, returning whether it existed."""


@dataclass
class PoseLibraryService:
    """Application service for pose library operations."""

    repository: PoseRepository
    keyword_service: KeywordService

    def list_pool(self, difficulty: Difficulty | None = None) -> list[Pose]:
        """Return the pose pool, optionally restricted to one difficulty."""
        if difficulty is None:
            return self.repository.list_poses()
        return self.repository.list_by_difficulty(difficulty)

    def get_pose(self, pose_id: int) -> Pose | None:
        return self.repository.get_pose(pose_id)

    def create_pose(self, image_url: str, keywords: list[str] | None = None) -> Pose:
        return self.repository.create_pose(image_url, unique_keywords(keywords or []))

    def set_keywords(self, pose_id: int, keywords: list[str]) -> Pose | None:
        """Replace keywords, dropping blanks and duplicates."""
        return self.repository.update_keywords(pose_id, unique_keywords(keywords))

    def set_difficulty(
        self, pose_id: int, difficulty: Difficulty, reason: str | None = None
    ) -> Pose | None:
        return self.repository.update_difficulty(pose_id, difficulty, reason)

    def delete_pose(self, pose_id: int) -> bool:
        return self.repository.delete_pose(pose_id)

    async def generate_keywords(self, pose_id: int) -> Pose | None:
        """Ask the analysis service for keywords and store them on the pose."""
        pose = self.repository.get_pose(pose_id)
        if pose is None:
            return None
        keywords = await self.keyword_service.generate_keywords(pose.image_url)
        logger.info("Generated %d keywords for pose %s", len(keywords), pose_id)
        return self.set_keywords(pose_id, keywords)

    async def analyze_difficulty(self, pose_id: int) -> Pose | None:
        """Ask the analysis service for a difficulty rating and store it."""
        pose = self.repository.get_pose(pose_id)
        if pose is None:
            return None
        analysis = await self.keyword_service.analyze_difficulty(pose.image_url)
        return self.set_difficulty(
            pose_id,
            Difficulty(analysis.difficulty_level),
            analysis.difficulty_reason,
        )
