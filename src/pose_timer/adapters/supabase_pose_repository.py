"""Supabase implementation for the pose library."""

from dataclasses import dataclass

from supabase import Client

from pose_timer.domain.poses import Difficulty, Pose, unique_keywords
from pose_timer.services.poses import PoseRepository


@dataclass
class SupabasePoseRepository(PoseRepository):
    """Supabase-backed repository for reference poses."""

    client: Client
    table: str = "poses"

    def list_poses(self) -> list[Pose]:
        """Return every pose ordered by id."""
        response = self.client.table(self.table).select("*").order("id").execute()
        return [_parse_pose(row) for row in response.data or []]

    def get_pose(self, pose_id: int) -> Pose | None:
        """Return a pose by id, if present."""
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("id", pose_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_pose(response.data[0])

    def create_pose(self, image_url: str, keywords: list[str]) -> Pose:
        """Create a pose and return it."""
        response = (
            self.client.table(self.table)
            .insert({"url": image_url, "keywords": keywords})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create pose")
        return _parse_pose(response.data[0])

    def update_keywords(self, pose_id: int, keywords: list[str]) -> Pose | None:
        """Replace a pose's keywords and return it."""
        response = (
            self.client.table(self.table)
            .update({"keywords": keywords})
            .eq("id", pose_id)
            .execute()
        )
        if not response.data:
            return None
        return _parse_pose(response.data[0])

    def update_difficulty(
        self, pose_id: int, difficulty: Difficulty, reason: str | None
    ) -> Pose | None:
        """Set a pose's difficulty and return it."""
        response = (
            self.client.table(self.table)
            .update(
                {
                    "difficulty_level": int(difficulty),
                    "difficulty_reason": reason,
                }
            )
            .eq("id", pose_id)
            .execute()
        )
        if not response.data:
            return None
        return _parse_pose(response.data[0])

    def list_by_difficulty(self, difficulty: Difficulty) -> list[Pose]:
        """Return poses with the given difficulty."""
        response = (
            self.client.table(self.table)
            .select("*")
            .eq("difficulty_level", int(difficulty))
            .order("id")
            .execute()
        )
        return [_parse_pose(row) for row in response.data or []]

    def delete_pose(self, pose_id: int) -> bool:
        """Delete a pose, returning whether it existed."""
        response = self.client.table(self.table).delete().eq("id", pose_id).execute()
        return bool(response.data)


def _parse_pose(row: dict[str, object]) -> Pose:
    """Parse a pose row into a domain model.

    Rows from before keyword matching carry a ``category`` column; it is
    treated as one more keyword.
    """
    raw_keywords = row.get("keywords")
    keywords = [str(k) for k in raw_keywords] if isinstance(raw_keywords, list) else []
    category = row.get("category")
    if isinstance(category, str) and category:
        keywords.append(category)
    reason = row.get("difficulty_reason")
    return Pose(
        id=int(row["id"]),
        image_url=str(row.get("url", "")),
        keywords=tuple(unique_keywords(keywords)),
        difficulty=Difficulty.from_level(row.get("difficulty_level")),
        difficulty_reason=str(reason) if reason else None,
    )
