"""Models for keyword and difficulty analysis results."""

from pydantic import BaseModel, Field


class DescriptionAnalysis(BaseModel):
    """Match terms extracted from a free-text pose description."""

    keywords: list[str]
    description: str | None = None


class ImageKeywords(BaseModel):
    """Descriptive keywords generated for a pose image."""

    keywords: list[str]


class DifficultyAnalysis(BaseModel):
    """Difficulty rating generated for a pose image."""

    difficulty_level: int = Field(ge=1, le=3)
    difficulty_reason: str
