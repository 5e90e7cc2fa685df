"""Keyword and difficulty analysis using LLMs."""

import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from pose_timer.domain.keywords import (
    DescriptionAnalysis,
    DifficultyAnalysis,
    ImageKeywords,
)
from pose_timer.domain.poses import unique_keywords

logger = logging.getLogger(__name__)

DEFAULT_MATCH_TERMS = ["standing", "figure", "pose"]

DESCRIPTION_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "keywords": {"type": "array", "items": {"type": "string"}},
        "description": {"anyOf": [{"type": "string"}, {"type": "null"}]},
    },
    "required": ["keywords", "description"],
    "additionalProperties": False,
}

IMAGE_KEYWORDS_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "keywords": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["keywords"],
    "additionalProperties": False,
}

DIFFICULTY_SCHEMA: dict[str, object] = {
    "type": "object",
    "properties": {
        "difficulty_level": {"type": "integer", "minimum": 1, "maximum": 3},
        "difficulty_reason": {"type": "string"},
    },
    "required": ["difficulty_level", "difficulty_reason"],
    "additionalProperties": False,
}

_DESCRIPTION_PROMPT = (
    "Extract keywords from this figure drawing pose description. "
    "Focus on body position, angle, gesture, mood, lighting and style. "
    "Return 8-10 specific keywords and a summary of 10 words or less.\n\n"
    "Description: {description}"
)

_IMAGE_KEYWORDS_PROMPT = (
    "Describe this figure drawing reference pose with 15-20 specific keywords "
    "covering body position, angle, perspective, gesture, expression, mood, "
    "lighting, dynamism and composition. The keywords are used to match the "
    "pose against user descriptions."
)

_DIFFICULTY_PROMPT = (
    "Rate how hard this figure drawing reference pose is to draw: "
    "1 for Easy, 2 for Medium, 3 for Hard. Consider foreshortening, overlapping "
    "forms, twisting and balance. Give a one-sentence reason."
)


class KeywordClient(Protocol):
    """Interface for structured LLM analysis."""

    async def analyze(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
        schema_name: str,
        image_data_url: str | None = None,
    ) -> dict[str, object]:
        """Return structured analysis data."""


class ImageFetcher(Protocol):
    """Interface for downloading pose images."""

    async def fetch_bytes(self, image_url: str) -> bytes:
        """Download an image and return its bytes."""


@dataclass
class KeywordService:
    """Service that derives match terms, keywords and difficulty ratings."""

    client: KeywordClient
    image_fetcher: ImageFetcher
    model: str
    reasoning_effort: str | None
    store: bool

    async def analyze_description(self, description: str) -> DescriptionAnalysis:
        """Extract match terms from a free-text description."""
        raw = await self.client.analyze(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=_DESCRIPTION_PROMPT.format(description=description.strip()),
            schema=DESCRIPTION_SCHEMA,
            schema_name="pose_description",
        )
        analysis = DescriptionAnalysis.model_validate(raw)
        analysis.keywords = unique_keywords(analysis.keywords)
        return analysis

    async def match_terms_for(self, description: str | None) -> list[str]:
        """Return match terms for a description, falling back to defaults."""
        if not description or not description.strip():
            return []
        try:
            analysis = await self.analyze_description(description)
        except Exception:
            logger.exception("Failed to analyze pose description")
            return list(DEFAULT_MATCH_TERMS)
        return analysis.keywords or list(DEFAULT_MATCH_TERMS)

    async def generate_keywords(self, image_url: str) -> list[str]:
        """Generate descriptive keywords for a pose image."""
        data_url = await self._image_data_url(image_url)
        raw = await self.client.analyze(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=_IMAGE_KEYWORDS_PROMPT,
            schema=IMAGE_KEYWORDS_SCHEMA,
            schema_name="pose_keywords",
            image_data_url=data_url,
        )
        return unique_keywords(ImageKeywords.model_validate(raw).keywords)

    async def analyze_difficulty(self, image_url: str) -> DifficultyAnalysis:
        """Rate the drawing difficulty of a pose image."""
        data_url = await self._image_data_url(image_url)
        raw = await self.client.analyze(
            model=self.model,
            reasoning_effort=self.reasoning_effort,
            store=self.store,
            prompt=_DIFFICULTY_PROMPT,
            schema=DIFFICULTY_SCHEMA,
            schema_name="pose_difficulty",
            image_data_url=data_url,
        )
        return DifficultyAnalysis.model_validate(raw)

    async def _image_data_url(self, image_url: str) -> str:
        if image_url.startswith("data:"):
            return image_url
        image_bytes = await self.image_fetcher.fetch_bytes(image_url)
        return _to_data_url(image_bytes)


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    if image_bytes[:6] in {b"GIF87a", b"GIF89a"}:
        return "image/gif"
    return "image/jpeg"
