"""Pose image download client."""

from dataclasses import dataclass

import httpx

from pose_timer.services.keywords import ImageFetcher


@dataclass
class HttpxImageClient(ImageFetcher):
    """Image fetcher using httpx."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(cls) -> "HttpxImageClient":
        """Create an image client with a managed httpx session."""
        return cls(http_client=httpx.AsyncClient(follow_redirects=True))

    async def fetch_bytes(self, image_url: str) -> bytes:
        """Download an image and return its bytes."""
        response = await self.http_client.get(image_url, timeout=20)
        response.raise_for_status()
        if not response.content:
            raise RuntimeError(f"Empty image at {image_url}")
        return response.content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
