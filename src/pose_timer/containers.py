"""Dependency container wiring for the application."""

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from pose_timer.adapters.image_client import HttpxImageClient
from pose_timer.adapters.openai_keyword_client import OpenAIKeywordClient
from pose_timer.adapters.supabase_pose_repository import SupabasePoseRepository
from pose_timer.config import Settings
from pose_timer.services.keywords import KeywordService
from pose_timer.services.poses import PoseLibraryService
from pose_timer.services.registry import SessionRegistry


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    keyword_service: KeywordService
    pose_library_service: PoseLibraryService
    session_registry: SessionRegistry
    close_resources: Callable[[], Awaitable[None]]
    now: Callable[[], float] = time.monotonic
    schedule_ticks: bool = True


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    pose_repository = SupabasePoseRepository(
        supabase_client, table=resolved_settings.poses_table
    )
    openai_client = OpenAIKeywordClient.create(resolved_settings.openai_api_key)
    image_client = HttpxImageClient.create()
    keyword_service = KeywordService(
        client=openai_client,
        image_fetcher=image_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    pose_library_service = PoseLibraryService(
        repository=pose_repository,
        keyword_service=keyword_service,
    )
    session_registry = SessionRegistry(
        ttl_seconds=resolved_settings.session_ttl_seconds,
        completed_ttl_seconds=resolved_settings.completed_session_ttl_seconds,
    )

    async def close_resources() -> None:
        session_registry.close_all()
        await image_client.close()
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        keyword_service=keyword_service,
        pose_library_service=pose_library_service,
        session_registry=session_registry,
        close_resources=close_resources,
    )
