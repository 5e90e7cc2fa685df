"""Timer session API endpoints."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Request, status

from pose_timer.api.models import (
    SessionAction,
    SessionCreateRequest,
    SessionResponse,
)
from pose_timer.domain.sessions import SessionConfiguration
from pose_timer.services.notifier import LoggingNotifier
from pose_timer.services.session import SessionController, build_session

if TYPE_CHECKING:
    from pose_timer.containers import AppContainer

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _controller(request: Request, session_id: UUID) -> SessionController:
    controller = _container(request).session_registry.get(session_id)
    if controller is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return controller


def _respond(session_id: UUID, controller: SessionController) -> SessionResponse:
    controller.tick()
    return SessionResponse.from_snapshot(session_id, controller.snapshot())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreateRequest, request: Request
) -> SessionResponse:
    """Select poses for a configuration and register a new session."""
    container = _container(request)
    settings = container.settings
    if payload.match_terms is not None:
        match_terms = payload.match_terms
    else:
        match_terms = await container.keyword_service.match_terms_for(
            payload.description
        )
    config = SessionConfiguration(
        pose_length_seconds=payload.pose_length_seconds,
        session_type=payload.session_type,
        pose_count=payload.pose_count,
        session_duration_minutes=payload.session_duration_minutes,
        match_terms=tuple(match_terms),
        playlist_id=payload.playlist_id,
    )
    pool = container.pose_library_service.list_pool(payload.difficulty_level)
    randomize = (
        settings.randomize_sessions if payload.randomize is None else payload.randomize
    )
    notifier = LoggingNotifier()
    controller = build_session(
        config,
        pool,
        randomize=randomize,
        notifier=notifier,
        now=container.now,
        scheduler=asyncio.get_running_loop() if container.schedule_ticks else None,
        tick_interval=settings.tick_interval_seconds,
        countdown_warning_seconds=settings.countdown_warning_seconds,
    )
    session_id = container.session_registry.add(controller)
    notifier.session_label = f"session {session_id}"
    if payload.autostart:
        controller.start()
    return _respond(session_id, controller)


@router.get("/{session_id}")
async def get_session(session_id: UUID, request: Request) -> SessionResponse:
    """Return the current readout of a session."""
    return _respond(session_id, _controller(request, session_id))


@router.post("/{session_id}/{action}")
async def control_session(
    session_id: UUID, action: SessionAction, request: Request
) -> SessionResponse:
    """Apply a playback control to a session."""
    controller = _controller(request, session_id)
    controller.tick()
    if action is SessionAction.START:
        controller.start()
    elif action is SessionAction.PAUSE:
        controller.pause()
    elif action is SessionAction.NEXT:
        controller.next()
    elif action is SessionAction.PREVIOUS:
        controller.previous()
    elif action is SessionAction.RESTART:
        controller.restart()
    return _respond(session_id, controller)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: UUID, request: Request) -> None:
    """Stop a session and cancel its pending ticks."""
    if not _container(request).session_registry.remove(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
