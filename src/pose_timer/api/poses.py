"""Pose library API endpoints."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, HTTPException, Request, status

from pose_timer.api.models import (
    DescriptionRequest,
    DifficultyUpdateRequest,
    KeywordsUpdateRequest,
    PoseCreateRequest,
    PoseModel,
)
from pose_timer.domain.poses import Difficulty

if TYPE_CHECKING:
    from pose_timer.containers import AppContainer
    from pose_timer.domain.poses import Pose

logger = logging.getLogger(__name__)

router = APIRouter(tags=["poses"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _found(pose: Pose | None) -> PoseModel:
    if pose is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return PoseModel.from_pose(pose)


@router.get("/poses")
async def list_poses(
    request: Request, difficulty: int | None = None
) -> dict[str, list[PoseModel]]:
    """Return the pose pool, optionally filtered by difficulty level."""
    level = None
    if difficulty is not None:
        level = Difficulty.from_level(difficulty)
        if level is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="difficulty must be 1, 2 or 3",
            )
    poses = _container(request).pose_library_service.list_pool(level)
    return {"poses": [PoseModel.from_pose(pose) for pose in poses]}


@router.post("/poses", status_code=status.HTTP_201_CREATED)
async def create_pose(payload: PoseCreateRequest, request: Request) -> PoseModel:
    """Add a pose to the library."""
    pose = _container(request).pose_library_service.create_pose(
        payload.image_url, payload.keywords
    )
    return PoseModel.from_pose(pose)


@router.get("/poses/{pose_id}")
async def get_pose(pose_id: int, request: Request) -> PoseModel:
    return _found(_container(request).pose_library_service.get_pose(pose_id))


@router.put("/poses/{pose_id}/keywords")
async def update_keywords(
    pose_id: int, payload: KeywordsUpdateRequest, request: Request
) -> PoseModel:
    """Replace a pose's keywords."""
    service = _container(request).pose_library_service
    return _found(service.set_keywords(pose_id, payload.keywords))


@router.post("/poses/{pose_id}/generate-keywords")
async def generate_keywords(pose_id: int, request: Request) -> PoseModel:
    """Generate keywords for a pose image with the analysis service."""
    service = _container(request).pose_library_service
    try:
        pose = await service.generate_keywords(pose_id)
    except Exception as exc:
        logger.exception("Keyword generation failed for pose %s", pose_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY) from exc
    return _found(pose)


@router.put("/poses/{pose_id}/difficulty")
async def update_difficulty(
    pose_id: int, payload: DifficultyUpdateRequest, request: Request
) -> PoseModel:
    """Set a pose's difficulty by hand."""
    service = _container(request).pose_library_service
    return _found(
        service.set_difficulty(
            pose_id, payload.difficulty_level, payload.difficulty_reason
        )
    )


@router.post("/poses/{pose_id}/analyze-difficulty")
async def analyze_difficulty(pose_id: int, request: Request) -> PoseModel:
    """Rate a pose's difficulty with the analysis service."""
    service = _container(request).pose_library_service
    try:
        pose = await service.analyze_difficulty(pose_id)
    except Exception as exc:
        logger.exception("Difficulty analysis failed for pose %s", pose_id)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY) from exc
    return _found(pose)


@router.delete("/poses/{pose_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_pose(pose_id: int, request: Request) -> None:
    if not _container(request).pose_library_service.delete_pose(pose_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)


@router.post("/keywords/analyze")
async def analyze_description(
    payload: DescriptionRequest, request: Request
) -> dict[str, list[str]]:
    """Turn a free-text description into match terms."""
    terms = await _container(request).keyword_service.match_terms_for(
        payload.description
    )
    return {"keywords": terms}
