"""
Mini-game API endpoints.

Routes:
- GET /mini-games/{id} - Mini-game with participants
- PATCH /mini-games/{id} - Edit a draft mini-game
- DELETE /mini-games/{id} - Delete a draft mini-game
- POST /mini-games/{id}/start - Assign participants and start
- POST /mini-games/{id}/end - Compute outcomes and award bonuses

Creation and listing live under /challenges/{id}/mini-games.

Dependencies: backend.application.services, backend.models
System role: Mini-game lifecycle HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends

from backend.api.deps.dependencies import get_current_user, get_mini_game_service
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.mini_game_service import MiniGameService
from backend.boundary.db.models.user_model import UserModel
from backend.models.mini_game import (
    MiniGameDetailResponse,
    MiniGameResponse,
    UpdateMiniGameRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mini-games", tags=["mini-games"])


@router.get("/{mini_game_id}", response_model=MiniGameDetailResponse)
@handle_domain_errors
async def get_mini_game(
    mini_game_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    mini_game_service: MiniGameService = Depends(get_mini_game_service),
) -> MiniGameDetailResponse:
    game = await mini_game_service.get(mini_game_id)
    return MiniGameDetailResponse(**game)


@router.patch("/{mini_game_id}", response_model=MiniGameResponse)
@handle_domain_errors
async def update_mini_game(
    mini_game_id: UUID,
    request: UpdateMiniGameRequest,
    current_user: UserModel = Depends(get_current_user),
    mini_game_service: MiniGameService = Depends(get_mini_game_service),
) -> MiniGameResponse:
    game = await mini_game_service.update(
        current_user,
        mini_game_id,
        name=request.name,
        starts_at=request.starts_at,
        ends_at=request.ends_at,
        config=request.config,
    )
    return MiniGameResponse(**game)


@router.delete("/{mini_game_id}", status_code=204)
@handle_domain_errors
async def delete_mini_game(
    mini_game_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    mini_game_service: MiniGameService = Depends(get_mini_game_service),
) -> None:
    await mini_game_service.remove(current_user, mini_game_id)


@router.post("/{mini_game_id}/start", response_model=MiniGameDetailResponse)
@handle_domain_errors
async def start_mini_game(
    mini_game_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    mini_game_service: MiniGameService = Depends(get_mini_game_service),
) -> MiniGameDetailResponse:
    """
    Start a draft mini-game.

    Raises:
        HTTPException(400): Challenge has no participants
        HTTPException(409): Game is not a draft
    """
    logger.info("Starting mini-game", extra={"mini_game_id": str(mini_game_id)})
    await mini_game_service.start(current_user, mini_game_id)
    game = await mini_game_service.get(mini_game_id)
    return MiniGameDetailResponse(**game)


@router.post("/{mini_game_id}/end", response_model=MiniGameDetailResponse)
@handle_domain_errors
async def end_mini_game(
    mini_game_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    mini_game_service: MiniGameService = Depends(get_mini_game_service),
) -> MiniGameDetailResponse:
    logger.info("Ending mini-game", extra={"mini_game_id": str(mini_game_id)})
    game = await mini_game_service.end(current_user, mini_game_id)
    return MiniGameDetailResponse(**game)
