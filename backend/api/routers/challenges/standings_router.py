"""
Challenge standings and engagement API endpoints.

Routes:
- GET /challenges/{id}/leaderboard - Overall standings (cursor paginated)
- GET /challenges/{id}/leaderboard/weekly-categories - Weekly top per category
- GET /challenges/{id}/leaderboard/cumulative-categories - Top per category and gender
- GET /challenges/{id}/achievements - List achievements
- POST /challenges/{id}/achievements - Create achievement (challenge admins)
- GET /challenges/{id}/achievements/progress - Caller's progress
- GET /challenges/{id}/mini-games - List mini-games
- POST /challenges/{id}/mini-games - Create mini-game (challenge admins)
- GET /challenges/{id}/mini-games/active - Active mini-games
- GET /challenges/{id}/mini-games/status - Caller's role in active mini-games
- GET /challenges/{id}/mini-games/history - Caller's completed mini-games
- GET /challenges/{id}/forum - Top-level forum posts

Dependencies: backend.application.services, backend.models
System role: Leaderboard, achievement, mini-game and forum listing HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from backend.api.deps.dependencies import (
    get_achievement_service,
    get_current_user,
    get_forum_service,
    get_leaderboard_service,
    get_mini_game_service,
)
from backend.api.routers.router_utils import handle_domain_errors
from backend.application.services.achievement_service import AchievementService
from backend.application.services.forum_service import ForumService
from backend.application.services.leaderboard_service import LeaderboardService
from backend.application.services.mini_game_service import MiniGameService
from backend.boundary.db.models.user_model import UserModel
from backend.models.achievement import (
    AchievementProgressResponse,
    AchievementResponse,
    CreateAchievementRequest,
)
from backend.models.forum import ForumPostResponse
from backend.models.leaderboard import (
    CumulativeCategoryLeaderboardResponse,
    LeaderboardResponse,
    WeeklyCategoryLeaderboardResponse,
)
from backend.models.mini_game import (
    CreateMiniGameRequest,
    MiniGameHistoryResponse,
    MiniGameResponse,
    MiniGameUserStatusResponse,
)

from .challenge_validators import validate_week_number

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/challenges", tags=["standings"])


def _challenge_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Challenge not found")


@router.get("/{challenge_id}/leaderboard", response_model=LeaderboardResponse)
@handle_domain_errors
async def get_leaderboard(
    challenge_id: UUID,
    limit: int = 50,
    cursor: int | None = None,
    current_user: UserModel = Depends(get_current_user),
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    page = await leaderboard_service.get_leaderboard(challenge_id, limit=limit, cursor=cursor)
    return LeaderboardResponse(**page)


@router.get(
    "/{challenge_id}/leaderboard/weekly-categories",
    response_model=WeeklyCategoryLeaderboardResponse,
)
@handle_domain_errors
async def get_weekly_category_leaderboard(
    challenge_id: UUID,
    week_number: int | None = None,
    current_user: UserModel = Depends(get_current_user),
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service),
) -> WeeklyCategoryLeaderboardResponse:
    """
    Top scorers per category for one week.

    Args:
        week_number: Week to show; defaults to the current week and is
            clamped into the challenge's weeks

    Raises:
        HTTPException(404): Challenge not found
    """
    validate_week_number(week_number)
    board = await leaderboard_service.get_weekly_category_leaderboard(challenge_id, week_number)
    if board is None:
        raise _challenge_not_found()
    return WeeklyCategoryLeaderboardResponse(**board)


@router.get(
    "/{challenge_id}/leaderboard/cumulative-categories",
    response_model=CumulativeCategoryLeaderboardResponse,
)
@handle_domain_errors
async def get_cumulative_category_leaderboard(
    challenge_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service),
) -> CumulativeCategoryLeaderboardResponse:
    board = await leaderboard_service.get_cumulative_category_leaderboard(challenge_id)
    if board is None:
        raise _challenge_not_found()
    return CumulativeCategoryLeaderboardResponse(**board)


@router.get("/{challenge_id}/achievements", response_model=list[AchievementResponse])
@handle_domain_errors
async def list_achievements(
    challenge_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    achievement_service: AchievementService = Depends(get_achievement_service),
) -> list[AchievementResponse]:
    achievements = await achievement_service.list_achievements(challenge_id)
    return [AchievementResponse(**a) for a in achievements]


@router.post("/{challenge_id}/achievements", response_model=AchievementResponse, status_code=201)
@handle_domain_errors
async def create_achievement(
    challenge_id: UUID,
    request: CreateAchievementRequest,
    current_user: UserModel = Depends(get_current_user),
    achievement_service: AchievementService = Depends(get_achievement_service),
) -> AchievementResponse:
    logger.info(
        "Creating achievement",
        extra={"challenge_id": str(challenge_id), "achievement_name": request.name},
    )
    achievement = await achievement_service.create_achievement(
        current_user,
        challenge_id,
        name=request.name,
        criteria=request.criteria,
        bonus_points=request.bonus_points,
        description=request.description,
        frequency=request.frequency,
    )
    return AchievementResponse(**achievement)


@router.get(
    "/{challenge_id}/achievements/progress",
    response_model=list[AchievementProgressResponse],
)
@handle_domain_errors
async def get_achievement_progress(
    challenge_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    achievement_service: AchievementService = Depends(get_achievement_service),
) -> list[AchievementProgressResponse]:
    progress = await achievement_service.get_user_progress(current_user, challenge_id)
    return [AchievementProgressResponse(**p) for p in progress]


@router.get("/{challenge_id}/mini-games", response_model=list[MiniGameResponse])
@handle_domain_errors
async def list_mini_games(
    challenge_id: UUID,
    status: str | None = None,
    current_user: UserModel = Depends(get_current_user),
    mini_game_service: MiniGameService = Depends(get_mini_game_service),
) -> list[MiniGameResponse]:
    games = await mini_game_service.list_games(challenge_id, status=status)
    return [MiniGameResponse(**game) for game in games]


@router.post("/{challenge_id}/mini-games", response_model=MiniGameResponse, status_code=201)
@handle_domain_errors
async def create_mini_game(
    challenge_id: UUID,
    request: CreateMiniGameRequest,
    current_user: UserModel = Depends(get_current_user),
    mini_game_service: MiniGameService = Depends(get_mini_game_service),
) -> MiniGameResponse:
    logger.info(
        "Creating mini-game",
        extra={"challenge_id": str(challenge_id), "mini_game_type": request.type},
    )
    game = await mini_game_service.create(
        current_user,
        challenge_id,
        type=request.type,
        name=request.name,
        starts_at=request.starts_at,
        ends_at=request.ends_at,
        config=request.config,
    )
    return MiniGameResponse(**game)


@router.get("/{challenge_id}/mini-games/active", response_model=list[MiniGameResponse])
@handle_domain_errors
async def list_active_mini_games(
    challenge_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    mini_game_service: MiniGameService = Depends(get_mini_game_service),
) -> list[MiniGameResponse]:
    games = await mini_game_service.get_active(challenge_id)
    return [MiniGameResponse(**game) for game in games]


@router.get("/{challenge_id}/mini-games/status", response_model=list[MiniGameUserStatusResponse])
@handle_domain_errors
async def get_mini_game_status(
    challenge_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    mini_game_service: MiniGameService = Depends(get_mini_game_service),
) -> list[MiniGameUserStatusResponse]:
    statuses = await mini_game_service.get_user_status(current_user, challenge_id)
    return [MiniGameUserStatusResponse(**s) for s in statuses]


@router.get("/{challenge_id}/mini-games/history", response_model=list[MiniGameHistoryResponse])
@handle_domain_errors
async def get_mini_game_history(
    challenge_id: UUID,
    current_user: UserModel = Depends(get_current_user),
    mini_game_service: MiniGameService = Depends(get_mini_game_service),
) -> list[MiniGameHistoryResponse]:
    history = await mini_game_service.get_user_history(current_user, challenge_id)
    return [MiniGameHistoryResponse(**h) for h in history]


@router.get("/{challenge_id}/forum", response_model=list[ForumPostResponse])
@handle_domain_errors
async def list_forum_posts(
    challenge_id: UUID,
    limit: int = 50,
    offset: int = 0,
    current_user: UserModel = Depends(get_current_user),
    forum_service: ForumService = Depends(get_forum_service),
) -> list[ForumPostResponse]:
    posts = await forum_service.list_posts(current_user, challenge_id, limit=limit, offset=offset)
    return [ForumPostResponse(**post) for post in posts]
