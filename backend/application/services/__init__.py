"""Service orchestrators."""

from .achievement_service import AchievementService
from .activity_service import ActivityService
from .activity_type_service import ActivityTypeService, CategoryService
from .admin_service import AdminService
from .challenge_service import ChallengeService
from .forum_service import ForumService
from .leaderboard_service import LeaderboardService
from .mini_game_service import MiniGameService
from .notification_service import NotificationService
from .participation_service import ParticipationService
from .social_service import SocialService
from .user_service import UserService

__all__ = [
    "AchievementService",
    "ActivityService",
    "ActivityTypeService",
    "AdminService",
    "CategoryService",
    "ChallengeService",
    "ForumService",
    "LeaderboardService",
    "MiniGameService",
    "NotificationService",
    "ParticipationService",
    "SocialService",
    "UserService",
]
