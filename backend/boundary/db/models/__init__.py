"""
Database models package.

Exports:
  - UserModel, UserRole, Gender: User profiles
  - ChallengeModel, ChallengeVisibility, CategoryModel: Challenge configuration
  - ActivityTypeModel: Scored activity types
  - ActivityModel, ActivityFlagHistoryModel and activity enums: Logged activities
  - ParticipationModel, ChallengeInviteModel and enums: Challenge membership
  - LikeModel, CommentModel, FollowModel, NotificationModel: Social graph
  - AchievementModel, UserAchievementModel, AchievementFrequency: Achievements
  - MiniGameModel, MiniGameParticipantModel and enums: Mini-games
  - ForumPostModel, ForumPostUpvoteModel: Forum

Dependencies: sqlalchemy, backend.boundary.db.base
System role: Database model definitions for domain entities
"""

from backend.boundary.db.models.user_model import Gender, UserModel, UserRole
from backend.boundary.db.models.challenge_model import (
    CategoryModel,
    ChallengeModel,
    ChallengeVisibility,
)
from backend.boundary.db.models.activity_type_model import ActivityTypeModel
from backend.boundary.db.models.activity_model import (
    ActivityFlagHistoryModel,
    ActivityModel,
    ActivitySource,
    CommentVisibility,
    FlagActionType,
    ResolutionStatus,
)
from backend.boundary.db.models.participation_model import (
    ChallengeInviteModel,
    ParticipationModel,
    ParticipationRole,
    PaymentStatus,
)
from backend.boundary.db.models.social_model import (
    CommentModel,
    FollowModel,
    LikeModel,
    NotificationModel,
)
from backend.boundary.db.models.achievement_model import (
    AchievementFrequency,
    AchievementModel,
    UserAchievementModel,
)
from backend.boundary.db.models.mini_game_model import (
    MiniGameModel,
    MiniGameParticipantModel,
    MiniGameStatus,
    MiniGameType,
)
from backend.boundary.db.models.forum_model import ForumPostModel, ForumPostUpvoteModel

__all__ = [
    "Gender",
    "UserModel",
    "UserRole",
    "CategoryModel",
    "ChallengeModel",
    "ChallengeVisibility",
    "ActivityTypeModel",
    "ActivityFlagHistoryModel",
    "ActivityModel",
    "ActivitySource",
    "CommentVisibility",
    "FlagActionType",
    "ResolutionStatus",
    "ChallengeInviteModel",
    "ParticipationModel",
    "ParticipationRole",
    "PaymentStatus",
    "CommentModel",
    "FollowModel",
    "LikeModel",
    "NotificationModel",
    "AchievementFrequency",
    "AchievementModel",
    "UserAchievementModel",
    "MiniGameModel",
    "MiniGameParticipantModel",
    "MiniGameStatus",
    "MiniGameType",
    "ForumPostModel",
    "ForumPostUpvoteModel",
]
