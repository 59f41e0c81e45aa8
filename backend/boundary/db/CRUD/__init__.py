"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from backend.boundary.db.CRUD import activity_crud, participation_crud

    # Use singleton instances
    activity = await activity_crud.get_active(db, activity_id)

    # Or instantiate classes directly for custom behavior
    from backend.boundary.db.CRUD import ActivityCRUD
    custom_crud = ActivityCRUD()
"""

from backend.boundary.db.CRUD.base_crud import BaseCRUD
from backend.boundary.db.CRUD.user_crud import UserCRUD, user_crud
from backend.boundary.db.CRUD.challenge_crud import (
    CategoryCRUD,
    ChallengeCRUD,
    category_crud,
    challenge_crud,
)
from backend.boundary.db.CRUD.activity_type_crud import ActivityTypeCRUD, activity_type_crud
from backend.boundary.db.CRUD.activity_crud import (
    ActivityCRUD,
    ActivityFlagHistoryCRUD,
    activity_crud,
    activity_flag_history_crud,
)
from backend.boundary.db.CRUD.participation_crud import (
    ChallengeInviteCRUD,
    ParticipationCRUD,
    challenge_invite_crud,
    participation_crud,
)
from backend.boundary.db.CRUD.social_crud import (
    CommentCRUD,
    FollowCRUD,
    LikeCRUD,
    NotificationCRUD,
    comment_crud,
    follow_crud,
    like_crud,
    notification_crud,
)
from backend.boundary.db.CRUD.achievement_crud import (
    AchievementCRUD,
    UserAchievementCRUD,
    achievement_crud,
    user_achievement_crud,
)
from backend.boundary.db.CRUD.mini_game_crud import (
    MiniGameCRUD,
    MiniGameParticipantCRUD,
    mini_game_crud,
    mini_game_participant_crud,
)
from backend.boundary.db.CRUD.forum_crud import (
    ForumPostCRUD,
    ForumPostUpvoteCRUD,
    forum_post_crud,
    forum_post_upvote_crud,
)

__all__ = [
    "BaseCRUD",
    "UserCRUD",
    "user_crud",
    "CategoryCRUD",
    "ChallengeCRUD",
    "category_crud",
    "challenge_crud",
    "ActivityTypeCRUD",
    "activity_type_crud",
    "ActivityCRUD",
    "ActivityFlagHistoryCRUD",
    "activity_crud",
    "activity_flag_history_crud",
    "ChallengeInviteCRUD",
    "ParticipationCRUD",
    "challenge_invite_crud",
    "participation_crud",
    "CommentCRUD",
    "FollowCRUD",
    "LikeCRUD",
    "NotificationCRUD",
    "comment_crud",
    "follow_crud",
    "like_crud",
    "notification_crud",
    "AchievementCRUD",
    "UserAchievementCRUD",
    "achievement_crud",
    "user_achievement_crud",
    "MiniGameCRUD",
    "MiniGameParticipantCRUD",
    "mini_game_crud",
    "mini_game_participant_crud",
    "ForumPostCRUD",
    "ForumPostUpvoteCRUD",
    "forum_post_crud",
    "forum_post_upvote_crud",
]
