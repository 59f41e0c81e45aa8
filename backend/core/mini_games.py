"""
Mini-game rules.

Three week-long games layered on top of a challenge:

- partner_week: rank i is paired with rank n-1-i and earns a percentage
  of the partner's points during the game
- hunt_week: each participant hunts the one ranked directly above and is
  hunted by the one directly below; passing or being passed moves points
- pr_week: beating your best pre-game daily total earns a fixed bonus

Dependencies: backend.core.scoring
System role: Pure pairing and outcome calculations for mini-games
"""

import math
from dataclasses import dataclass, field
from typing import Any, Sequence
from uuid import UUID

from backend.core.scoring import config_value, to_number

GAME_TYPES = ("partner_week", "hunt_week", "pr_week")
STATUSES = ("draft", "active", "calculating", "completed")

MISSING_RANK = 999

DEFAULT_CONFIGS: dict[str, dict[str, int]] = {
    "partner_week": {"bonus_percentage": 10},
    "hunt_week": {"catch_bonus": 75, "caught_penalty": 25},
    "pr_week": {"pr_bonus": 100},
}


@dataclass
class StartingSlot:
    """Participant assignment created when a game starts."""

    user_id: UUID
    rank: int
    points: float
    partner_user_id: UUID | None = None
    prey_user_id: UUID | None = None
    hunter_user_id: UUID | None = None

    @property
    def initial_state(self) -> dict[str, Any]:
        return {"rank": self.rank, "points": self.points}


@dataclass
class GameOutcome:
    bonus_points: int
    outcome: dict[str, Any] = field(default_factory=dict)
    description: str = ""


def js_round(value: float) -> int:
    """Round half up, matching the scores participants already see."""
    return math.floor(value + 0.5)


def default_config(game_type: str) -> dict[str, int]:
    return dict(DEFAULT_CONFIGS.get(game_type, {}))


def resolved_config(game_type: str, config: dict | None) -> dict[str, float]:
    """Merge a stored config over the defaults, accepting camelCase keys."""
    merged: dict[str, float] = {}
    for key, default in default_config(game_type).items():
        merged[key] = to_number(config_value(config or {}, key, default))
    return merged


def assign_slots(game_type: str, ranked: Sequence[tuple[UUID, float]]) -> list[StartingSlot]:
    """
    Build starting assignments from participants ordered by points desc.

    Args:
        game_type: One of GAME_TYPES
        ranked: (user_id, total_points), highest first

    Returns:
        list[StartingSlot]: One slot per participant with rank and pairing
    """
    n = len(ranked)
    slots = []
    for index, (user_id, points) in enumerate(ranked):
        slot = StartingSlot(user_id=user_id, rank=index + 1, points=points)
        if game_type == "partner_week":
            # Middle participant of an odd field pairs with themselves
            slot.partner_user_id = ranked[n - 1 - index][0]
        elif game_type == "hunt_week":
            slot.prey_user_id = ranked[index - 1][0] if index > 0 else None
            slot.hunter_user_id = ranked[index + 1][0] if index < n - 1 else None
        slots.append(slot)
    return slots


def partner_outcome(partner_points: float, bonus_percentage: float) -> GameOutcome:
    bonus = js_round(partner_points * (bonus_percentage / 100))
    return GameOutcome(
        bonus_points=bonus,
        outcome={"partner_week_points": partner_points},
        description=(
            f"Partner Week Bonus ({_fmt(bonus_percentage)}% of partner's "
            f"{_fmt(partner_points)} pts)"
        ),
    )


def hunt_outcome(
    current_rank: int,
    initial_rank: int,
    prey_rank: int | None,
    hunter_rank: int | None,
    catch_bonus: float,
    caught_penalty: float,
) -> GameOutcome:
    """
    Score a hunt from live ranks.

    `prey_rank`/`hunter_rank` are None when the participant had no prey
    (first place) or no hunter (last place).
    """
    caught_prey = prey_rank is not None and current_rank < prey_rank
    was_caught = hunter_rank is not None and hunter_rank < current_rank
    bonus = (catch_bonus if caught_prey else 0) - (caught_penalty if was_caught else 0)

    description = "Hunt Week: "
    if caught_prey and was_caught:
        description += f"Caught prey (+{_fmt(catch_bonus)}) but was caught (-{_fmt(caught_penalty)})"
    elif caught_prey:
        description += f"Caught prey! (+{_fmt(catch_bonus)})"
    elif was_caught:
        description += f"Was caught (-{_fmt(caught_penalty)})"

    return GameOutcome(
        bonus_points=js_round(bonus),
        outcome={
            "caught_prey": caught_prey,
            "was_caught": was_caught,
            "initial_rank": initial_rank,
            "final_rank": current_rank,
        },
        description=description,
    )


def pr_outcome(initial_pr: float, week_max_points: float, pr_bonus: float) -> GameOutcome:
    hit_pr = week_max_points > initial_pr
    return GameOutcome(
        bonus_points=js_round(pr_bonus) if hit_pr else 0,
        outcome={
            "initial_pr": initial_pr,
            "week_max_points": week_max_points,
            "hit_pr": hit_pr,
        },
        description=(
            f"PR Week: New daily PR! ({_fmt(week_max_points)} pts, "
            f"previous: {_fmt(initial_pr)} pts)"
        ),
    )


def rank_map(ranked_user_ids: Sequence[UUID]) -> dict[UUID, int]:
    return {user_id: index + 1 for index, user_id in enumerate(ranked_user_ids)}


def _fmt(value: float) -> str:
    """Render whole numbers without a trailing .0."""
    return str(int(value)) if float(value).is_integer() else str(value)
