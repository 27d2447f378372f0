from typing import Optional

from pydantic import BaseModel


class BadgeRead(BaseModel):
    miles: float
    label: str      # e.g. "10 miles"
    earned: bool
    is_next: bool


class ScopeProgress(BaseModel):
    """Progress of one total (group-wide or personal) against its goal."""

    total: float
    goal: float
    total_display: str   # "123.40"
    goal_display: str
    fraction: float      # clamped to [0, 1]
    percent: float       # fraction * 100, 1 decimal
    next_milestone: Optional[float] = None
    goal_reached: bool
    badges: list[BadgeRead]


class CelebrationRead(BaseModel):
    scope: str   # "group" or "mine"
    kind: str    # "badge" or "goal"
    miles: float
    message: str


class GroupProgress(BaseModel):
    group_id: str
    group_name: str
    group: ScopeProgress
    mine: ScopeProgress
    celebrations: list[CelebrationRead] = []


class GroupBadges(BaseModel):
    group_id: str
    group_name: str
    group: list[BadgeRead]
    mine: list[BadgeRead]
    group_goal_reached: bool
    my_goal_reached: bool
