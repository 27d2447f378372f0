"""Group schemas, including the decoders for aggregate query rows.

Rows coming out of the stats/leaderboard/feed queries are validated here
before any number reaches the milestone math: totals must be finite numbers,
and a missing or non-positive goal is replaced by the default goal.
"""
import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import DEFAULT_GOAL_MILES, MAX_GOAL_MILES
from app.core.milestones import goal_or_default


class GroupRead(BaseModel):
    id: str
    name: str
    join_code: str
    goal_miles: float
    owner_id: str

    model_config = ConfigDict(from_attributes=True)


class GroupCreate(BaseModel):
    name: str
    goal_miles: float = Field(default=DEFAULT_GOAL_MILES, allow_inf_nan=False, le=MAX_GOAL_MILES)


class JoinGroupRequest(BaseModel):
    code: str


class JoinGroupResult(BaseModel):
    group_id: str


class GroupStats(BaseModel):
    group_id: str
    group_name: str
    goal_miles: float = DEFAULT_GOAL_MILES
    group_total: float = Field(default=0.0, allow_inf_nan=False)
    my_total: float = Field(default=0.0, allow_inf_nan=False)
    my_goal: float = DEFAULT_GOAL_MILES

    @field_validator("goal_miles", "my_goal", mode="before")
    @classmethod
    def _goal_or_default(cls, v):
        return goal_or_default(v)

    @field_validator("group_total", "my_total", mode="before")
    @classmethod
    def _none_to_zero(cls, v):
        return 0.0 if v is None else v


class LeaderRow(BaseModel):
    user_id: str
    display_name: str
    total_miles: float = Field(default=0.0, allow_inf_nan=False)

    @field_validator("total_miles", mode="before")
    @classmethod
    def _none_to_zero(cls, v):
        return 0.0 if v is None else v


class FeedRow(BaseModel):
    entry_id: str
    date: dt.date
    miles: float = Field(allow_inf_nan=False)
    notes: Optional[str] = None
    user_id: str
    display_name: str
    created_at: Optional[dt.datetime] = None
