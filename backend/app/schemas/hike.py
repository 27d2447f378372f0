from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MAX_HIKE_DISTANCE_MILES


class Difficulty(str, Enum):
    easy = "easy"
    moderate = "moderate"
    moderate_plus = "moderate_plus"
    hard = "hard"
    strenuous = "strenuous"


DIFFICULTY_LABELS = {
    Difficulty.easy: "Easy",
    Difficulty.moderate: "Moderate",
    Difficulty.moderate_plus: "Moderate +",
    Difficulty.hard: "Hard",
    Difficulty.strenuous: "Strenuous",
}


class RsvpStatus(str, Enum):
    going = "going"
    maybe = "maybe"
    no = "no"


class HikeBase(BaseModel):
    title: str
    # Naive values are read as local wall-clock time (settings.timezone)
    start_at: datetime
    location: Optional[str] = None
    distance_miles: Optional[float] = Field(
        default=None, allow_inf_nan=False, le=MAX_HIKE_DISTANCE_MILES
    )
    difficulty: Difficulty = Difficulty.moderate
    notes: Optional[str] = None


class HikeCreate(HikeBase):
    """Schema for scheduling a hike."""
    pass


class HikeUpdate(BaseModel):
    """Schema for editing a hike (all fields optional)."""

    title: Optional[str] = None
    start_at: Optional[datetime] = None
    location: Optional[str] = None
    distance_miles: Optional[float] = Field(
        default=None, allow_inf_nan=False, le=MAX_HIKE_DISTANCE_MILES
    )
    difficulty: Optional[Difficulty] = None
    notes: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class HikeRead(HikeBase):
    """One row of the group's hike list, with RSVP tallies."""

    event_id: str
    group_id: str
    created_by: str
    created_by_name: str
    difficulty_label: str
    day_label: str        # "Saturday, March 14"
    when_display: str     # "Sat, Mar 14, 9:00 AM"
    going_count: int = 0
    maybe_count: int = 0
    no_count: int = 0
    my_status: Optional[RsvpStatus] = None


class RsvpUpdate(BaseModel):
    status: RsvpStatus
