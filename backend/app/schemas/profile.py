from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MAX_GOAL_MILES


class ProfileRead(BaseModel):
    id: str
    display_name: str
    personal_goal_miles: float
    is_admin: bool = False

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = None
    personal_goal_miles: float = Field(allow_inf_nan=False, le=MAX_GOAL_MILES)


class PersonalGoalUpdate(BaseModel):
    personal_goal_miles: float = Field(allow_inf_nan=False, le=MAX_GOAL_MILES)
