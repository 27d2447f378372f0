import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_current_profile
from app.core.constants import DEFAULT_DISPLAY_NAME
from app.core.milestones import round_miles
from app.db import get_db
from app.models.profile import Profile
from app.schemas.profile import PersonalGoalUpdate, ProfileRead, ProfileUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])


def _validated_goal(goal: float) -> float:
    if goal <= 0:
        raise HTTPException(status_code=422, detail="Goal must be a number greater than 0.")
    return round_miles(goal)


@router.get("", response_model=ProfileRead)
def get_profile(me: Profile = Depends(get_current_profile)):
    return me


@router.put("", response_model=ProfileRead)
def update_profile(
    payload: ProfileUpdate,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    me.personal_goal_miles = _validated_goal(payload.personal_goal_miles)
    me.display_name = (payload.display_name or "").strip() or DEFAULT_DISPLAY_NAME
    db.commit()
    db.refresh(me)
    logger.info("profile %s updated", me.id)
    return me


@router.put("/goal", response_model=ProfileRead)
def update_personal_goal(
    payload: PersonalGoalUpdate,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    me.personal_goal_miles = _validated_goal(payload.personal_goal_miles)
    db.commit()
    db.refresh(me)
    logger.info("profile %s goal set to %s", me.id, me.personal_goal_miles)
    return me
