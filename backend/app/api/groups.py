import logging
import secrets
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_profile
from app.core.config import settings
from app.core.constants import JOIN_CODE_ALPHABET, JOIN_CODE_LENGTH
from app.core.milestones import (
    MilestoneState,
    format_badge,
    format_miles,
    milestone_state,
    round_miles,
)
from app.db import get_db
from app.models.group import Group, GroupMember
from app.models.profile import Profile
from app.schemas.group import (
    FeedRow,
    GroupCreate,
    GroupRead,
    GroupStats,
    JoinGroupRequest,
    JoinGroupResult,
    LeaderRow,
)
from app.schemas.progress import (
    BadgeRead,
    CelebrationRead,
    GroupBadges,
    GroupProgress,
    ScopeProgress,
)
from app.services.celebrations import celebrations_between
from app.services.group_queries import (
    InvalidJoinCode,
    get_group_feed,
    get_group_leaderboard,
    get_group_stats,
    is_member,
    join_group_by_code,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/groups", tags=["groups"])

NOT_FOUND = "Group not found or you don't have access."


def load_stats(db: Session, group_id: str, me: Profile) -> GroupStats:
    """Decoded stats for a group the caller belongs to (404 otherwise)."""
    row = get_group_stats(db, group_id, me.id)
    if row is None:
        raise HTTPException(status_code=404, detail=NOT_FOUND)
    return GroupStats.model_validate(row)


def require_member(db: Session, group_id: str, me: Profile) -> None:
    if not is_member(db, group_id, me.id):
        raise HTTPException(status_code=404, detail=NOT_FOUND)


def _new_join_code(db: Session) -> str:
    while True:
        code = "".join(secrets.choice(JOIN_CODE_ALPHABET) for _ in range(JOIN_CODE_LENGTH))
        if not db.query(Group).filter(Group.join_code == code).first():
            return code


def badge_list(state: MilestoneState) -> list[BadgeRead]:
    return [
        BadgeRead(
            miles=b.miles,
            label=f"{format_badge(b.miles)} miles",
            earned=b.earned,
            is_next=b.is_next,
        )
        for b in state.badges
    ]


def celebration_reads(celebrations) -> list[CelebrationRead]:
    return [CelebrationRead(**asdict(c)) for c in celebrations]


def scope_progress(total: float, goal: float) -> ScopeProgress:
    state = milestone_state(total, goal)
    return ScopeProgress(
        total=total,
        goal=goal,
        total_display=format_miles(total),
        goal_display=format_miles(goal),
        fraction=state.fraction,
        percent=round(state.fraction * 100, 1),
        next_milestone=state.next,
        goal_reached=state.goal_reached,
        badges=badge_list(state),
    )


@router.get("", response_model=list[GroupRead])
def list_groups(me: Profile = Depends(get_current_profile), db: Session = Depends(get_db)):
    """Groups the caller belongs to, oldest first."""
    return (
        db.query(Group)
        .join(GroupMember, GroupMember.group_id == Group.id)
        .filter(GroupMember.user_id == me.id)
        .order_by(Group.created_at.asc())
        .all()
    )


@router.post("", response_model=GroupRead, status_code=201)
def create_group(
    payload: GroupCreate,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    if not me.is_admin:
        raise HTTPException(status_code=403, detail="Only admins can create groups.")
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=422, detail="Group name is required.")
    if payload.goal_miles <= 0:
        raise HTTPException(status_code=422, detail="Goal must be a number greater than 0.")

    group = Group(
        name=name,
        join_code=_new_join_code(db),
        goal_miles=round_miles(payload.goal_miles),
        owner_id=me.id,
    )
    db.add(group)
    db.flush()
    db.add(GroupMember(group_id=group.id, user_id=me.id))
    db.commit()
    db.refresh(group)
    logger.info("group %s (%s) created by %s", group.id, group.name, me.id)
    return group


@router.post("/join", response_model=JoinGroupResult)
def join_group(
    payload: JoinGroupRequest,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    if not payload.code.strip():
        raise HTTPException(status_code=422, detail="Join code is required.")
    try:
        group_id = join_group_by_code(db, me.id, payload.code)
    except InvalidJoinCode:
        logger.warning("user %s tried invalid join code %r", me.id, payload.code)
        raise HTTPException(status_code=404, detail="Invalid join code.")
    return JoinGroupResult(group_id=group_id)


@router.get("/{group_id}/stats", response_model=GroupStats)
def group_stats(
    group_id: str,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    return load_stats(db, group_id, me)


@router.get("/{group_id}/leaderboard", response_model=list[LeaderRow])
def group_leaderboard(
    group_id: str,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    require_member(db, group_id, me)
    return [LeaderRow.model_validate(r) for r in get_group_leaderboard(db, group_id)]


@router.get("/{group_id}/feed", response_model=list[FeedRow])
def group_feed(
    group_id: str,
    max_rows: Optional[int] = Query(None, ge=1, le=500),
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    require_member(db, group_id, me)
    rows = get_group_feed(db, group_id, max_rows or settings.feed_max_rows)
    return [FeedRow.model_validate(r) for r in rows]


@router.get("/{group_id}/progress", response_model=GroupProgress)
def group_progress(
    group_id: str,
    previous_group_total: Optional[float] = Query(None, ge=0, allow_inf_nan=False),
    previous_my_total: Optional[float] = Query(None, ge=0, allow_inf_nan=False),
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """Progress bars and badges for the group and for the caller.

    Pass the totals from the last refresh to get the celebrations for this
    one.
    """
    stats = load_stats(db, group_id, me)
    celebrations = celebrations_between(previous_group_total, previous_my_total, stats)
    return GroupProgress(
        group_id=stats.group_id,
        group_name=stats.group_name,
        group=scope_progress(stats.group_total, stats.goal_miles),
        mine=scope_progress(stats.my_total, stats.my_goal),
        celebrations=celebration_reads(celebrations),
    )


@router.get("/{group_id}/badges", response_model=GroupBadges)
def group_badges(
    group_id: str,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    stats = load_stats(db, group_id, me)
    group_state = milestone_state(stats.group_total, stats.goal_miles)
    my_state = milestone_state(stats.my_total, stats.my_goal)
    return GroupBadges(
        group_id=stats.group_id,
        group_name=stats.group_name,
        group=badge_list(group_state),
        mine=badge_list(my_state),
        group_goal_reached=group_state.goal_reached,
        my_goal_reached=my_state.goal_reached,
    )
