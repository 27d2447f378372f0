"""Aggregate queries for a group: stats, leaderboard, feed, hikes, joining.

Each function returns plain dict rows; routers decode them through the
schemas in `app.schemas` before anything is computed from them.
"""
import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.entry import Entry
from app.models.group import Group, GroupMember
from app.models.group_event import GroupEvent, GroupEventRsvp
from app.models.profile import Profile

logger = logging.getLogger(__name__)


class InvalidJoinCode(Exception):
    """No group has the given join code."""


def is_member(db: Session, group_id: str, user_id: str) -> bool:
    return (
        db.query(GroupMember)
        .filter(GroupMember.group_id == group_id, GroupMember.user_id == user_id)
        .first()
        is not None
    )


def _sum_miles(db: Session, *filters) -> float:
    total = db.query(func.sum(Entry.miles)).filter(*filters).scalar()
    return float(total or 0.0)


def get_group_stats(db: Session, group_id: str, user_id: str) -> Optional[dict]:
    """Goal and totals for one group as seen by `user_id`.

    Returns None when the group does not exist or the user is not a member.
    """
    group = db.query(Group).filter(Group.id == group_id).first()
    if group is None or not is_member(db, group_id, user_id):
        return None

    profile = db.query(Profile).filter(Profile.id == user_id).first()

    return {
        "group_id": group.id,
        "group_name": group.name,
        "goal_miles": group.goal_miles,
        "group_total": _sum_miles(db, Entry.group_id == group_id),
        "my_total": _sum_miles(db, Entry.group_id == group_id, Entry.user_id == user_id),
        "my_goal": profile.personal_goal_miles if profile else None,
    }


def get_group_leaderboard(db: Session, group_id: str) -> list[dict]:
    """Every member with their total miles in the group, highest first."""
    totals = (
        db.query(Entry.user_id, func.sum(Entry.miles).label("total"))
        .filter(Entry.group_id == group_id)
        .group_by(Entry.user_id)
        .subquery()
    )
    rows = (
        db.query(Profile.id, Profile.display_name, totals.c.total)
        .join(GroupMember, GroupMember.user_id == Profile.id)
        .outerjoin(totals, totals.c.user_id == Profile.id)
        .filter(GroupMember.group_id == group_id)
        .all()
    )
    board = [
        {"user_id": uid, "display_name": name, "total_miles": float(total or 0.0)}
        for uid, name, total in rows
    ]
    board.sort(key=lambda r: (-r["total_miles"], r["display_name"].lower()))
    return board


def get_group_feed(db: Session, group_id: str, max_rows: int = 50) -> list[dict]:
    rows = (
        db.query(Entry, Profile.display_name)
        .join(Profile, Profile.id == Entry.user_id)
        .filter(Entry.group_id == group_id)
        .order_by(Entry.date.desc(), Entry.created_at.desc())
        .limit(max_rows)
        .all()
    )
    return [
        {
            "entry_id": e.id,
            "date": e.date,
            "miles": e.miles,
            "notes": e.notes,
            "user_id": e.user_id,
            "display_name": name,
            "created_at": e.created_at,
        }
        for e, name in rows
    ]


def get_group_events(
    db: Session,
    group_id: str,
    user_id: str,
    limit: int = 100,
    event_id: Optional[str] = None,
) -> list[dict]:
    """Hikes in start order, each with RSVP tallies and the caller's own RSVP.

    Pass `event_id` to fetch a single hike in the same shape.
    """
    query = (
        db.query(GroupEvent, Profile.display_name)
        .join(Profile, Profile.id == GroupEvent.created_by)
        .filter(GroupEvent.group_id == group_id)
    )
    if event_id is not None:
        query = query.filter(GroupEvent.id == event_id)
    events = query.order_by(GroupEvent.start_at.asc()).limit(limit).all()
    if not events:
        return []

    event_ids = [ev.id for ev, _ in events]
    counts: dict[str, dict[str, int]] = {eid: {} for eid in event_ids}
    for eid, status, n in (
        db.query(GroupEventRsvp.event_id, GroupEventRsvp.status, func.count())
        .filter(GroupEventRsvp.event_id.in_(event_ids))
        .group_by(GroupEventRsvp.event_id, GroupEventRsvp.status)
        .all()
    ):
        counts[eid][status] = int(n)

    mine = dict(
        db.query(GroupEventRsvp.event_id, GroupEventRsvp.status)
        .filter(GroupEventRsvp.event_id.in_(event_ids), GroupEventRsvp.user_id == user_id)
        .all()
    )

    return [
        {
            "event_id": ev.id,
            "group_id": ev.group_id,
            "title": ev.title,
            "start_at": ev.start_at,
            "location": ev.location,
            "distance_miles": ev.distance_miles,
            "difficulty": ev.difficulty,
            "notes": ev.notes,
            "created_by": ev.created_by,
            "created_by_name": creator,
            "going_count": counts[ev.id].get("going", 0),
            "maybe_count": counts[ev.id].get("maybe", 0),
            "no_count": counts[ev.id].get("no", 0),
            "my_status": mine.get(ev.id),
        }
        for ev, creator in events
    ]


def join_group_by_code(db: Session, user_id: str, code: str) -> str:
    """Add `user_id` to the group with this join code and return its id.

    Joining a group you are already in is a no-op.
    """
    normalized = code.strip().upper()
    group = db.query(Group).filter(Group.join_code == normalized).first()
    if group is None:
        raise InvalidJoinCode(code)

    if not is_member(db, group.id, user_id):
        db.add(GroupMember(group_id=group.id, user_id=user_id))
        db.commit()
        logger.info("user %s joined group %s", user_id, group.id)
    return group.id
