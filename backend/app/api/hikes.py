import logging
from datetime import timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_profile
from app.api.groups import require_member
from app.core.config import settings
from app.core.milestones import round_miles
from app.core.time_utils import day_label, format_event_time, to_utc
from app.db import get_db
from app.models.group import Group
from app.models.group_event import GroupEvent, GroupEventRsvp
from app.models.profile import Profile
from app.schemas.hike import (
    DIFFICULTY_LABELS,
    Difficulty,
    HikeCreate,
    HikeRead,
    HikeUpdate,
    RsvpUpdate,
)
from app.services.group_queries import get_group_events

logger = logging.getLogger(__name__)

router = APIRouter(tags=["hikes"])

DISTANCE_ERROR = "Distance must be a number greater than 0 (or leave blank)."


def _clean(text):
    return text.strip() if text and text.strip() else None


def _distance(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    if value <= 0:
        raise HTTPException(status_code=422, detail=DISTANCE_ERROR)
    return round_miles(value)


def _hike_read(row: dict) -> HikeRead:
    start_at = row["start_at"]
    if start_at.tzinfo is None:
        # sqlite hands back naive values; they were stored as UTC
        start_at = start_at.replace(tzinfo=timezone.utc)
    difficulty = Difficulty(row["difficulty"])
    return HikeRead(
        **{**row, "start_at": start_at, "difficulty": difficulty},
        difficulty_label=DIFFICULTY_LABELS[difficulty],
        day_label=day_label(start_at, settings.timezone),
        when_display=format_event_time(start_at, settings.timezone),
    )


def _find_hike(db: Session, group_id: str, event_id: str, user_id: str) -> HikeRead:
    for row in get_group_events(db, group_id, user_id, event_id=event_id):
        return _hike_read(row)
    raise HTTPException(status_code=404, detail="Hike not found")


def _visible_event(db: Session, event_id: str, me: Profile) -> GroupEvent:
    event = db.query(GroupEvent).filter(GroupEvent.id == event_id).first()
    if not event:
        raise HTTPException(status_code=404, detail="Hike not found")
    require_member(db, event.group_id, me)
    return event


def _editable_event(db: Session, event_id: str, me: Profile) -> GroupEvent:
    event = _visible_event(db, event_id, me)
    owner_id = db.query(Group.owner_id).filter(Group.id == event.group_id).scalar()
    if me.id not in (event.created_by, owner_id):
        raise HTTPException(status_code=403, detail="Only the organizer can change this hike.")
    return event


@router.get("/groups/{group_id}/hikes", response_model=list[HikeRead])
def list_hikes(
    group_id: str,
    limit: Optional[int] = Query(None, ge=1, le=500),
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    require_member(db, group_id, me)
    rows = get_group_events(db, group_id, me.id, limit=limit or settings.events_limit)
    return [_hike_read(r) for r in rows]


@router.post("/groups/{group_id}/hikes", response_model=HikeRead, status_code=201)
def create_hike(
    group_id: str,
    payload: HikeCreate,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    require_member(db, group_id, me)
    title = payload.title.strip()
    if not title:
        raise HTTPException(status_code=422, detail="Please enter a title.")

    event = GroupEvent(
        group_id=group_id,
        created_by=me.id,
        title=title,
        start_at=to_utc(payload.start_at, settings.timezone),
        location=_clean(payload.location),
        distance_miles=_distance(payload.distance_miles),
        difficulty=payload.difficulty.value,
        notes=_clean(payload.notes),
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("hike %s scheduled in group %s by %s", event.id, group_id, me.id)
    return _find_hike(db, group_id, event.id, me.id)


@router.put("/hikes/{event_id}", response_model=HikeRead)
def update_hike(
    event_id: str,
    payload: HikeUpdate,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    event = _editable_event(db, event_id, me)
    update_data = payload.model_dump(exclude_unset=True)

    if "title" in update_data:
        title = (update_data["title"] or "").strip()
        if not title:
            raise HTTPException(status_code=422, detail="Title is required.")
        event.title = title
    if "start_at" in update_data:
        if update_data["start_at"] is None:
            raise HTTPException(status_code=422, detail="start_at cannot be empty")
        event.start_at = to_utc(update_data["start_at"], settings.timezone)
    if "location" in update_data:
        event.location = _clean(update_data["location"])
    if "distance_miles" in update_data:
        event.distance_miles = _distance(update_data["distance_miles"])
    if "difficulty" in update_data and update_data["difficulty"] is not None:
        event.difficulty = Difficulty(update_data["difficulty"]).value
    if "notes" in update_data:
        event.notes = _clean(update_data["notes"])

    db.commit()
    logger.info("hike %s updated by %s", event.id, me.id)
    return _find_hike(db, event.group_id, event.id, me.id)


@router.delete("/hikes/{event_id}", status_code=204)
def delete_hike(
    event_id: str,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    event = _editable_event(db, event_id, me)
    db.query(GroupEventRsvp).filter(GroupEventRsvp.event_id == event.id).delete()
    db.delete(event)
    db.commit()
    logger.info("hike %s deleted by %s", event_id, me.id)
    return Response(status_code=204)


@router.put("/hikes/{event_id}/rsvp", response_model=HikeRead)
def set_rsvp(
    event_id: str,
    payload: RsvpUpdate,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """Set (or change) the caller's RSVP for a hike."""
    event = _visible_event(db, event_id, me)
    rsvp = (
        db.query(GroupEventRsvp)
        .filter(GroupEventRsvp.event_id == event.id, GroupEventRsvp.user_id == me.id)
        .first()
    )
    if not rsvp:
        rsvp = GroupEventRsvp(event_id=event.id, user_id=me.id, status=payload.status.value)
        db.add(rsvp)
    else:
        rsvp.status = payload.status.value
    db.commit()
    return _find_hike(db, event.group_id, event.id, me.id)
