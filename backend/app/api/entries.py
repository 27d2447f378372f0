import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.api.deps import get_current_profile
from app.api.groups import celebration_reads, load_stats
from app.core.config import settings
from app.core.milestones import round_miles
from app.core.time_utils import today_local
from app.db import get_db
from app.models.entry import Entry
from app.models.profile import Profile
from app.schemas.entry import EntryCreate, EntryLogResult, EntryRead, EntryUpdate
from app.services.celebrations import CelebrationTracker

logger = logging.getLogger(__name__)

router = APIRouter(tags=["entries"])

MILES_ERROR = "Miles must be a number greater than 0."


def _clean_notes(notes):
    return notes.strip() if notes and notes.strip() else None


def _own_entry(db: Session, entry_id: str, me: Profile) -> Entry:
    # same outcome as an update filtered on (id, user_id): someone else's
    # entry simply isn't there
    entry = db.query(Entry).filter(Entry.id == entry_id, Entry.user_id == me.id).first()
    if not entry:
        raise HTTPException(status_code=404, detail="Entry not found")
    return entry


@router.post("/groups/{group_id}/entries", response_model=EntryLogResult, status_code=201)
def log_miles(
    group_id: str,
    payload: EntryCreate,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    """Log miles for the caller and report any badges it unlocked."""
    tracker = CelebrationTracker()
    tracker.observe(load_stats(db, group_id, me))

    if payload.miles <= 0:
        raise HTTPException(status_code=422, detail=MILES_ERROR)

    entry = Entry(
        group_id=group_id,
        user_id=me.id,
        date=payload.date or today_local(settings.timezone),
        miles=round_miles(payload.miles),
        notes=_clean_notes(payload.notes),
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info(
        "user %s logged %s mi in group %s (totals before: %s)",
        me.id,
        entry.miles,
        group_id,
        tracker.baseline,
    )

    celebrations = tracker.observe(load_stats(db, group_id, me))
    return EntryLogResult(
        entry=EntryRead.model_validate(entry),
        celebrations=celebration_reads(celebrations),
    )


@router.put("/entries/{entry_id}", response_model=EntryLogResult)
def update_entry(
    entry_id: str,
    payload: EntryUpdate,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    entry = _own_entry(db, entry_id, me)
    update_data = payload.model_dump(exclude_unset=True)

    if "miles" in update_data:
        if update_data["miles"] is None or update_data["miles"] <= 0:
            raise HTTPException(status_code=422, detail=MILES_ERROR)
        update_data["miles"] = round_miles(update_data["miles"])
    if "notes" in update_data:
        update_data["notes"] = _clean_notes(update_data["notes"])
    if "date" in update_data and update_data["date"] is None:
        raise HTTPException(status_code=422, detail="date cannot be empty")

    tracker = CelebrationTracker()
    tracker.observe(load_stats(db, entry.group_id, me))

    for key, value in update_data.items():
        setattr(entry, key, value)

    db.commit()
    db.refresh(entry)
    logger.info("user %s updated entry %s (totals before: %s)", me.id, entry.id, tracker.baseline)

    celebrations = tracker.observe(load_stats(db, entry.group_id, me))
    return EntryLogResult(
        entry=EntryRead.model_validate(entry),
        celebrations=celebration_reads(celebrations),
    )


@router.delete("/entries/{entry_id}", status_code=204)
def delete_entry(
    entry_id: str,
    me: Profile = Depends(get_current_profile),
    db: Session = Depends(get_db),
):
    entry = _own_entry(db, entry_id, me)
    db.delete(entry)
    db.commit()
    logger.info("user %s deleted entry %s", me.id, entry_id)
    return Response(status_code=204)
