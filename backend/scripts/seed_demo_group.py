from datetime import date, datetime, timedelta, timezone
import random

from app.db import Base, SessionLocal, engine
from app.models.entry import Entry
from app.models.group import Group, GroupMember
from app.models.group_event import GroupEvent, GroupEventRsvp
from app.models.profile import Profile

DEMO_JOIN_CODE = "DEMO01"

DEMO_MEMBERS = [
    ("demo-admin", "Alex", True),
    ("demo-jamie", "Jamie", False),
    ("demo-sam", "Sam", False),
]


def clear_demo_group(db) -> None:
    """Delete the demo group (and everything hanging off it) so we can reseed cleanly."""
    group = db.query(Group).filter(Group.join_code == DEMO_JOIN_CODE).first()
    if not group:
        return
    event_ids = [e.id for e in db.query(GroupEvent.id).filter(GroupEvent.group_id == group.id)]
    if event_ids:
        db.query(GroupEventRsvp).filter(GroupEventRsvp.event_id.in_(event_ids)).delete(
            synchronize_session=False
        )
    db.query(GroupEvent).filter(GroupEvent.group_id == group.id).delete()
    db.query(Entry).filter(Entry.group_id == group.id).delete()
    db.query(GroupMember).filter(GroupMember.group_id == group.id).delete()
    db.delete(group)
    db.commit()


def seed_demo_group(db, weeks: int = 8, seed: int | None = None) -> Group:
    """Create a demo group with three members, a few weeks of walks and one hike."""
    rng = random.Random(seed)
    today = date.today()

    for user_id, name, is_admin in DEMO_MEMBERS:
        if not db.query(Profile).filter(Profile.id == user_id).first():
            db.add(Profile(id=user_id, display_name=name, personal_goal_miles=100, is_admin=is_admin))
    db.flush()

    group = Group(name="Weekend Trail Crew", join_code=DEMO_JOIN_CODE, goal_miles=250, owner_id="demo-admin")
    db.add(group)
    db.flush()

    entries_to_add = []
    for user_id, _, _ in DEMO_MEMBERS:
        db.add(GroupMember(group_id=group.id, user_id=user_id))
        start_day = today - timedelta(weeks=weeks - 1)
        for week in range(weeks):
            week_start = start_day + timedelta(weeks=week)
            # Example: Wed short walk, Sat longer hike
            for d, low, high, notes in [
                (week_start + timedelta(days=2), 1.5, 4.0, "Lunch walk."),
                (week_start + timedelta(days=5), 4.0, 9.0, "Saturday trail."),
            ]:
                # Skip future days
                if d > today:
                    continue
                entries_to_add.append(
                    Entry(
                        group_id=group.id,
                        user_id=user_id,
                        date=d,
                        miles=round(rng.uniform(low, high), 2),
                        notes=notes,
                    )
                )

    if entries_to_add:
        db.add_all(entries_to_add)

    next_saturday = today + timedelta(days=(5 - today.weekday()) % 7 or 7)
    hike = GroupEvent(
        group_id=group.id,
        created_by="demo-admin",
        title="Bear Mountain loop",
        start_at=datetime(next_saturday.year, next_saturday.month, next_saturday.day, 13, 0, tzinfo=timezone.utc),
        location="Trailhead lot",
        distance_miles=6.5,
        difficulty="moderate_plus",
    )
    db.add(hike)
    db.flush()
    db.add(GroupEventRsvp(event_id=hike.id, user_id="demo-jamie", status="going"))
    db.commit()
    db.refresh(group)

    print(f"Seeded group {group.name!r} (code {group.join_code}) with {len(entries_to_add)} entries")
    return group


def main():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        clear_demo_group(db)
        seed_demo_group(db)
    finally:
        db.close()


if __name__ == "__main__":
    main()
