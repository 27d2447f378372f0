import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.sql import func
from app.db import Base


class GroupEvent(Base):
    """A scheduled group hike."""

    __tablename__ = "group_events"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    group_id = Column(
        String(36), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_by = Column(String(64), ForeignKey("profiles.id"), nullable=False)

    title = Column(String, nullable=False)

    # Stored in UTC
    start_at = Column(DateTime(timezone=True), nullable=False)

    location = Column(String, nullable=True)
    distance_miles = Column(Numeric(6, 2), nullable=True)

    difficulty = Column(
        String(20),
        nullable=False,
        server_default="moderate",  # easy, moderate, moderate_plus, hard, strenuous
    )

    notes = Column(String, nullable=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class GroupEventRsvp(Base):
    __tablename__ = "group_event_rsvps"

    event_id = Column(
        String(36), ForeignKey("group_events.id", ondelete="CASCADE"), primary_key=True
    )
    user_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)

    status = Column(String(10), nullable=False)  # going, maybe, no

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
