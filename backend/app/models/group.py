import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.sql import func
from app.db import Base


def _uuid() -> str:
    return str(uuid.uuid4())


class Group(Base):
    __tablename__ = "groups"

    id = Column(String(36), primary_key=True, default=_uuid)

    name = Column(String, nullable=False)
    join_code = Column(String(16), nullable=False, unique=True, index=True)

    goal_miles = Column(Numeric(8, 2), nullable=False, server_default="250")

    owner_id = Column(String(64), ForeignKey("profiles.id"), nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )


class GroupMember(Base):
    __tablename__ = "group_members"

    group_id = Column(String(36), ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True)

    joined_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
