from sqlalchemy import Boolean, Column, DateTime, Numeric, String, false
from sqlalchemy.sql import func
from app.db import Base


class Profile(Base):
    __tablename__ = "profiles"

    # Subject ("sub") of the hosted auth service's token
    id = Column(String(64), primary_key=True, index=True)

    display_name = Column(String, nullable=False, server_default="Member")

    personal_goal_miles = Column(Numeric(8, 2), nullable=False, server_default="250")

    # Only admins may create groups
    is_admin = Column(Boolean, nullable=False, server_default=false(), default=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
