import datetime as dt
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MAX_ENTRY_MILES
from app.schemas.progress import CelebrationRead


class EntryBase(BaseModel):
    # what the user types, e.g. 7.35
    miles: float = Field(allow_inf_nan=False, le=MAX_ENTRY_MILES)
    notes: Optional[str] = None


class EntryCreate(EntryBase):
    """Schema for logging miles. `date` defaults to today (local)."""

    date: Optional[dt.date] = None


class EntryUpdate(BaseModel):
    """Schema for editing an entry (all fields optional)."""

    date: Optional[dt.date] = None
    miles: Optional[float] = Field(default=None, allow_inf_nan=False, le=MAX_ENTRY_MILES)
    notes: Optional[str] = None

    # Be lenient with extra fields from clients
    model_config = ConfigDict(extra="ignore")


class EntryRead(EntryBase):
    id: str
    group_id: str
    user_id: str
    date: dt.date

    model_config = ConfigDict(from_attributes=True)


class EntryLogResult(BaseModel):
    entry: EntryRead
    celebrations: list[CelebrationRead] = []
