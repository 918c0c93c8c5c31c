import uuid
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, UniqueConstraint
import enum

from utils.dates import utcnow


class VoteDirection(str, enum.Enum):
    up = "up"
    down = "down"


class ComplaintVote(SQLModel, table=True):
    """The direction one voter last cast on one complaint. No row means no vote."""

    __table_args__ = (UniqueConstraint("complaint_id", "voter_id"),)

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    complaint_id: uuid.UUID = Field(index=True, nullable=False)
    voter_id: uuid.UUID = Field(index=True, nullable=False)
    direction: VoteDirection
    cast_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
