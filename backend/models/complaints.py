import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
import enum

from models.roles import Wing
from utils.dates import utcnow


class ComplaintCategory(str, enum.Enum):
    electrical = "Electrical"
    plumbing = "Plumbing"
    carpentry = "Carpentry"
    cleaning = "Cleaning"
    infrastructure = "Infrastructure"
    furniture = "Furniture"
    other = "Other"


class ComplaintVisibility(str, enum.Enum):
    public = "public"    # students of the same wing can see and vote
    private = "private"  # only wardens/staff and the owner


class ComplaintStatus(str, enum.Enum):
    submitted = "Submitted"  # initial, editable by the owner, open for votes
    approved = "Approved"    # a warden accepted it
    fixed = "Fixed"          # staff finished the work, terminal


class Complaint(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    description: str
    category: ComplaintCategory = Field(default=ComplaintCategory.other)
    visibility: ComplaintVisibility = Field(default=ComplaintVisibility.public)
    status: ComplaintStatus = Field(default=ComplaintStatus.submitted, index=True)
    votes: int = Field(default=0, nullable=False)
    hostel_type: Optional[Wing] = None

    # snapshot of the submitter at creation time
    submitter_id: uuid.UUID = Field(index=True, nullable=False)
    submitter_name: str = ""
    submitter_hostel: Optional[str] = None
    submitter_room: Optional[str] = None

    image_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)

    approved_by: Optional[uuid.UUID] = None
    approved_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    fixed_by: Optional[uuid.UUID] = None
    fixed_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    last_edited_by: Optional[uuid.UUID] = None
    last_edited_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
