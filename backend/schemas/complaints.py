import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict
from models.complaints import ComplaintCategory, ComplaintStatus, ComplaintVisibility
from models.roles import Wing
from models.vote import VoteDirection

# Request schema for creating a complaint. Values stay loose here so the
# record model can reject them with its own errors.
class ComplaintCreate(BaseModel):
    description: str
    category: Optional[str] = None
    visibility: Optional[str] = None

# Edit payload: only these three fields may change after submission
class ComplaintUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    description: Optional[str] = None
    category: Optional[str] = None
    visibility: Optional[str] = None

# Response schema
class ComplaintRead(BaseModel):
    id: uuid.UUID
    description: str
    category: ComplaintCategory
    visibility: ComplaintVisibility
    status: ComplaintStatus
    votes: int
    hostel_type: Optional[Wing] = None
    submitter_id: uuid.UUID
    submitter_name: str
    submitter_hostel: Optional[str] = None
    submitter_room: Optional[str] = None
    image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    approved_by: Optional[uuid.UUID] = None
    approved_at: Optional[datetime] = None
    fixed_by: Optional[uuid.UUID] = None
    fixed_at: Optional[datetime] = None
    last_edited_by: Optional[uuid.UUID] = None
    last_edited_at: Optional[datetime] = None

    class Config:
        from_attributes = True  # allows reading from ORM objects

class ComplaintDetail(ComplaintRead):
    my_vote: Optional[VoteDirection] = None

class VoteRequest(BaseModel):
    direction: VoteDirection

class VoteResult(BaseModel):
    complaint_id: uuid.UUID
    votes: int
    direction: Optional[VoteDirection] = None

class AuditLogRead(BaseModel):
    id: uuid.UUID
    action: str
    details: Optional[str]
    user_id: uuid.UUID
    created_at: datetime

    class Config:
        from_attributes = True
