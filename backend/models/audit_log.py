import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
import enum

from utils.dates import utcnow


class AuditAction(str, enum.Enum):
    # Complaint lifecycle
    SUBMITTED_COMPLAINT = "submitted_complaint"
    EDITED_COMPLAINT = "edited_complaint"
    DELETED_COMPLAINT = "deleted_complaint"
    APPROVED_COMPLAINT = "approved_complaint"
    FIXED_COMPLAINT = "fixed_complaint"
    VOTED_COMPLAINT = "voted_complaint"

    # Account actions
    SIGNED_UP = "signed_up"
    ADDED_STAFF = "added_staff"
    REMOVED_STAFF = "removed_staff"

class AuditLog(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    action: str  # an AuditAction value
    details: Optional[str] = None
    complaint_id: Optional[uuid.UUID] = Field(default=None, index=True)

    user_id: uuid.UUID = Field(index=True)  # who did the action
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
