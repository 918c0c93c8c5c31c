import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field
import enum

from models.roles import UserRole, Wing
from utils.dates import utcnow


class StaffDepartment(str, enum.Enum):
    maintenance = "Maintenance"
    electrical = "Electrical"
    plumbing = "Plumbing"
    cleaning = "Cleaning"
    security = "Security"


# Hostel blocks a student can sign up under, mapped to their wing
HOSTEL_BLOCKS = {
    "Block A": Wing.male,
    "Block B": Wing.male,
    "Block C": Wing.male,
    "Block D": Wing.male,
    "Block E": Wing.male,
    "New Block": Wing.male,
    "Girls Hostel": Wing.female,
}


class User(SQLModel, table=True):
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    name: str = Field(nullable=False)
    email: str = Field(index=True, unique=True, nullable=False)
    password_hash: str = Field(nullable=False)
    role: UserRole = Field(default=UserRole.student, nullable=False)
    hostel: Optional[str] = None
    room: Optional[str] = None
    hostel_gender: Optional[Wing] = None
    department: Optional[StaffDepartment] = None  # staff only
    created_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), nullable=False)
