import uuid
from datetime import datetime
from typing import Optional
from pydantic import BaseModel
from models.roles import UserRole, Wing
from models.user import StaffDepartment

class SignUpRequest(BaseModel):
    name: str
    email: str
    password: str
    confirm_password: str
    hostel: str
    room: str

class LoginRequest(BaseModel):
    email: str
    password: str

class UserRead(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    role: UserRole
    hostel: Optional[str] = None
    room: Optional[str] = None
    hostel_gender: Optional[Wing] = None
    department: Optional[StaffDepartment] = None
    created_at: datetime

    class Config:
        from_attributes = True

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead

class StaffCreate(BaseModel):
    name: str
    email: str
    department: StaffDepartment = StaffDepartment.maintenance
