import uuid
from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from core.config import settings
from core.database import get_session
from models.audit_log import AuditAction
from models.roles import Actor, staff_role_for_wing, role_wing
from models.user import User
from schemas.users import StaffCreate, UserRead
from services.audit import log_action
from utils.security import hash_password, warden_required

router = APIRouter(tags=["Staff"])


# Add a new staff member to the warden's wing
@router.post("/", response_model=UserRead, status_code=201)
def add_staff(
    req: StaffCreate,
    session: Session = Depends(get_session),
    warden: Actor = Depends(warden_required),
):
    name = req.name.strip()
    email = req.email.strip()
    if not name or not email:
        raise HTTPException(status_code=400, detail="Please fill all fields")

    # Check if email already exists
    existing_user = session.exec(select(User).where(User.email == email)).first()
    if existing_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    wing = role_wing(warden.role)
    user = User(
        name=name,
        email=email,
        password_hash=hash_password(settings.DEFAULT_STAFF_PASSWORD),
        role=staff_role_for_wing(wing),
        hostel_gender=wing,
        department=req.department,
    )
    session.add(user)
    session.commit()
    session.refresh(user)

    log_action(
        session,
        performed_by=warden.id,
        action=AuditAction.ADDED_STAFF,
        details=f"Staff {email} ({req.department.value}) added",
    )
    return user


# List staff of the warden's wing
@router.get("/", response_model=List[UserRead])
def list_staff(
    session: Session = Depends(get_session),
    warden: Actor = Depends(warden_required),
):
    role = staff_role_for_wing(role_wing(warden.role))
    return session.exec(select(User).where(User.role == role).order_by(User.name)).all()


# Remove staff member
@router.delete("/{staff_id}")
def remove_staff(
    staff_id: str,
    session: Session = Depends(get_session),
    warden: Actor = Depends(warden_required),
):
    try:
        staff_uuid = uuid.UUID(staff_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid staff ID")

    staff = session.get(User, staff_uuid)
    if not staff or staff.role != staff_role_for_wing(role_wing(warden.role)):
        raise HTTPException(status_code=404, detail="Staff member not found")

    email = staff.email
    session.delete(staff)
    session.commit()

    log_action(
        session,
        performed_by=warden.id,
        action=AuditAction.REMOVED_STAFF,
        details=f"Staff {email} removed",
    )
    return {"detail": f"Staff member '{email}' removed"}
