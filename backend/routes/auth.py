import logging
import re

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from core.config import settings
from core.database import get_session
from models.audit_log import AuditAction
from models.roles import UserRole
from models.user import HOSTEL_BLOCKS, User
from schemas.users import LoginRequest, SignUpRequest, TokenResponse, UserRead
from services.audit import log_action
from utils.security import create_access_token, get_current_user, hash_password, verify_password

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def authenticate(session: Session, email: str, password: str) -> User:
    user = session.exec(select(User).where(User.email == email.strip())).first()
    if not user or not verify_password(password, user.password_hash):
        logger.warning("Failed login for %s", email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


@router.post("/signup", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def signup(req: SignUpRequest, session: Session = Depends(get_session)):
    email = req.email.strip()
    if not re.match(settings.STUDENT_EMAIL_PATTERN, email):
        raise HTTPException(status_code=400, detail="Invalid student email format")

    if req.password != req.confirm_password:
        raise HTTPException(status_code=400, detail="Passwords don't match")
    if len(req.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        )

    if req.hostel not in HOSTEL_BLOCKS:
        raise HTTPException(status_code=400, detail=f"Unknown hostel '{req.hostel}'")
    if not req.room.strip():
        raise HTTPException(status_code=400, detail="Room is required")

    existing_user = session.exec(select(User).where(User.email == email)).first()
    if existing_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    user = User(
        name=req.name.strip(),
        email=email,
        password_hash=hash_password(req.password),
        role=UserRole.student,
        hostel=req.hostel,
        room=req.room.strip(),
        hostel_gender=HOSTEL_BLOCKS[req.hostel],
    )
    session.add(user)
    session.commit()
    session.refresh(user)

    log_action(
        session,
        performed_by=user.id,
        action=AuditAction.SIGNED_UP,
        details=f"Student {user.email} signed up in {user.hostel}",
    )
    return user


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, session: Session = Depends(get_session)):
    user = authenticate(session, req.email, req.password)
    logger.info("User %s logged in as %s", user.id, user.role.value)
    return TokenResponse(access_token=create_access_token(user.id), user=UserRead.model_validate(user))


@router.get("/me", response_model=UserRead)
def me(current_user: User = Depends(get_current_user)):
    return current_user
