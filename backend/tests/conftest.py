import os
import tempfile
import uuid

# Point settings at throwaway locations before the app is imported
_TMP_DIR = tempfile.mkdtemp(prefix="hostel-complaints-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'app.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["LOCAL_CACHE_PATH"] = os.path.join(_TMP_DIR, "cache", "complaints.json")
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret"
os.environ["CLOUDINARY_CLOUD_NAME"] = ""
os.environ["CLOUDINARY_UPLOAD_PRESET"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from core.database import get_session
from main import app
from models import audit_log, complaints, vote  # noqa: F401  register tables
from models.roles import Actor, UserRole, Wing, role_from_user_role, role_wing
from models.user import User
from routes.complaints import get_local_cache
from services.local_cache import LocalCache
from services.store import ComplaintStore
from utils.security import create_access_token, hash_password

TEST_PASSWORD = "secret123"


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session):
    return ComplaintStore(session)


@pytest.fixture
def cache(tmp_path):
    return LocalCache(str(tmp_path / "cache" / "complaints.json"))


#scope : function < class < module < package < session
@pytest.fixture(scope="session")
def password_hash():
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def client(engine, cache):
    def override_get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_local_cache] = lambda: cache
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session, password_hash):
    """Persist a user. Students default to Block A (male wing)."""

    def _make(role=UserRole.student, hostel="Block A", hostel_gender=None, name=None):
        if role == UserRole.student and hostel_gender is None:
            hostel_gender = Wing.female if hostel == "Girls Hostel" else Wing.male
        if role != UserRole.student:
            hostel = None
            hostel_gender = role_wing(role_from_user_role(role))

        suffix = uuid.uuid4().hex[:8]
        user = User(
            name=name or f"{role.value}-{suffix}",
            email=f"{role.value}-{suffix}@hostel.test",
            password_hash=password_hash,
            role=role,
            hostel=hostel,
            room="101" if role == UserRole.student else None,
            hostel_gender=hostel_gender,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_actor():
    """An Actor that exists only in memory, for the pure decision functions."""

    def _make(role=UserRole.student, hostel_gender=Wing.male, hostel="Block A", name="Test User"):
        return Actor(
            id=uuid.uuid4(),
            name=name,
            role=role_from_user_role(role),
            hostel=hostel,
            room="12",
            hostel_gender=hostel_gender,
        )

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers


@pytest.fixture
def user_password():
    return TEST_PASSWORD
