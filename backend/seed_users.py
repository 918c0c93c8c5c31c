import logging
import os
from sqlmodel import Session, select
from core.database import create_db_and_tables, engine
from core.logging_config import configure_logging
from models.roles import UserRole, Wing
from models.user import User
from utils.security import hash_password

logger = logging.getLogger(__name__)

# Wardens and staff cannot sign up themselves; one account per wing is seeded.
SEED_PASSWORD = os.getenv("SEED_PASSWORD", "admin123")
SEED_ACCOUNTS = [
    ("Boys Hostel Warden", "warden.male@hostel.local", UserRole.warden_male, Wing.male),
    ("Girls Hostel Warden", "warden.female@hostel.local", UserRole.warden_female, Wing.female),
    ("Boys Hostel Staff", "staff.male@hostel.local", UserRole.staff_male, Wing.male),
    ("Girls Hostel Staff", "staff.female@hostel.local", UserRole.staff_female, Wing.female),
]

def seed_users(bind=engine, password: str = SEED_PASSWORD) -> int:
    created = 0
    with Session(bind) as session:
        for name, email, role, wing in SEED_ACCOUNTS:
            # check if the account already exists
            existing = session.exec(select(User).where(User.email == email)).first()
            if existing:
                logger.info("%s already exists", email)
                continue

            session.add(User(
                name=name,
                email=email,
                password_hash=hash_password(password),
                role=role,
                hostel_gender=wing,
            ))
            created += 1
        session.commit()
    logger.info("Seeded %d account(s)", created)
    return created

if __name__ == "__main__":
    configure_logging()
    create_db_and_tables()
    seed_users()
