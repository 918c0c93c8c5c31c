import os
from dotenv import load_dotenv

load_dotenv()

DESCRIPTION_MAX_LENGTH = 500


class Settings:
    # --- Database ---
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./hostel_complaints.db")

    # --- JWT ---
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-jwt-secret")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

    # --- Files ---
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", "uploads")
    LOCAL_CACHE_PATH = os.getenv("LOCAL_CACHE_PATH", "cache/complaints.json")

    # --- Cloudinary (optional, local uploads when unset) ---
    CLOUDINARY_CLOUD_NAME = os.getenv("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_UPLOAD_PRESET = os.getenv("CLOUDINARY_UPLOAD_PRESET", "")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    CORS_ORIGINS = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:8080,https://localhost:8080").split(",")
        if origin.strip()
    ]

    # Staff accounts created by wardens start with this password
    DEFAULT_STAFF_PASSWORD = os.getenv("DEFAULT_STAFF_PASSWORD", "default123")
    STUDENT_EMAIL_PATTERN = os.getenv(
        "STUDENT_EMAIL_PATTERN", r"^20\d{2}/(ENG|AGR|TEC)/\d{3}@gmail\.com$"
    )


settings = Settings()
