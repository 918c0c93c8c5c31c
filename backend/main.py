from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from core.config import settings
from core.database import create_db_and_tables
from core.exceptions import register_exception_handlers
from core.logging_config import configure_logging
from contextlib import asynccontextmanager
from routes import auth, complaints, staff
import os

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield

app = FastAPI(title="Hostel Complaint Tracker", lifespan=lifespan)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Make sure the upload folder exists
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)

# Expose locally stored complaint images at /uploads
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
app.include_router(auth.router, prefix="/auth")
app.include_router(complaints.router, prefix="/complaints")
app.include_router(staff.router, prefix="/staff")

@app.get("/", tags=["Test"])
def root():
    return {"message": "Hostel Complaint Tracker API running"}
