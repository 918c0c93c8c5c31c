import logging
import os
import uuid

import aiofiles
import httpx
from fastapi import UploadFile

from core.config import settings
from core.exceptions import UploadFailed, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif"}
CLOUDINARY_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"


def cloudinary_enabled() -> bool:
    return bool(settings.CLOUDINARY_CLOUD_NAME and settings.CLOUDINARY_UPLOAD_PRESET)


async def upload_image(file: UploadFile) -> str:
    """Store an attached complaint photo and return the URL it is served from."""
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError(f"Invalid file type: {file.content_type}. Only images are allowed.")

    content = await file.read()
    if cloudinary_enabled():
        return await upload_to_cloudinary(content, file.filename or "complaint.jpg", file.content_type)
    return await save_locally(content, file.filename or "")


async def upload_to_cloudinary(content: bytes, filename: str, content_type: str) -> str:
    url = CLOUDINARY_URL.format(cloud_name=settings.CLOUDINARY_CLOUD_NAME)
    try:
        async with httpx.AsyncClient(timeout=30) as client:
            response = await client.post(
                url,
                data={"upload_preset": settings.CLOUDINARY_UPLOAD_PRESET},
                files={"file": (filename, content, content_type)},
            )
            response.raise_for_status()
            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Cloudinary upload failed: %s", e)
        raise UploadFailed(f"Image upload failed: {e}") from e

    secure_url = data.get("secure_url")
    if not secure_url:
        message = data.get("error", {}).get("message", "Upload failed")
        raise UploadFailed(f"Image upload failed: {message}")
    logger.info("Uploaded complaint image to %s", secure_url)
    return secure_url


async def save_locally(content: bytes, filename: str) -> str:
    upload_dir = os.path.join(settings.UPLOAD_DIR, "complaints")
    os.makedirs(upload_dir, exist_ok=True)

    saved_filename = f"{uuid.uuid4()}{os.path.splitext(filename)[1]}"
    file_path = os.path.join(upload_dir, saved_filename)
    try:
        async with aiofiles.open(file_path, "wb") as out_file:
            await out_file.write(content)
    except OSError as e:
        raise UploadFailed(f"Failed to save file: {e}") from e

    return f"/uploads/complaints/{saved_filename}"
