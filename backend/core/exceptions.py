import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ComplaintError(Exception):
    """Base class for failures reported by the complaint core."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ComplaintError):
    """Malformed complaint input (description, category or visibility)."""

    status_code = status.HTTP_400_BAD_REQUEST


class ForbiddenTransition(ComplaintError):
    """Wrong role or wrong current status for approve / mark fixed."""

    status_code = status.HTTP_403_FORBIDDEN


class ForbiddenEdit(ComplaintError):
    """Edit or delete by a non-owner, or after the complaint left Submitted."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFound(ComplaintError):
    status_code = status.HTTP_404_NOT_FOUND


class StoreUnavailable(ComplaintError):
    """Raised by the store layer when the database cannot be reached."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class UploadFailed(ComplaintError):
    status_code = status.HTTP_502_BAD_GATEWAY


async def complaint_error_handler(request: Request, exc: ComplaintError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(ComplaintError, complaint_error_handler)
