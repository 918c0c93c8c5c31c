"""Complaint record creation and field validation."""
import logging
from datetime import datetime
from typing import Optional

from core.config import DESCRIPTION_MAX_LENGTH
from core.exceptions import ForbiddenEdit, ValidationError
from models.complaints import (
    Complaint,
    ComplaintCategory,
    ComplaintStatus,
    ComplaintVisibility,
)
from models.roles import Actor
from schemas.complaints import ComplaintCreate
from utils.dates import utcnow

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = ComplaintCategory.other
DEFAULT_VISIBILITY = ComplaintVisibility.public


def validate_description(description: Optional[str]) -> str:
    if description is not None and not isinstance(description, str):
        raise ValidationError("Description must be text")
    text = (description or "").strip()
    if not text:
        raise ValidationError("Description cannot be empty")
    if len(text) > DESCRIPTION_MAX_LENGTH:
        raise ValidationError(
            f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters"
        )
    return text


def parse_category(value, default: Optional[ComplaintCategory] = DEFAULT_CATEGORY) -> ComplaintCategory:
    if value is None or value == "":
        if default is None:
            raise ValidationError("Category is required")
        return default
    if not isinstance(value, str):
        raise ValidationError(f"Invalid category '{value}'")
    try:
        return ComplaintCategory(value)
    except ValueError:
        allowed = ", ".join(c.value for c in ComplaintCategory)
        raise ValidationError(f"Invalid category '{value}'. Allowed: {allowed}")


def parse_visibility(value, default: Optional[ComplaintVisibility] = DEFAULT_VISIBILITY) -> ComplaintVisibility:
    if value is None or value == "":
        if default is None:
            raise ValidationError("Visibility is required")
        return default
    if not isinstance(value, str):
        raise ValidationError(f"Invalid visibility '{value}'. Use 'public' or 'private'")
    try:
        return ComplaintVisibility(value)
    except ValueError:
        raise ValidationError(f"Invalid visibility '{value}'. Use 'public' or 'private'")


def create_complaint(
    data: ComplaintCreate,
    submitter: Actor,
    image_url: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Complaint:
    """
    Build a new Submitted complaint for a student.

    The submitter's name, hostel and room are copied onto the record and the
    hostel type comes from the submitter's wing, so later profile changes do
    not rewrite history.
    """
    if not submitter.is_student:
        raise ForbiddenEdit("Only students can submit complaints")

    description = validate_description(data.description)
    category = parse_category(data.category)
    visibility = parse_visibility(data.visibility)
    now = now or utcnow()

    return Complaint(
        description=description,
        category=category,
        visibility=visibility,
        status=ComplaintStatus.submitted,
        votes=0,
        hostel_type=submitter.hostel_gender,
        submitter_id=submitter.id,
        submitter_name=submitter.name,
        submitter_hostel=submitter.hostel,
        submitter_room=submitter.room,
        image_url=image_url,
        created_at=now,
        updated_at=now,
    )
