"""Owner-only edit and delete while a complaint is still Submitted."""
from datetime import datetime
from typing import Optional

from core.exceptions import ForbiddenEdit, ValidationError
from models.complaints import ComplaintStatus
from models.roles import Actor
from schemas.complaints import ComplaintUpdate
from services.records import parse_category, parse_visibility, validate_description
from utils.dates import utcnow

EDITABLE_FIELDS = ("description", "category", "visibility")


def can_edit(complaint, actor: Actor) -> bool:
    return complaint.submitter_id == actor.id and complaint.status == ComplaintStatus.submitted


def ensure_can_edit(complaint, actor: Actor):
    if complaint.submitter_id != actor.id:
        raise ForbiddenEdit("Only the student who submitted this complaint can change it")
    if complaint.status != ComplaintStatus.submitted:
        raise ForbiddenEdit(f"Complaint is already {complaint.status.value} and can no longer be changed")


def plan_edit(
    complaint,
    actor: Actor,
    patch,
    now: Optional[datetime] = None,
) -> dict:
    """Validate an edit and return the fields to write."""
    ensure_can_edit(complaint, actor)

    if isinstance(patch, ComplaintUpdate):
        changes = patch.model_dump(exclude_unset=True)
    else:
        changes = dict(patch)

    unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Fields cannot be edited: {', '.join(unknown)}")
    if not changes:
        raise ValidationError("Nothing to update")

    fields = {}
    if "description" in changes:
        fields["description"] = validate_description(changes["description"])
    if "category" in changes:
        fields["category"] = parse_category(changes["category"], default=None)
    if "visibility" in changes:
        fields["visibility"] = parse_visibility(changes["visibility"], default=None)

    now = now or utcnow()
    fields.update(last_edited_by=actor.id, last_edited_at=now, updated_at=now)
    return fields


def ensure_can_delete(complaint, actor: Actor):
    ensure_can_edit(complaint, actor)
