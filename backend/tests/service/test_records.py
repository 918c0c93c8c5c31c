from datetime import timezone

import pytest

from core.exceptions import ForbiddenEdit, ValidationError
from models.complaints import ComplaintCategory, ComplaintStatus, ComplaintVisibility
from models.roles import UserRole, Wing
from schemas.complaints import ComplaintCreate
from services import records


def test_create_complaint_stamps_initial_state(make_actor):
    student = make_actor(name="Ravi", hostel="Block B")

    complaint = records.create_complaint(
        ComplaintCreate(description="  Fan broken  ", category="Electrical", visibility="public"),
        student,
        image_url="/uploads/complaints/fan.jpg",
    )

    assert complaint.description == "Fan broken"
    assert complaint.category == ComplaintCategory.electrical
    assert complaint.visibility == ComplaintVisibility.public
    assert complaint.status == ComplaintStatus.submitted
    assert complaint.votes == 0
    assert complaint.hostel_type == Wing.male
    assert complaint.submitter_id == student.id
    assert complaint.submitter_name == "Ravi"
    assert complaint.submitter_hostel == "Block B"
    assert complaint.submitter_room == "12"
    assert complaint.image_url == "/uploads/complaints/fan.jpg"
    assert complaint.created_at == complaint.updated_at
    assert complaint.approved_by is None and complaint.fixed_by is None


def test_create_complaint_defaults_category_and_visibility(make_actor):
    complaint = records.create_complaint(ComplaintCreate(description="Leaking tap"), make_actor())

    assert complaint.category == ComplaintCategory.other
    assert complaint.visibility == ComplaintVisibility.public


@pytest.mark.parametrize("description", ["", "   ", "\n\t", "x" * 501])
def test_create_complaint_rejects_bad_description(make_actor, description):
    with pytest.raises(ValidationError):
        records.create_complaint(ComplaintCreate(description=description), make_actor())


def test_description_at_limit_is_accepted(make_actor):
    complaint = records.create_complaint(ComplaintCreate(description="x" * 500), make_actor())
    assert len(complaint.description) == 500


def test_invalid_category_is_not_coerced(make_actor):
    with pytest.raises(ValidationError, match="Invalid category"):
        records.create_complaint(
            ComplaintCreate(description="Door hinge", category="electrical"), make_actor()
        )


def test_invalid_visibility_is_rejected(make_actor):
    with pytest.raises(ValidationError, match="visibility"):
        records.create_complaint(
            ComplaintCreate(description="Door hinge", visibility="friends"), make_actor()
        )


def test_only_students_submit(make_actor):
    warden = make_actor(role=UserRole.warden_male)
    with pytest.raises(ForbiddenEdit):
        records.create_complaint(ComplaintCreate(description="Broken window"), warden)


def test_student_without_wing_gets_undefined_hostel_type(make_actor):
    complaint = records.create_complaint(
        ComplaintCreate(description="Broken window"), make_actor(hostel_gender=None)
    )
    assert complaint.hostel_type is None


@pytest.mark.parametrize(
    "parse, value",
    [
        (records.validate_description, 5),
        (records.validate_description, ["Fan broken"]),
        (records.parse_category, 3),
        (records.parse_visibility, True),
    ],
)
def test_non_text_values_are_validation_errors(parse, value):
    with pytest.raises(ValidationError):
        parse(value)


def test_timestamps_are_timezone_aware(make_actor):
    complaint = records.create_complaint(ComplaintCreate(description="Broken window"), make_actor())

    assert complaint.created_at.tzinfo is timezone.utc
    assert complaint.updated_at.tzinfo is timezone.utc
