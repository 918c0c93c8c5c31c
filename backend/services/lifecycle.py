"""Submitted -> Approved -> Fixed, and who may move a complaint along."""
import enum
from datetime import datetime
from typing import NamedTuple, Optional

from core.exceptions import ForbiddenTransition
from models.complaints import ComplaintStatus
from models.roles import Actor, Staff, Warden
from utils.dates import utcnow


class Transition(str, enum.Enum):
    approve = "approve"
    mark_fixed = "mark_fixed"


class TransitionRule(NamedTuple):
    source: ComplaintStatus
    target: ComplaintStatus
    role: type
    by_field: str
    at_field: str


RULES = {
    Transition.approve: TransitionRule(
        ComplaintStatus.submitted, ComplaintStatus.approved, Warden, "approved_by", "approved_at"
    ),
    Transition.mark_fixed: TransitionRule(
        ComplaintStatus.approved, ComplaintStatus.fixed, Staff, "fixed_by", "fixed_at"
    ),
}


def plan_transition(
    complaint,
    actor: Actor,
    transition: Transition,
    now: Optional[datetime] = None,
) -> dict:
    """
    Decide a transition without touching the complaint.

    Returns the fields to write when it is legal, raises ForbiddenTransition
    otherwise. The caller writes the fields only if the status is still
    ``RULES[transition].source`` at write time.
    """
    transition = Transition(transition)
    rule = RULES[transition]

    if not isinstance(actor.role, rule.role):
        raise ForbiddenTransition(
            f"Only {rule.role.__name__.lower()} roles can {transition.value.replace('_', ' ')} complaints"
        )
    if complaint.status != rule.source:
        raise ForbiddenTransition(
            f"Cannot move complaint from {complaint.status.value} to {rule.target.value}"
        )

    now = now or utcnow()
    return {
        "status": rule.target,
        rule.by_field: actor.id,
        rule.at_field: now,
        "updated_at": now,
    }


def approve(complaint, actor: Actor, now: Optional[datetime] = None) -> dict:
    return plan_transition(complaint, actor, Transition.approve, now)


def mark_fixed(complaint, actor: Actor, now: Optional[datetime] = None) -> dict:
    return plan_transition(complaint, actor, Transition.mark_fixed, now)
