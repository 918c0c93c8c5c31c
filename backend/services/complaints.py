"""
Complaint operations: the decision functions applied against the store.

Every function takes the acting user explicitly as an ``Actor``. Decisions
are made on a fresh read, then written with the store's guarded statements
so a concurrent change turns into a rejection instead of a lost update.
"""
import logging
import uuid
from typing import List, Optional, Tuple, Union

from core.exceptions import ForbiddenEdit, ForbiddenTransition, NotFound, StoreUnavailable
from models.audit_log import AuditAction
from models.complaints import Complaint, ComplaintStatus
from models.roles import Actor
from models.vote import VoteDirection
from schemas.complaints import ComplaintCreate, ComplaintUpdate
from services import authorization, lifecycle, records, visibility, voting
from services.audit import log_action
from services.local_cache import LocalCache
from services.store import ComplaintStore

logger = logging.getLogger(__name__)

FEED_SOURCE_STORE = "store"
FEED_SOURCE_CACHE = "cache"


def _require(store: ComplaintStore, complaint_id: uuid.UUID) -> Complaint:
    complaint = store.get_complaint(complaint_id)
    if complaint is None:
        raise NotFound("Complaint not found")
    return complaint


def submit_complaint(
    store: ComplaintStore,
    data: ComplaintCreate,
    submitter: Actor,
    image_url: Optional[str] = None,
) -> Complaint:
    complaint = records.create_complaint(data, submitter, image_url=image_url)
    store.put_complaint(complaint)
    store.commit()

    log_action(
        store.session,
        performed_by=submitter.id,
        action=AuditAction.SUBMITTED_COMPLAINT,
        details=f"{complaint.category.value} complaint ({complaint.visibility.value})",
        complaint_id=complaint.id,
    )
    return _require(store, complaint.id)


def list_feed(
    store: ComplaintStore,
    cache: LocalCache,
    viewer: Actor,
    tab: ComplaintStatus,
) -> Tuple[List, str]:
    """Return the viewer's feed for a tab and where it was read from."""
    try:
        complaints = store.get_all_complaints()
    except StoreUnavailable:
        logger.warning("Store unavailable, serving feed for %s from local cache", viewer.id)
        return visibility.build_feed(cache.load_local(), viewer, tab), FEED_SOURCE_CACHE

    cache.save_all(complaints)
    return visibility.build_feed(complaints, viewer, tab), FEED_SOURCE_STORE


def get_visible_complaint(store: ComplaintStore, complaint_id: uuid.UUID, viewer: Actor) -> Complaint:
    complaint = _require(store, complaint_id)
    if not visibility.is_visible(complaint, viewer):
        # same answer as a missing complaint, existence is not leaked
        raise NotFound("Complaint not found")
    return complaint


def get_my_vote(store: ComplaintStore, complaint_id: uuid.UUID, viewer: Actor) -> Optional[VoteDirection]:
    return store.get_vote_direction(complaint_id, viewer.id)


def cast_vote(
    store: ComplaintStore,
    complaint_id: uuid.UUID,
    direction: VoteDirection,
    viewer: Actor,
) -> Tuple[int, Optional[VoteDirection]]:
    """Cast or toggle a vote. Returns (tally, viewer's direction) as stored."""
    direction = VoteDirection(direction)
    if not viewer.is_student:
        # staff and wardens never vote, whether or not they can see the complaint
        complaint = _require(store, complaint_id)
        return complaint.votes, None

    complaint = get_visible_complaint(store, complaint_id, viewer)
    prior = store.get_vote_direction(complaint_id, viewer.id)

    plan = voting.plan_vote(complaint, viewer, prior, direction)
    if not plan.applied:
        return complaint.votes, prior

    # the delta is only kept if the direction row still holds ``prior``
    if not (
        store.apply_vote_delta(complaint_id, plan.delta)
        and store.set_vote_direction(complaint_id, viewer.id, plan.direction, expected=prior)
    ):
        # status moved on, the complaint vanished, or an overlapping vote won
        store.rollback()
        complaint = _require(store, complaint_id)
        return complaint.votes, store.get_vote_direction(complaint_id, viewer.id)

    store.commit()

    log_action(
        store.session,
        performed_by=viewer.id,
        action=AuditAction.VOTED_COMPLAINT,
        details=f"{direction.value} -> {plan.direction.value if plan.direction else 'none'} (delta {plan.delta:+d})",
        complaint_id=complaint_id,
    )
    # the stored row is authoritative, not the copy read before the update
    complaint = _require(store, complaint_id)
    return complaint.votes, plan.direction


def _transition(
    store: ComplaintStore,
    complaint_id: uuid.UUID,
    actor: Actor,
    transition: lifecycle.Transition,
    action: AuditAction,
) -> Complaint:
    complaint = _require(store, complaint_id)
    fields = lifecycle.plan_transition(complaint, actor, transition)
    rule = lifecycle.RULES[transition]

    if not store.patch_complaint(complaint_id, fields, expected_status=rule.source):
        store.rollback()
        raise ForbiddenTransition(
            f"Complaint is no longer {rule.source.value}; it was changed by someone else"
        )
    store.commit()

    log_action(
        store.session,
        performed_by=actor.id,
        action=action,
        details=f"{rule.source.value} -> {rule.target.value}",
        complaint_id=complaint_id,
    )
    return _require(store, complaint_id)


def approve(store: ComplaintStore, complaint_id: uuid.UUID, actor: Actor) -> Complaint:
    return _transition(store, complaint_id, actor, lifecycle.Transition.approve, AuditAction.APPROVED_COMPLAINT)


def mark_fixed(store: ComplaintStore, complaint_id: uuid.UUID, actor: Actor) -> Complaint:
    return _transition(store, complaint_id, actor, lifecycle.Transition.mark_fixed, AuditAction.FIXED_COMPLAINT)


def edit_complaint(
    store: ComplaintStore,
    complaint_id: uuid.UUID,
    actor: Actor,
    patch: Union[ComplaintUpdate, dict],
) -> Complaint:
    complaint = get_visible_complaint(store, complaint_id, actor)
    fields = authorization.plan_edit(complaint, actor, patch)

    if not store.patch_complaint(
        complaint_id,
        fields,
        expected_status=ComplaintStatus.submitted,
        expected_submitter=actor.id,
    ):
        store.rollback()
        raise ForbiddenEdit("Complaint can no longer be changed")
    store.commit()

    changed = [name for name in authorization.EDITABLE_FIELDS if name in fields]
    log_action(
        store.session,
        performed_by=actor.id,
        action=AuditAction.EDITED_COMPLAINT,
        details=f"Changed {', '.join(changed)}",
        complaint_id=complaint_id,
    )
    return _require(store, complaint_id)


def delete_complaint(
    store: ComplaintStore,
    complaint_id: uuid.UUID,
    actor: Actor,
    cache: Optional[LocalCache] = None,
):
    complaint = get_visible_complaint(store, complaint_id, actor)
    authorization.ensure_can_delete(complaint, actor)

    if not store.delete_complaint(
        complaint_id,
        expected_status=ComplaintStatus.submitted,
        expected_submitter=actor.id,
    ):
        store.rollback()
        raise ForbiddenEdit("Complaint can no longer be deleted")
    store.commit()

    if cache is not None:
        cache.forget(complaint_id)

    log_action(
        store.session,
        performed_by=actor.id,
        action=AuditAction.DELETED_COMPLAINT,
        details=f"Deleted complaint {complaint_id}",
        complaint_id=complaint_id,
    )
