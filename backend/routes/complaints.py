import uuid
from typing import List
from fastapi import APIRouter, Depends, File, Form, HTTPException, Response, UploadFile
from sqlmodel import Session, select
from core.config import settings
from core.database import get_session
from core.exceptions import ForbiddenEdit
from models.audit_log import AuditLog
from models.complaints import ComplaintStatus
from models.roles import Actor
from schemas.complaints import (
    AuditLogRead,
    ComplaintCreate,
    ComplaintDetail,
    ComplaintRead,
    VoteRequest,
    VoteResult,
)
from services import complaints as complaint_service
from services import records
from services.local_cache import LocalCache
from services.store import ComplaintStore
from services.uploads import upload_image
from utils.security import get_current_actor

router = APIRouter(tags=["Complaints"])


def get_store(session: Session = Depends(get_session)) -> ComplaintStore:
    return ComplaintStore(session)


def get_local_cache() -> LocalCache:
    return LocalCache(settings.LOCAL_CACHE_PATH)


def _parse_id(complaint_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(complaint_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid UUID format")


@router.post("/", response_model=ComplaintRead, status_code=201)
async def create_complaint(
    description: str = Form(""),
    category: str | None = Form(None),
    visibility: str | None = Form(None),
    file: UploadFile | None = File(None),
    store: ComplaintStore = Depends(get_store),
    cache: LocalCache = Depends(get_local_cache),
    actor: Actor = Depends(get_current_actor),
):
    data = ComplaintCreate(description=description, category=category, visibility=visibility)

    image_url: str | None = None
    if file:
        # reject bad input before anything is uploaded
        if not actor.is_student:
            raise ForbiddenEdit("Only students can submit complaints")
        records.validate_description(data.description)
        records.parse_category(data.category)
        records.parse_visibility(data.visibility)
        image_url = await upload_image(file)

    complaint = complaint_service.submit_complaint(store, data, actor, image_url=image_url)
    cache.save_local(complaint)
    return complaint


@router.get("/", response_model=List[ComplaintRead])
def list_complaints(
    response: Response,
    tab: ComplaintStatus = ComplaintStatus.submitted,
    store: ComplaintStore = Depends(get_store),
    cache: LocalCache = Depends(get_local_cache),
    actor: Actor = Depends(get_current_actor),
):
    """
    The caller's feed for one status tab, most upvoted first.
    """
    feed, source = complaint_service.list_feed(store, cache, actor, tab)
    response.headers["X-Feed-Source"] = source
    return feed


@router.get("/audit-logs/{complaint_id}", response_model=List[AuditLogRead])
def complaint_audit_logs(
    complaint_id: str,
    session: Session = Depends(get_session),
    actor: Actor = Depends(get_current_actor),
):
    if actor.is_student:
        raise HTTPException(status_code=403, detail="Wardens and staff only")

    logs = session.exec(
        select(AuditLog)
        .where(AuditLog.complaint_id == _parse_id(complaint_id))
        .order_by(AuditLog.created_at)
    ).all()
    return logs


@router.get("/{complaint_id}", response_model=ComplaintDetail)
def get_complaint_by_id(
    complaint_id: str,
    store: ComplaintStore = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    """
    Retrieve a complaint by its ID, with the caller's own vote.
    """
    complaint_uuid = _parse_id(complaint_id)
    complaint = complaint_service.get_visible_complaint(store, complaint_uuid, actor)
    detail = ComplaintDetail.model_validate(complaint)
    detail.my_vote = complaint_service.get_my_vote(store, complaint_uuid, actor)
    return detail


@router.patch("/{complaint_id}", response_model=ComplaintRead)
def update_complaint(
    complaint_id: str,
    patch: dict,
    store: ComplaintStore = Depends(get_store),
    cache: LocalCache = Depends(get_local_cache),
    actor: Actor = Depends(get_current_actor),
):
    # plain dict so unknown fields reach the edit rules and get a 400
    complaint = complaint_service.edit_complaint(store, _parse_id(complaint_id), actor, patch)
    cache.save_local(complaint)
    return complaint


@router.delete("/{complaint_id}")
def delete_complaint(
    complaint_id: str,
    store: ComplaintStore = Depends(get_store),
    cache: LocalCache = Depends(get_local_cache),
    actor: Actor = Depends(get_current_actor),
):
    complaint_service.delete_complaint(store, _parse_id(complaint_id), actor, cache=cache)
    return {"detail": f"Complaint {complaint_id} deleted"}


@router.post("/{complaint_id}/vote", response_model=VoteResult)
def vote_on_complaint(
    complaint_id: str,
    req: VoteRequest,
    store: ComplaintStore = Depends(get_store),
    actor: Actor = Depends(get_current_actor),
):
    complaint_uuid = _parse_id(complaint_id)
    votes, direction = complaint_service.cast_vote(store, complaint_uuid, req.direction, actor)
    return VoteResult(complaint_id=complaint_uuid, votes=votes, direction=direction)


@router.post("/{complaint_id}/approve", response_model=ComplaintRead)
def approve_complaint(
    complaint_id: str,
    store: ComplaintStore = Depends(get_store),
    cache: LocalCache = Depends(get_local_cache),
    actor: Actor = Depends(get_current_actor),
):
    complaint = complaint_service.approve(store, _parse_id(complaint_id), actor)
    cache.save_local(complaint)
    return complaint


@router.post("/{complaint_id}/fix", response_model=ComplaintRead)
def mark_complaint_fixed(
    complaint_id: str,
    store: ComplaintStore = Depends(get_store),
    cache: LocalCache = Depends(get_local_cache),
    actor: Actor = Depends(get_current_actor),
):
    complaint = complaint_service.mark_fixed(store, _parse_id(complaint_id), actor)
    cache.save_local(complaint)
    return complaint
