import logging
import uuid
from typing import Optional

from sqlmodel import Session

from models.audit_log import AuditAction, AuditLog
from utils.dates import utcnow

logger = logging.getLogger(__name__)


# Helper: Audit log
def log_action(
    session: Session,
    performed_by: uuid.UUID,
    action: AuditAction,
    details: Optional[str] = None,
    complaint_id: Optional[uuid.UUID] = None,
):
    logger.info("user=%s action=%s details=%s", performed_by, action.value, details)
    audit = AuditLog(
        action=action.value,
        details=details,
        complaint_id=complaint_id,
        user_id=performed_by,
        created_at=utcnow(),
    )
    session.add(audit)
    session.commit()
