import logging
import uuid
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlmodel import Session, select

from core.exceptions import StoreUnavailable
from models.complaints import Complaint, ComplaintStatus
from models.user import User
from models.vote import ComplaintVote, VoteDirection
from utils.dates import utcnow

logger = logging.getLogger(__name__)


class ComplaintStore:
    """
    Database access for the complaint core.

    Writes that other sessions may race on are single guarded UPDATE/DELETE
    statements: the tally moves by a delta inside the database and status
    changes only happen while the row still has the expected status.
    """

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _guard(self, operation: str):
        try:
            yield
        except OperationalError as e:
            self.session.rollback()
            logger.error("Store error during %s: %s", operation, e)
            raise StoreUnavailable(f"Complaint store unavailable ({operation})") from e

    # --- reads ---

    def get_all_complaints(self) -> List[Complaint]:
        with self._guard("get_all_complaints"):
            return list(self.session.exec(select(Complaint)).all())

    def get_complaint(self, complaint_id: uuid.UUID) -> Optional[Complaint]:
        with self._guard("get_complaint"):
            return self.session.get(Complaint, complaint_id)

    def get_user_profile(self, user_id: uuid.UUID) -> Optional[User]:
        with self._guard("get_user_profile"):
            return self.session.get(User, user_id)

    def get_vote_direction(self, complaint_id: uuid.UUID, voter_id: uuid.UUID) -> Optional[VoteDirection]:
        with self._guard("get_vote_direction"):
            vote = self._vote_row(complaint_id, voter_id)
            return vote.direction if vote else None

    # --- writes ---

    def put_complaint(self, complaint: Complaint) -> Complaint:
        with self._guard("put_complaint"):
            self.session.add(complaint)
            self.session.flush()
            return complaint

    def patch_complaint(
        self,
        complaint_id: uuid.UUID,
        fields: dict,
        expected_status: ComplaintStatus,
        expected_submitter: Optional[uuid.UUID] = None,
    ) -> bool:
        """Compare-and-set: write ``fields`` only if the row still has ``expected_status``."""
        statement = update(Complaint).where(
            Complaint.id == complaint_id,
            Complaint.status == expected_status,
        )
        if expected_submitter is not None:
            statement = statement.where(Complaint.submitter_id == expected_submitter)

        with self._guard("patch_complaint"):
            result = self.session.exec(statement.values(**fields))
            return result.rowcount == 1

    def delete_complaint(
        self,
        complaint_id: uuid.UUID,
        expected_status: ComplaintStatus,
        expected_submitter: uuid.UUID,
    ) -> bool:
        with self._guard("delete_complaint"):
            result = self.session.exec(
                delete(Complaint).where(
                    Complaint.id == complaint_id,
                    Complaint.status == expected_status,
                    Complaint.submitter_id == expected_submitter,
                )
            )
            if result.rowcount != 1:
                return False
            # votes on a deleted complaint must not linger
            self.session.exec(delete(ComplaintVote).where(ComplaintVote.complaint_id == complaint_id))
            return True

    def apply_vote_delta(self, complaint_id: uuid.UUID, delta: int) -> bool:
        """Atomically add ``delta`` to the tally while the complaint is Submitted."""
        with self._guard("apply_vote_delta"):
            result = self.session.exec(
                update(Complaint)
                .where(
                    Complaint.id == complaint_id,
                    Complaint.status == ComplaintStatus.submitted,
                )
                .values(votes=Complaint.votes + delta)
            )
            return result.rowcount == 1

    def set_vote_direction(
        self,
        complaint_id: uuid.UUID,
        voter_id: uuid.UUID,
        direction: Optional[VoteDirection],
        expected: Optional[VoteDirection] = None,
    ) -> bool:
        """
        Compare-and-set the voter's direction: only writes while the stored
        direction is still ``expected`` (``None`` meaning no row yet).

        Returns False when another request got there first. The caller must
        roll back whatever tally delta it applied in the same transaction
        (a refused insert has already rolled the session back).
        """
        match = (
            ComplaintVote.complaint_id == complaint_id,
            ComplaintVote.voter_id == voter_id,
            ComplaintVote.direction == expected,
        )
        with self._guard("set_vote_direction"):
            if expected is None:
                if direction is None:
                    return self._vote_row(complaint_id, voter_id) is None
                # the unique (complaint_id, voter_id) constraint refuses a second insert
                self.session.add(ComplaintVote(complaint_id=complaint_id, voter_id=voter_id, direction=direction))
                try:
                    self.session.flush()
                except IntegrityError:
                    self.session.rollback()
                    return False
                return True
            if direction is None:
                result = self.session.exec(delete(ComplaintVote).where(*match))
            else:
                result = self.session.exec(
                    update(ComplaintVote).where(*match).values(direction=direction, cast_at=utcnow())
                )
            return result.rowcount == 1

    def commit(self):
        with self._guard("commit"):
            self.session.commit()

    def rollback(self):
        self.session.rollback()

    def _vote_row(self, complaint_id: uuid.UUID, voter_id: uuid.UUID) -> Optional[ComplaintVote]:
        return self.session.exec(
            select(ComplaintVote).where(
                ComplaintVote.complaint_id == complaint_id,
                ComplaintVote.voter_id == voter_id,
            )
        ).first()
