import uuid

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import SQLModel, Session, create_engine, select

from core.exceptions import StoreUnavailable
from models.complaints import Complaint, ComplaintStatus
from models.vote import ComplaintVote, VoteDirection
from services.store import ComplaintStore


@pytest.fixture
def file_engine(tmp_path):
    # separate connections per session, unlike the shared in-memory engine
    engine = create_engine(
        f"sqlite:///{tmp_path / 'store.db'}",
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


def _seed(engine, status=ComplaintStatus.submitted) -> uuid.UUID:
    with Session(engine) as session:
        complaint = Complaint(description="Corridor light out", status=status, submitter_id=uuid.uuid4())
        session.add(complaint)
        session.commit()
        return complaint.id


def test_vote_deltas_from_two_sessions_both_land(file_engine):
    complaint_id = _seed(file_engine)

    with Session(file_engine) as first, Session(file_engine) as second:
        store_a, store_b = ComplaintStore(first), ComplaintStore(second)
        # both sessions saw a tally of 0 before writing
        assert store_a.get_complaint(complaint_id).votes == 0
        assert store_b.get_complaint(complaint_id).votes == 0

        assert store_a.apply_vote_delta(complaint_id, 1)
        store_a.commit()
        assert store_b.apply_vote_delta(complaint_id, 1)
        store_b.commit()

    with Session(file_engine) as session:
        assert session.get(Complaint, complaint_id).votes == 2


def test_status_compare_and_set_lets_one_writer_win(file_engine):
    complaint_id = _seed(file_engine)
    first_warden, second_warden = uuid.uuid4(), uuid.uuid4()

    with Session(file_engine) as first, Session(file_engine) as second:
        store_a, store_b = ComplaintStore(first), ComplaintStore(second)
        assert store_a.get_complaint(complaint_id).status == ComplaintStatus.submitted
        assert store_b.get_complaint(complaint_id).status == ComplaintStatus.submitted

        assert store_b.patch_complaint(
            complaint_id,
            {"status": ComplaintStatus.approved, "approved_by": second_warden},
            expected_status=ComplaintStatus.submitted,
        )
        store_b.commit()

        assert not store_a.patch_complaint(
            complaint_id,
            {"status": ComplaintStatus.approved, "approved_by": first_warden},
            expected_status=ComplaintStatus.submitted,
        )
        store_a.rollback()

    with Session(file_engine) as session:
        assert session.get(Complaint, complaint_id).approved_by == second_warden


def test_vote_delta_refused_once_approved(file_engine):
    complaint_id = _seed(file_engine, status=ComplaintStatus.approved)

    with Session(file_engine) as session:
        store = ComplaintStore(session)
        assert not store.apply_vote_delta(complaint_id, 1)
        store.commit()
        assert store.get_complaint(complaint_id).votes == 0


def test_overlapping_toggle_offs_from_one_voter_apply_once(file_engine):
    complaint_id = _seed(file_engine)
    voter = uuid.uuid4()
    with Session(file_engine) as session:
        store = ComplaintStore(session)
        assert store.apply_vote_delta(complaint_id, 1)
        assert store.set_vote_direction(complaint_id, voter, VoteDirection.up)
        store.commit()

    with Session(file_engine) as first, Session(file_engine) as second:
        store_a, store_b = ComplaintStore(first), ComplaintStore(second)
        # both requests read "up" and plan a toggle-off
        assert store_a.get_vote_direction(complaint_id, voter) == VoteDirection.up
        assert store_b.get_vote_direction(complaint_id, voter) == VoteDirection.up

        assert store_a.apply_vote_delta(complaint_id, -1)
        assert store_a.set_vote_direction(complaint_id, voter, None, expected=VoteDirection.up)
        store_a.commit()

        assert store_b.apply_vote_delta(complaint_id, -1)
        assert not store_b.set_vote_direction(complaint_id, voter, None, expected=VoteDirection.up)
        store_b.rollback()

    with Session(file_engine) as session:
        assert session.get(Complaint, complaint_id).votes == 0
        assert ComplaintStore(session).get_vote_direction(complaint_id, voter) is None


def test_overlapping_first_votes_from_one_voter_apply_once(file_engine):
    complaint_id = _seed(file_engine)
    voter = uuid.uuid4()

    with Session(file_engine) as first, Session(file_engine) as second:
        store_a, store_b = ComplaintStore(first), ComplaintStore(second)
        assert store_a.get_vote_direction(complaint_id, voter) is None
        assert store_b.get_vote_direction(complaint_id, voter) is None

        assert store_a.apply_vote_delta(complaint_id, 1)
        assert store_a.set_vote_direction(complaint_id, voter, VoteDirection.up)
        store_a.commit()

        assert store_b.apply_vote_delta(complaint_id, 1)
        assert not store_b.set_vote_direction(complaint_id, voter, VoteDirection.up)
        store_b.rollback()

    with Session(file_engine) as session:
        assert session.get(Complaint, complaint_id).votes == 1


def test_vote_direction_rows(store):
    complaint_id, voter = uuid.uuid4(), uuid.uuid4()

    assert store.get_vote_direction(complaint_id, voter) is None
    assert store.set_vote_direction(complaint_id, voter, VoteDirection.up)
    store.commit()
    assert store.get_vote_direction(complaint_id, voter) == VoteDirection.up

    # a stale expectation writes nothing
    assert not store.set_vote_direction(complaint_id, voter, None, expected=VoteDirection.down)
    assert store.set_vote_direction(complaint_id, voter, VoteDirection.down, expected=VoteDirection.up)
    store.commit()
    assert store.get_vote_direction(complaint_id, voter) == VoteDirection.down

    assert store.set_vote_direction(complaint_id, voter, None, expected=VoteDirection.down)
    store.commit()
    assert store.get_vote_direction(complaint_id, voter) is None
    assert store.session.exec(select(ComplaintVote)).all() == []


def test_delete_is_guarded_and_drops_votes(store, session):
    owner = uuid.uuid4()
    complaint = Complaint(description="Window glass cracked", submitter_id=owner)
    session.add(complaint)
    session.commit()
    complaint_id = complaint.id
    store.set_vote_direction(complaint_id, uuid.uuid4(), VoteDirection.up)
    store.commit()

    assert not store.delete_complaint(complaint_id, ComplaintStatus.submitted, expected_submitter=uuid.uuid4())
    assert store.delete_complaint(complaint_id, ComplaintStatus.submitted, expected_submitter=owner)
    store.commit()

    assert store.get_complaint(complaint_id) is None
    assert session.exec(select(ComplaintVote)).all() == []


def test_operational_errors_become_store_unavailable(store, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("unable to open database file"))

    monkeypatch.setattr(store.session, "exec", broken)

    with pytest.raises(StoreUnavailable):
        store.get_all_complaints()
    with pytest.raises(StoreUnavailable):
        store.apply_vote_delta(uuid.uuid4(), 1)
