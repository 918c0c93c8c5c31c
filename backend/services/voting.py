"""
Up/down vote toggling.

Each voter has at most one direction per complaint. Casting the same
direction again retracts it, casting the opposite one switches it. The
complaint tally therefore always equals the sum of +1 for every "up" and
-1 for every "down" currently held by voters.
"""
from typing import NamedTuple, Optional

from models.complaints import ComplaintStatus
from models.roles import Actor
from models.vote import VoteDirection

_WEIGHT = {VoteDirection.up: 1, VoteDirection.down: -1}


class VotePlan(NamedTuple):
    delta: int
    direction: Optional[VoteDirection]
    applied: bool


def weight(direction: Optional[VoteDirection]) -> int:
    return _WEIGHT[direction] if direction is not None else 0


def toggle(prior: Optional[VoteDirection], direction: VoteDirection) -> Optional[VoteDirection]:
    if prior == direction:
        return None
    return direction


def vote_delta(prior: Optional[VoteDirection], direction: VoteDirection):
    """Return (tally delta, voter's new direction) for one cast."""
    new_direction = toggle(prior, direction)
    return weight(new_direction) - weight(prior), new_direction


def plan_vote(
    complaint,
    viewer: Actor,
    prior: Optional[VoteDirection],
    direction: VoteDirection,
) -> VotePlan:
    # only students vote, and only while the complaint is still open
    if not viewer.is_student or complaint.status != ComplaintStatus.submitted:
        return VotePlan(delta=0, direction=prior, applied=False)

    delta, new_direction = vote_delta(prior, VoteDirection(direction))
    return VotePlan(delta=delta, direction=new_direction, applied=True)
