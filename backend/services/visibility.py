"""Which complaints a viewer's feed contains, and in what order."""
from typing import Iterable, List

from models.complaints import ComplaintStatus, ComplaintVisibility
from models.roles import Actor, Student, role_wing


def is_visible(complaint, viewer: Actor) -> bool:
    # owners always see their own complaint
    if complaint.submitter_id == viewer.id:
        return True

    if isinstance(viewer.role, Student):
        if complaint.visibility != ComplaintVisibility.public:
            return False
        return complaint.hostel_type is not None and complaint.hostel_type == viewer.hostel_gender

    wing = role_wing(viewer.role)
    if wing is not None:
        return complaint.hostel_type == wing

    # wardens/staff without a wing see everything
    return True


def in_tab(complaint, tab: ComplaintStatus) -> bool:
    return complaint.status == tab


def build_feed(complaints: Iterable, viewer: Actor, tab: ComplaintStatus) -> List:
    """Visible complaints in the selected status tab, highest votes first."""
    visible = [c for c in complaints if is_visible(c, viewer) and in_tab(c, tab)]
    return sorted(visible, key=lambda c: c.votes, reverse=True)
