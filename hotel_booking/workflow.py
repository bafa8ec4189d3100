"""
Hotel status workflow.

    DRAFT --submit--> PENDING --approve--> APPROVED
      ^                  |
      +------reject------+

    any --offline--> OFFLINE
    any --edit of name/city/address--> PENDING
    APPROVED --publish--> APPROVED

``publish`` only confirms that the hotel is live; it never changes the stored
status. There is no direct way back from OFFLINE to APPROVED: the owner edits
the hotel, which sends it to review again.
"""
import enum

from .errors import InvalidStateTransition
from .models import HotelStatus


class HotelAction(str, enum.Enum):
    SUBMIT = "submit"
    APPROVE = "approve"
    REJECT = "reject"
    PUBLISH = "publish"
    OFFLINE = "offline"
    EDIT = "edit"


ANY_STATUS = frozenset(HotelStatus)

# action -> (allowed source statuses, target status)
TRANSITIONS = {
    HotelAction.SUBMIT: (frozenset({HotelStatus.DRAFT}), HotelStatus.PENDING),
    HotelAction.APPROVE: (frozenset({HotelStatus.PENDING}), HotelStatus.APPROVED),
    HotelAction.REJECT: (frozenset({HotelStatus.PENDING}), HotelStatus.DRAFT),
    HotelAction.PUBLISH: (frozenset({HotelStatus.APPROVED}), HotelStatus.APPROVED),
    HotelAction.OFFLINE: (ANY_STATUS, HotelStatus.OFFLINE),
    HotelAction.EDIT: (ANY_STATUS, HotelStatus.PENDING),
}

# Changing any of these sends the hotel back to review.
REVIEWED_FIELDS = ("name", "city", "address")


def next_status(current: HotelStatus, action: HotelAction) -> HotelStatus:
    """Return the status ``action`` leads to, or raise InvalidStateTransition."""
    current = HotelStatus(current)
    allowed, target = TRANSITIONS[HotelAction(action)]
    if current not in allowed:
        raise InvalidStateTransition(current, HotelAction(action))
    return target


def needs_review(hotel, changes: dict) -> bool:
    """True when ``changes`` alters a field that approval depends on."""
    return any(
        field in changes and changes[field] != getattr(hotel, field)
        for field in REVIEWED_FIELDS
    )
