"""
Authorization rules shared by the hotel and room services.

``can_mutate`` guards every write, ``can_view`` guards reads of hotels that
are not yet (or no longer) public. Both are pure functions of the actor and
the resource owner.
"""
from typing import Optional

from .models import HotelStatus, Role


def is_admin(role: Optional[Role]) -> bool:
    """
    Exhaustive role check.

    Anonymous callers (``None``) are never admins. Any value that is not a
    member of :class:`Role` is rejected instead of silently treated as a user.
    """
    if role is None:
        return False
    role = Role(role)
    if role is Role.ADMIN:
        return True
    if role is Role.USER:
        return False
    raise ValueError(f"Unknown role: {role!r}")


def can_mutate(actor_role: Role, actor_id: int, owner_id: int) -> bool:
    """Admins may modify anything; everyone else only what they own."""
    return is_admin(actor_role) or actor_id == owner_id


def can_view(
    status: HotelStatus,
    owner_id: int,
    actor_role: Optional[Role] = None,
    actor_id: Optional[int] = None,
) -> bool:
    """Approved hotels are public; others are visible to their owner and admins."""
    if HotelStatus(status) is HotelStatus.APPROVED:
        return True
    if is_admin(actor_role):
        return True
    return actor_id is not None and actor_id == owner_id
