"""
Unit tests for the authorization rules.
"""
import pytest

from hotel_booking.models import HotelStatus, Role
from hotel_booking.policy import can_mutate, can_view, is_admin


class TestCanMutate:
    """Owner or admin may modify a resource."""

    def test_owner_can_mutate(self):
        assert can_mutate(Role.USER, 7, 7) is True

    def test_non_owner_cannot_mutate(self):
        assert can_mutate(Role.USER, 9, 7) is False

    @pytest.mark.parametrize("actor_id", [1, 7, 9, 1000])
    def test_admin_can_mutate_anything(self, actor_id):
        assert can_mutate(Role.ADMIN, actor_id, 7) is True

    def test_plain_string_roles_are_accepted(self):
        assert can_mutate("ADMIN", 1, 7) is True
        assert can_mutate("USER", 1, 7) is False

    def test_unknown_role_is_rejected(self):
        with pytest.raises(ValueError):
            can_mutate("SUPERUSER", 1, 7)


class TestCanView:
    """Approved hotels are public; the rest only for owner and admins."""

    def test_pending_hotel_visible_to_owner(self):
        assert can_view(HotelStatus.PENDING, 3, Role.USER, 3) is True

    def test_pending_hotel_hidden_from_other_user(self):
        assert can_view(HotelStatus.PENDING, 3, Role.USER, 4) is False

    def test_pending_hotel_visible_to_admin(self):
        assert can_view(HotelStatus.PENDING, 3, Role.ADMIN, 99) is True

    def test_anonymous_sees_only_approved(self):
        assert can_view(HotelStatus.APPROVED, 3) is True
        for status in (HotelStatus.DRAFT, HotelStatus.PENDING, HotelStatus.OFFLINE):
            assert can_view(status, 3) is False

    def test_is_admin_for_anonymous(self):
        assert is_admin(None) is False
