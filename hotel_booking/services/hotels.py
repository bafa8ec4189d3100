"""
Hotel operations: CRUD, the review workflow and read-side visibility.
"""
import logging
import math
from typing import List, Optional

from .. import models
from ..errors import NotFound, PermissionDenied
from ..models import HotelStatus, Role, RoomStatus
from ..policy import can_mutate, can_view, is_admin
from ..repositories import HotelFilter, HotelRepository, RoomRepository
from ..workflow import HotelAction, needs_review, next_status
from .base import Clock, apply_changes, utcnow

logger = logging.getLogger(__name__)

# Fields a client may set; status and owner_id are managed here.
EDITABLE_FIELDS = (
    "name",
    "city",
    "address",
    "description",
    "star",
    "tags",
    "price",
    "promo",
    "cover_image",
    "intro",
)


class HotelService:
    """Hotel lifecycle on top of the hotel and room repositories."""

    def __init__(self, hotels: HotelRepository, rooms: RoomRepository, clock: Clock = utcnow):
        self.hotels = hotels
        self.rooms = rooms
        self.clock = clock

    # ============== lookups ==============

    def _load(self, hotel_id: int) -> models.Hotel:
        hotel = self.hotels.get(hotel_id)
        if hotel is None:
            raise NotFound("Hotel not found")
        return hotel

    def _load_owned(self, hotel_id: int, actor_id: int) -> models.Hotel:
        """Owner-only actions: admins are not the owner either."""
        hotel = self._load(hotel_id)
        if hotel.owner_id != actor_id:
            logger.warning("user %s is not the owner of hotel %s", actor_id, hotel_id)
            raise PermissionDenied("Only the hotel owner can do this")
        return hotel

    def _authorize(self, hotel: models.Hotel, actor_id: int, actor_role: Role, verb: str) -> None:
        if not can_mutate(actor_role, actor_id, hotel.owner_id):
            logger.warning("user %s (%s) denied %s on hotel %s", actor_id, actor_role, verb, hotel.id)
            raise PermissionDenied(f"Not allowed to {verb} this hotel")

    def _transition(self, hotel: models.Hotel, action: HotelAction) -> models.Hotel:
        previous = hotel.status
        hotel.status = next_status(hotel.status, action)
        hotel.updated_at = self.clock()
        hotel = self.hotels.save(hotel)
        logger.info("hotel %s: %s -> %s (%s)", hotel.id, previous, hotel.status, action.value)
        return hotel

    # ============== CRUD ==============

    def create_hotel(self, data: dict, owner_id: int) -> models.Hotel:
        """New hotels always start as DRAFT and belong to their creator."""
        now = self.clock()
        hotel = models.Hotel(tags=[])
        apply_changes(hotel, data, EDITABLE_FIELDS)
        hotel.owner_id = owner_id
        hotel.status = HotelStatus.DRAFT
        hotel.created_at = now
        hotel.updated_at = now
        hotel = self.hotels.add(hotel)
        logger.info("hotel %s created by user %s", hotel.id, owner_id)
        return hotel

    def update_hotel(self, hotel_id: int, data: dict, actor_id: int, actor_role: Role) -> models.Hotel:
        """
        Patch a hotel. Changing its name, city or address sends it back to
        review (PENDING), whatever its current status.
        """
        hotel = self._load(hotel_id)
        self._authorize(hotel, actor_id, actor_role, "update")

        changes = {name: value for name, value in data.items() if name in EDITABLE_FIELDS}
        review = needs_review(hotel, changes)
        apply_changes(hotel, changes, EDITABLE_FIELDS)
        if review:
            previous = hotel.status
            hotel.status = next_status(hotel.status, HotelAction.EDIT)
            logger.info("hotel %s: %s -> %s (edit)", hotel.id, previous, hotel.status)
        hotel.updated_at = self.clock()
        return self.hotels.save(hotel)

    def get_hotel(
        self, hotel_id: int, actor_id: Optional[int] = None, actor_role: Optional[Role] = None
    ) -> models.Hotel:
        """Unapproved hotels look missing to everyone but their owner and admins."""
        hotel = self._load(hotel_id)
        if not can_view(hotel.status, hotel.owner_id, actor_role, actor_id):
            raise NotFound("Hotel not found")
        return hotel

    def get_hotel_rooms(self, hotel: models.Hotel) -> List[models.Room]:
        return self.rooms.list_by_hotel(hotel.id, status=RoomStatus.ON)

    def list_hotels(self, query, actor_role: Optional[Role] = None) -> dict:
        """
        Paginated search. Non-admins only ever see APPROVED hotels; admins see
        every status and may narrow it with ``query.status``.
        """
        if is_admin(actor_role):
            statuses = [query.status] if query.status is not None else None
        else:
            statuses = [HotelStatus.APPROVED]
        return self._search(query, statuses=statuses)

    def list_owned_hotels(self, owner_id: int, query) -> dict:
        """An owner's own hotels, in any status."""
        statuses = [query.status] if query.status is not None else None
        return self._search(query, statuses=statuses, owner_id=owner_id)

    def _search(self, query, statuses=None, owner_id=None) -> dict:
        criteria = HotelFilter(
            city=query.city,
            keyword=query.keyword,
            min_price=query.min_price,
            max_price=query.max_price,
            tags=query.tag_list(),
            statuses=statuses,
            owner_id=owner_id,
            offset=(query.page - 1) * query.limit,
            limit=query.limit,
        )
        items, total = self.hotels.search(criteria)
        return {
            "items": items,
            "total": total,
            "page": query.page,
            "limit": query.limit,
            "total_pages": math.ceil(total / query.limit),
        }

    def delete_hotel(self, hotel_id: int, actor_id: int, actor_role: Role) -> None:
        """Delete a hotel together with all of its rooms."""
        hotel = self._load(hotel_id)
        self._authorize(hotel, actor_id, actor_role, "delete")
        removed = self.rooms.remove_with_hotel(hotel)
        logger.info("hotel %s deleted by user %s (%d rooms removed)", hotel_id, actor_id, removed)

    # ============== workflow ==============

    def submit_for_review(self, hotel_id: int, actor_id: int) -> models.Hotel:
        hotel = self._load_owned(hotel_id, actor_id)
        return self._transition(hotel, HotelAction.SUBMIT)

    def approve_hotel(self, hotel_id: int) -> models.Hotel:
        # callers have already checked for ADMIN
        return self._transition(self._load(hotel_id), HotelAction.APPROVE)

    def reject_hotel(self, hotel_id: int) -> models.Hotel:
        return self._transition(self._load(hotel_id), HotelAction.REJECT)

    def publish_hotel(self, hotel_id: int, actor_id: int) -> models.Hotel:
        """Confirm an approved hotel is live. The stored record is not touched."""
        hotel = self._load_owned(hotel_id, actor_id)
        next_status(hotel.status, HotelAction.PUBLISH)
        logger.info("hotel %s published by user %s", hotel.id, actor_id)
        return hotel

    def offline_hotel(self, hotel_id: int, actor_id: int) -> models.Hotel:
        """Take a hotel off the public listing. Repeating it is a no-op."""
        hotel = self._load_owned(hotel_id, actor_id)
        if hotel.status == HotelStatus.OFFLINE:
            return hotel
        return self._transition(hotel, HotelAction.OFFLINE)
