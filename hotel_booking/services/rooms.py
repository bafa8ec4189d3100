"""
Room operations. A room has no owner of its own: every permission check is
made against the owner of its parent hotel.
"""
import logging
from typing import List, Optional, Tuple

from .. import models
from ..errors import HotelNotApproved, InsufficientStock, NotFound, PermissionDenied
from ..models import HotelStatus, Role, RoomStatus
from ..policy import can_mutate, can_view
from ..repositories import HotelRepository, RoomRepository
from .base import Clock, apply_changes, utcnow

logger = logging.getLogger(__name__)

CREATE_FIELDS = ("name", "price", "stock", "description", "facilities")
UPDATE_FIELDS = CREATE_FIELDS + ("status",)


class RoomService:
    def __init__(self, rooms: RoomRepository, hotels: HotelRepository, clock: Clock = utcnow):
        self.rooms = rooms
        self.hotels = hotels
        self.clock = clock

    def _load_with_hotel(self, room_id: int) -> Tuple[models.Room, models.Hotel]:
        found = self.rooms.get_with_hotel(room_id)
        if found is None:
            raise NotFound("Room not found")
        return found

    def _authorize(self, hotel: models.Hotel, actor_id: int, actor_role: Role, verb: str) -> None:
        if not can_mutate(actor_role, actor_id, hotel.owner_id):
            logger.warning(
                "user %s (%s) denied %s on rooms of hotel %s", actor_id, actor_role, verb, hotel.id
            )
            raise PermissionDenied(f"Not allowed to {verb} rooms of this hotel")

    def create_room(self, hotel_id: int, data: dict, actor_id: int, actor_role: Role) -> models.Room:
        """
        Add a room type to a hotel.

        The hotel must exist, the actor must be its owner or an admin, and the
        hotel must already be APPROVED.
        """
        hotel = self.hotels.get(hotel_id)
        if hotel is None:
            raise NotFound("Hotel not found")
        self._authorize(hotel, actor_id, actor_role, "add")
        if hotel.status != HotelStatus.APPROVED:
            logger.warning("room rejected: hotel %s is %s", hotel.id, hotel.status)
            raise HotelNotApproved()

        now = self.clock()
        room = models.Room(facilities=[])
        apply_changes(room, data, CREATE_FIELDS)
        room.hotel_id = hotel.id
        room.status = RoomStatus.ON
        room.created_at = now
        room.updated_at = now
        room = self.rooms.add(room)
        logger.info("room %s added to hotel %s by user %s", room.id, hotel.id, actor_id)
        return room

    def get_room(
        self, room_id: int, actor_id: Optional[int] = None, actor_role: Optional[Role] = None
    ) -> models.Room:
        """Rooms of hidden hotels are hidden too."""
        room, hotel = self._load_with_hotel(room_id)
        if not can_view(hotel.status, hotel.owner_id, actor_role, actor_id):
            raise NotFound("Room not found")
        return room

    def update_room(self, room_id: int, data: dict, actor_id: int, actor_role: Role) -> models.Room:
        room, hotel = self._load_with_hotel(room_id)
        self._authorize(hotel, actor_id, actor_role, "update")
        apply_changes(room, data, UPDATE_FIELDS)
        room.updated_at = self.clock()
        return self.rooms.save(room)

    def delete_room(self, room_id: int, actor_id: int, actor_role: Role) -> None:
        room, hotel = self._load_with_hotel(room_id)
        self._authorize(hotel, actor_id, actor_role, "delete")
        self.rooms.remove(room)
        logger.info("room %s of hotel %s deleted by user %s", room_id, hotel.id, actor_id)

    def list_rooms_by_hotel(
        self, hotel_id: int, actor_id: Optional[int] = None, actor_role: Optional[Role] = None
    ) -> List[models.Room]:
        """Bookable (ON) rooms of a hotel, cheapest first. Hidden hotels answer NotFound."""
        hotel = self.hotels.get(hotel_id)
        if hotel is None or not can_view(hotel.status, hotel.owner_id, actor_role, actor_id):
            raise NotFound("Hotel not found")
        return self.rooms.list_by_hotel(hotel.id, status=RoomStatus.ON)

    def adjust_stock(self, room_id: int, delta: int) -> int:
        """
        Add ``delta`` (positive or negative) to a room's stock and return the
        new value. Stock never goes below zero: such a request fails and the
        stored stock is left as it was.
        """
        room = self.rooms.get(room_id)
        if room is None:
            raise NotFound("Room not found")
        new_stock = room.stock + delta
        if new_stock < 0:
            logger.warning("room %s: stock %s cannot absorb %s", room.id, room.stock, delta)
            raise InsufficientStock(room.stock, delta)
        room.stock = new_stock
        room.updated_at = self.clock()
        room = self.rooms.save(room)
        logger.info("room %s: stock %+d -> %s", room.id, delta, room.stock)
        return room.stock
