from .base import utcnow
from .hotels import HotelService
from .rooms import RoomService
from .users import UserService

__all__ = ["HotelService", "RoomService", "UserService", "utcnow"]
