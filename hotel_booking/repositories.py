"""
Persistence interfaces for users, hotels and rooms.

The services only talk to these abstract repositories. ``Sql*`` classes back
them with a SQLAlchemy session; ``InMemory*`` classes keep records in dicts
and are used to exercise the services without a database.
"""
import abc
import itertools
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import String, or_, type_coerce
from sqlalchemy.orm import Session

from . import models
from .circuit_breaker import persistence_circuit_breaker


@dataclass
class HotelFilter:
    """Criteria for :meth:`HotelRepository.search`. ``None`` means "any"."""

    city: Optional[str] = None
    keyword: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    tags: List[str] = field(default_factory=list)
    statuses: Optional[Iterable[models.HotelStatus]] = None
    owner_id: Optional[int] = None
    offset: int = 0
    limit: int = 10

    def matches(self, hotel: models.Hotel) -> bool:
        if self.statuses is not None and hotel.status not in set(self.statuses):
            return False
        if self.owner_id is not None and hotel.owner_id != self.owner_id:
            return False
        if self.city and hotel.city != self.city:
            return False
        if self.keyword:
            # LIKE in SQLite ignores ASCII case
            keyword = self.keyword.casefold()
            if keyword not in hotel.name.casefold() and keyword not in hotel.address.casefold():
                return False
        if self.min_price is not None and (hotel.price is None or hotel.price < self.min_price):
            return False
        if self.max_price is not None and (hotel.price is None or hotel.price > self.max_price):
            return False
        if self.tags and not set(self.tags) & set(hotel.tags or []):
            return False
        return True


# ---------------------------------------------------------------------------
# Interfaces
# ---------------------------------------------------------------------------
class UserRepository(abc.ABC):
    @abc.abstractmethod
    def get(self, user_id: int) -> Optional[models.User]: ...

    @abc.abstractmethod
    def get_by_username(self, username: str) -> Optional[models.User]: ...

    @abc.abstractmethod
    def add(self, user: models.User) -> models.User: ...


class HotelRepository(abc.ABC):
    @abc.abstractmethod
    def get(self, hotel_id: int) -> Optional[models.Hotel]: ...

    @abc.abstractmethod
    def add(self, hotel: models.Hotel) -> models.Hotel: ...

    @abc.abstractmethod
    def save(self, hotel: models.Hotel) -> models.Hotel: ...

    @abc.abstractmethod
    def remove(self, hotel: models.Hotel) -> None: ...

    @abc.abstractmethod
    def search(self, criteria: HotelFilter) -> Tuple[List[models.Hotel], int]:
        """Return one page of matches, newest first, and the total match count."""


class RoomRepository(abc.ABC):
    @abc.abstractmethod
    def get(self, room_id: int) -> Optional[models.Room]: ...

    @abc.abstractmethod
    def get_with_hotel(self, room_id: int) -> Optional[Tuple[models.Room, models.Hotel]]:
        """Room joined with its parent hotel, or None if either is missing."""

    @abc.abstractmethod
    def add(self, room: models.Room) -> models.Room: ...

    @abc.abstractmethod
    def save(self, room: models.Room) -> models.Room: ...

    @abc.abstractmethod
    def remove(self, room: models.Room) -> None: ...

    @abc.abstractmethod
    def list_by_hotel(
        self, hotel_id: int, status: Optional[models.RoomStatus] = None
    ) -> List[models.Room]:
        """Rooms of a hotel ordered by price, then creation order."""

    @abc.abstractmethod
    def remove_with_hotel(self, hotel: models.Hotel) -> int:
        """
        Delete a hotel and every room it has in one transaction and return
        how many rooms went with it. On failure nothing is removed.
        """


# ---------------------------------------------------------------------------
# SQLAlchemy
# ---------------------------------------------------------------------------
class _SqlRepository:
    def __init__(self, db: Session):
        self.db = db

    def _commit(self) -> None:
        try:
            persistence_circuit_breaker.call(self.db.commit)
        except Exception:
            self.db.rollback()
            raise

    def _persist(self, obj):
        self.db.add(obj)
        self._commit()
        self.db.refresh(obj)
        return obj

    def _delete(self, obj) -> None:
        self.db.delete(obj)
        self._commit()


class SqlUserRepository(_SqlRepository, UserRepository):
    def get(self, user_id):
        return self.db.query(models.User).filter(models.User.id == user_id).first()

    def get_by_username(self, username):
        return self.db.query(models.User).filter(models.User.username == username).first()

    def add(self, user):
        return self._persist(user)


class SqlHotelRepository(_SqlRepository, HotelRepository):
    def get(self, hotel_id):
        return self.db.query(models.Hotel).filter(models.Hotel.id == hotel_id).first()

    def add(self, hotel):
        return self._persist(hotel)

    def save(self, hotel):
        return self._persist(hotel)

    def remove(self, hotel):
        self._delete(hotel)

    def search(self, criteria):
        Hotel = models.Hotel
        query = self.db.query(Hotel)

        if criteria.statuses is not None:
            query = query.filter(Hotel.status.in_(list(criteria.statuses)))
        if criteria.owner_id is not None:
            query = query.filter(Hotel.owner_id == criteria.owner_id)
        if criteria.city:
            query = query.filter(Hotel.city == criteria.city)
        if criteria.keyword:
            query = query.filter(
                or_(
                    Hotel.name.contains(criteria.keyword, autoescape=True),
                    Hotel.address.contains(criteria.keyword, autoescape=True),
                )
            )
        if criteria.min_price is not None:
            query = query.filter(Hotel.price >= criteria.min_price)
        if criteria.max_price is not None:
            query = query.filter(Hotel.price <= criteria.max_price)
        if criteria.tags:
            tags_column = type_coerce(Hotel.tags, String)
            query = query.filter(
                or_(*[tags_column.contains(f",{tag},", autoescape=True) for tag in criteria.tags])
            )

        total = query.count()
        items = (
            query.order_by(Hotel.created_at.desc(), Hotel.id.desc())
            .offset(criteria.offset)
            .limit(criteria.limit)
            .all()
        )
        return items, total


class SqlRoomRepository(_SqlRepository, RoomRepository):
    def get(self, room_id):
        return self.db.query(models.Room).filter(models.Room.id == room_id).first()

    def get_with_hotel(self, room_id):
        row = (
            self.db.query(models.Room, models.Hotel)
            .join(models.Hotel, models.Room.hotel_id == models.Hotel.id)
            .filter(models.Room.id == room_id)
            .first()
        )
        if row is None:
            return None
        return row[0], row[1]

    def add(self, room):
        return self._persist(room)

    def save(self, room):
        return self._persist(room)

    def remove(self, room):
        self._delete(room)

    def list_by_hotel(self, hotel_id, status=None):
        query = self.db.query(models.Room).filter(models.Room.hotel_id == hotel_id)
        if status is not None:
            query = query.filter(models.Room.status == status)
        return query.order_by(models.Room.price.asc(), models.Room.id.asc()).all()

    def remove_with_hotel(self, hotel):
        removed = (
            self.db.query(models.Room)
            .filter(models.Room.hotel_id == hotel.id)
            .delete(synchronize_session=False)
        )
        self.db.delete(hotel)
        self._commit()
        return removed


# ---------------------------------------------------------------------------
# In-memory
# ---------------------------------------------------------------------------
class _InMemoryRepository:
    def __init__(self):
        self.records = {}
        self._ids = itertools.count(1)

    def get(self, record_id):
        return self.records.get(record_id)

    def add(self, obj):
        obj.id = next(self._ids)
        self.records[obj.id] = obj
        return obj

    def save(self, obj):
        self.records[obj.id] = obj
        return obj

    def remove(self, obj):
        self.records.pop(obj.id, None)


class InMemoryUserRepository(_InMemoryRepository, UserRepository):
    def get_by_username(self, username):
        return next((u for u in self.records.values() if u.username == username), None)


class InMemoryHotelRepository(_InMemoryRepository, HotelRepository):
    def search(self, criteria):
        matches = [hotel for hotel in self.records.values() if criteria.matches(hotel)]
        matches.sort(key=lambda hotel: (hotel.created_at, hotel.id), reverse=True)
        return matches[criteria.offset:criteria.offset + criteria.limit], len(matches)


class InMemoryRoomRepository(_InMemoryRepository, RoomRepository):
    def __init__(self, hotels: HotelRepository):
        super().__init__()
        self.hotels = hotels

    def get_with_hotel(self, room_id):
        room = self.records.get(room_id)
        if room is None:
            return None
        hotel = self.hotels.get(room.hotel_id)
        if hotel is None:
            return None
        return room, hotel

    def list_by_hotel(self, hotel_id, status=None):
        rooms = [
            room for room in self.records.values()
            if room.hotel_id == hotel_id and (status is None or room.status == status)
        ]
        return sorted(rooms, key=lambda room: (room.price, room.id))

    def remove_with_hotel(self, hotel):
        doomed = [room_id for room_id, room in self.records.items() if room.hotel_id == hotel.id]
        self.hotels.remove(hotel)
        for room_id in doomed:
            del self.records[room_id]
        return len(doomed)
