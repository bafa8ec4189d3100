import enum

from sqlalchemy import Column, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.types import TypeDecorator

from .database import Base


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class HotelStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    OFFLINE = "OFFLINE"


class RoomStatus(str, enum.Enum):
    ON = "ON"
    OFF = "OFF"


class StringList(TypeDecorator):
    """
    Ordered list of strings stored as one delimited column: ``,a,b,``.

    The leading and trailing delimiters make a single-item match a plain
    ``LIKE '%,item,%'``. Items may not contain the delimiter.
    """

    impl = String
    cache_ok = True

    DELIMITER = ","

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if not value:
            return ""
        return self.DELIMITER + self.DELIMITER.join(value) + self.DELIMITER

    def process_result_value(self, value, dialect):
        if not value:
            return []
        return [item for item in value.split(self.DELIMITER) if item]


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    role = Column(Enum(Role, native_enum=False, length=20), nullable=False, default=Role.USER)
    created_at = Column(DateTime(timezone=True), nullable=True)


class Hotel(Base):
    __tablename__ = "hotels"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    city = Column(String(50), nullable=False, index=True)
    address = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    star = Column(String(20), nullable=True)
    tags = Column(StringList, nullable=False, default=list)
    price = Column(Float, nullable=True)
    promo = Column(String(200), nullable=True)
    cover_image = Column(String, nullable=True)
    intro = Column(String(200), nullable=True)
    status = Column(
        Enum(HotelStatus, native_enum=False, length=20),
        nullable=False,
        default=HotelStatus.DRAFT,
        index=True,
    )
    # immutable after creation
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    hotel_id = Column(Integer, ForeignKey("hotels.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    price = Column(Float, nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    description = Column(Text, nullable=True)
    facilities = Column(StringList, nullable=False, default=list)
    status = Column(Enum(RoomStatus, native_enum=False, length=10), nullable=False, default=RoomStatus.ON)
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
