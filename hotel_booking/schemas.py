from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from .models import HotelStatus, Role, RoomStatus


def _reject_delimiter(value: str) -> str:
    if "," in value:
        raise ValueError("list items may not contain ','")
    return value


# Tags and facilities are stored comma-delimited
ListItem = Annotated[str, AfterValidator(_reject_delimiter)]


# ----- Users / Auth -----
class UserCredentials(BaseModel):
    username: str = Field(..., min_length=3, max_length=50)
    password: str = Field(..., min_length=6, max_length=100)


class UserOut(BaseModel):
    id: int
    username: str
    role: Role
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


# ----- Rooms -----
class RoomBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    price: float = Field(..., ge=0)
    stock: int = Field(..., ge=0)
    description: Optional[str] = None
    facilities: List[ListItem] = Field(default_factory=list)


class RoomCreate(RoomBase):
    pass


class RoomUpdate(BaseModel):
    # Required columns default to None but reject an explicit null.
    name: str = Field(None, min_length=2, max_length=100)
    price: float = Field(None, ge=0)
    stock: int = Field(None, ge=0)
    description: Optional[str] = None
    facilities: List[ListItem] = None
    status: RoomStatus = None


class RoomOut(RoomBase):
    id: int
    hotel_id: int
    status: RoomStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class StockAdjustment(BaseModel):
    quantity: int


class StockOut(BaseModel):
    room_id: int
    stock: int


# ----- Hotels -----
class HotelBase(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    city: str = Field(..., min_length=1, max_length=50)
    address: str = Field(..., min_length=5, max_length=200)
    description: Optional[str] = None
    star: Optional[str] = Field(None, max_length=20)
    tags: List[ListItem] = Field(default_factory=list)
    price: Optional[float] = Field(None, ge=0)
    promo: Optional[str] = Field(None, max_length=200)
    cover_image: Optional[str] = None
    intro: Optional[str] = Field(None, max_length=200)


class HotelCreate(HotelBase):
    pass


class HotelUpdate(BaseModel):
    name: str = Field(None, min_length=2, max_length=100)
    city: str = Field(None, min_length=1, max_length=50)
    address: str = Field(None, min_length=5, max_length=200)
    description: Optional[str] = None
    star: Optional[str] = Field(None, max_length=20)
    tags: List[ListItem] = None
    price: Optional[float] = Field(None, ge=0)
    promo: Optional[str] = Field(None, max_length=200)
    cover_image: Optional[str] = None
    intro: Optional[str] = Field(None, max_length=200)


class HotelOut(HotelBase):
    id: int
    status: HotelStatus
    owner_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class HotelDetail(HotelOut):
    rooms: List[RoomOut] = Field(default_factory=list)


class HotelQuery(BaseModel):
    city: Optional[str] = None
    keyword: Optional[str] = None
    min_price: Optional[float] = Field(None, ge=0)
    max_price: Optional[float] = Field(None, ge=0)
    tags: Optional[str] = None  # comma separated, any match
    status: Optional[HotelStatus] = None  # honoured for admins only
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)

    def tag_list(self) -> List[str]:
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]


class HotelPage(BaseModel):
    items: List[HotelOut]
    total: int
    page: int
    limit: int
    total_pages: int


class Message(BaseModel):
    detail: str
