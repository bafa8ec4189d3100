from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from .. import models, schemas
from ..deps import (
    get_current_user,
    get_hotel_service,
    get_optional_user,
    get_room_service,
    require_roles,
)
from ..models import HotelStatus, Role
from ..services import HotelService, RoomService

router = APIRouter(prefix="/hotels", tags=["hotels"])


def hotel_query(
    city: Optional[str] = None,
    keyword: Optional[str] = None,
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    tags: Optional[str] = Query(None, description="Comma separated; any tag matches"),
    status: Optional[HotelStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> schemas.HotelQuery:
    return schemas.HotelQuery(
        city=city,
        keyword=keyword,
        min_price=min_price,
        max_price=max_price,
        tags=tags,
        status=status,
        page=page,
        limit=limit,
    )


def _actor(user: Optional[models.User]):
    if user is None:
        return None, None
    return user.id, Role(user.role)


@router.post("/", response_model=schemas.HotelOut, status_code=status.HTTP_201_CREATED)
def create_hotel(
    hotel_in: schemas.HotelCreate,
    current_user: models.User = Depends(get_current_user),
    service: HotelService = Depends(get_hotel_service),
):
    """
    Create a hotel owned by the current user.

    The hotel starts as ``DRAFT``; any ``status`` or ``owner_id`` in the body
    is ignored.
    """
    return service.create_hotel(hotel_in.model_dump(), current_user.id)


@router.get("/", response_model=schemas.HotelPage)
def list_hotels(
    query: schemas.HotelQuery = Depends(hotel_query),
    current_user: Optional[models.User] = Depends(get_optional_user),
    service: HotelService = Depends(get_hotel_service),
):
    """
    Search hotels, newest first.

    Parameters
    ----------
    city : str, optional
        Exact city name.
    keyword : str, optional
        Substring of the hotel name or address.
    min_price, max_price : float, optional
        Inclusive price bounds.
    tags : str, optional
        Comma separated tags; a hotel matches if it has any of them.
    status : HotelStatus, optional
        Only honoured for admins. Everyone else only sees ``APPROVED`` hotels.
    page, limit : int
        Pagination (limit at most 100).
    """
    _, role = _actor(current_user)
    return service.list_hotels(query, actor_role=role)


@router.get("/my/list", response_model=schemas.HotelPage)
def list_my_hotels(
    query: schemas.HotelQuery = Depends(hotel_query),
    current_user: models.User = Depends(get_current_user),
    service: HotelService = Depends(get_hotel_service),
):
    """Hotels owned by the current user, in every status."""
    return service.list_owned_hotels(current_user.id, query)


@router.get("/{hotel_id}", response_model=schemas.HotelDetail)
def get_hotel(
    hotel_id: int,
    current_user: Optional[models.User] = Depends(get_optional_user),
    service: HotelService = Depends(get_hotel_service),
):
    """
    Hotel details with its bookable rooms (cheapest first).

    Hotels that are not ``APPROVED`` answer 404 unless the caller owns the
    hotel or is an admin.
    """
    actor_id, role = _actor(current_user)
    hotel = service.get_hotel(hotel_id, actor_id=actor_id, actor_role=role)
    detail = schemas.HotelDetail.model_validate(hotel)
    detail.rooms = [schemas.RoomOut.model_validate(room) for room in service.get_hotel_rooms(hotel)]
    return detail


@router.patch("/{hotel_id}", response_model=schemas.HotelOut)
def update_hotel(
    hotel_id: int,
    hotel_update: schemas.HotelUpdate,
    current_user: models.User = Depends(get_current_user),
    service: HotelService = Depends(get_hotel_service),
):
    """
    Update a hotel. *(Owner or Admin)*

    Only supplied fields change. Changing the name, city or address sends
    the hotel back to review (``PENDING``).
    """
    return service.update_hotel(
        hotel_id,
        hotel_update.model_dump(exclude_unset=True),
        current_user.id,
        Role(current_user.role),
    )


@router.delete("/{hotel_id}", response_model=schemas.Message)
def delete_hotel(
    hotel_id: int,
    current_user: models.User = Depends(get_current_user),
    service: HotelService = Depends(get_hotel_service),
):
    """Delete a hotel and all of its rooms. *(Owner or Admin)*"""
    service.delete_hotel(hotel_id, current_user.id, Role(current_user.role))
    return {"detail": "Hotel deleted"}


# ----- Review workflow -----
@router.post("/{hotel_id}/submit", response_model=schemas.HotelOut)
def submit_hotel(
    hotel_id: int,
    current_user: models.User = Depends(get_current_user),
    service: HotelService = Depends(get_hotel_service),
):
    """Submit a ``DRAFT`` hotel for review. *(Owner)*"""
    return service.submit_for_review(hotel_id, current_user.id)


@router.post("/{hotel_id}/approve", response_model=schemas.HotelOut)
def approve_hotel(
    hotel_id: int,
    service: HotelService = Depends(get_hotel_service),
    _: models.User = Depends(require_roles(Role.ADMIN)),
):
    """Approve a ``PENDING`` hotel. *(Admin-only)*"""
    return service.approve_hotel(hotel_id)


@router.post("/{hotel_id}/reject", response_model=schemas.HotelOut)
def reject_hotel(
    hotel_id: int,
    service: HotelService = Depends(get_hotel_service),
    _: models.User = Depends(require_roles(Role.ADMIN)),
):
    """Send a ``PENDING`` hotel back to ``DRAFT``. *(Admin-only)*"""
    return service.reject_hotel(hotel_id)


@router.post("/{hotel_id}/publish", response_model=schemas.HotelOut)
def publish_hotel(
    hotel_id: int,
    current_user: models.User = Depends(get_current_user),
    service: HotelService = Depends(get_hotel_service),
):
    """Confirm that an ``APPROVED`` hotel is live. Does not change its status. *(Owner)*"""
    return service.publish_hotel(hotel_id, current_user.id)


@router.post("/{hotel_id}/offline", response_model=schemas.HotelOut)
def offline_hotel(
    hotel_id: int,
    current_user: models.User = Depends(get_current_user),
    service: HotelService = Depends(get_hotel_service),
):
    """Take a hotel off the public listing. *(Owner)*"""
    return service.offline_hotel(hotel_id, current_user.id)


# ----- Rooms of a hotel -----
@router.get("/{hotel_id}/rooms", response_model=List[schemas.RoomOut])
def list_hotel_rooms(
    hotel_id: int,
    current_user: Optional[models.User] = Depends(get_optional_user),
    service: RoomService = Depends(get_room_service),
):
    """
    Bookable (``ON``) rooms of a hotel, cheapest first.

    Hotels the caller cannot see answer 404, like ``GET /hotels/{id}``.
    """
    actor_id, role = _actor(current_user)
    return service.list_rooms_by_hotel(hotel_id, actor_id=actor_id, actor_role=role)


@router.post(
    "/{hotel_id}/rooms",
    response_model=schemas.RoomOut,
    status_code=status.HTTP_201_CREATED,
)
def create_room(
    hotel_id: int,
    room_in: schemas.RoomCreate,
    current_user: models.User = Depends(get_current_user),
    service: RoomService = Depends(get_room_service),
):
    """
    Add a room type to a hotel. *(Owner or Admin)*

    Raises
    ------
    hotel_not_approved (400)
        If the hotel is not ``APPROVED`` yet.
    """
    return service.create_room(hotel_id, room_in.model_dump(), current_user.id, Role(current_user.role))
