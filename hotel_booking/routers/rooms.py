from typing import Optional

from fastapi import APIRouter, Depends

from .. import models, schemas
from ..deps import get_current_user, get_optional_user, get_room_service, require_roles
from ..models import Role
from ..services import RoomService

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("/{room_id}", response_model=schemas.RoomOut)
def get_room(
    room_id: int,
    current_user: Optional[models.User] = Depends(get_optional_user),
    service: RoomService = Depends(get_room_service),
):
    """
    Retrieve a single room type by its ID.

    Rooms of hotels that are not public answer 404 unless the caller owns
    the hotel or is an admin.
    """
    if current_user is None:
        return service.get_room(room_id)
    return service.get_room(room_id, actor_id=current_user.id, actor_role=Role(current_user.role))


@router.patch("/{room_id}", response_model=schemas.RoomOut)
def update_room(
    room_id: int,
    room_update: schemas.RoomUpdate,
    current_user: models.User = Depends(get_current_user),
    service: RoomService = Depends(get_room_service),
):
    """
    Update an existing room type. *(Hotel owner or Admin)*

    Only supplied fields change; ``status`` switches the room ``ON``/``OFF``.
    """
    return service.update_room(
        room_id,
        room_update.model_dump(exclude_unset=True),
        current_user.id,
        Role(current_user.role),
    )


@router.delete("/{room_id}", response_model=schemas.Message)
def delete_room(
    room_id: int,
    current_user: models.User = Depends(get_current_user),
    service: RoomService = Depends(get_room_service),
):
    """Permanently remove a room type. *(Hotel owner or Admin)*"""
    service.delete_room(room_id, current_user.id, Role(current_user.role))
    return {"detail": "Room deleted"}


@router.patch("/{room_id}/stock", response_model=schemas.StockOut)
def adjust_room_stock(
    room_id: int,
    adjustment: schemas.StockAdjustment,
    service: RoomService = Depends(get_room_service),
    _: models.User = Depends(require_roles(Role.ADMIN)),
):
    """
    Add ``quantity`` (negative to take units away) to a room's stock. *(Admin-only)*

    Used by booking and cancellation flows.

    Raises
    ------
    insufficient_stock (400)
        If the stock would drop below zero; the stock is left unchanged.
    """
    stock = service.adjust_stock(room_id, adjustment.quantity)
    return {"room_id": room_id, "stock": stock}
