from fastapi import APIRouter, Depends, status

from .. import models, schemas
from ..deps import get_current_user, get_user_service, token_for
from ..services import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=schemas.Token, status_code=status.HTTP_201_CREATED)
def register_user(
    credentials: schemas.UserCredentials,
    service: UserService = Depends(get_user_service),
):
    """
    Register a new account and log it in.

    Every self-registered account gets the ``USER`` role; administrators are
    provisioned through configuration.

    Raises
    ------
    username_taken (400)
        If the username already exists.
    """
    user = service.register(credentials.username, credentials.password)
    return {"access_token": token_for(user), "token_type": "bearer", "user": user}


@router.post("/login", response_model=schemas.Token)
def login_for_access_token(
    credentials: schemas.UserCredentials,
    service: UserService = Depends(get_user_service),
):
    """
    Authenticate a user and return a JWT access token.

    Raises
    ------
    invalid_credentials (401)
        If the username is unknown or the password does not match.
    """
    user = service.authenticate(credentials.username, credentials.password)
    return {"access_token": token_for(user), "token_type": "bearer", "user": user}


@router.get("/profile", response_model=schemas.UserOut)
def read_current_user(
    current_user: models.User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Profile of the user the Bearer token belongs to."""
    return service.get_user(current_user.id)
