from datetime import datetime, timedelta, timezone
from typing import Generator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from . import models
from .config import settings
from .database import SessionLocal
from .models import Role
from .repositories import SqlHotelRepository, SqlRoomRepository, SqlUserRepository
from .services import HotelService, RoomService, UserService


# ----- DB -----
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ----- Services -----
def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(SqlUserRepository(db), pwd_context)


def get_hotel_service(db: Session = Depends(get_db)) -> HotelService:
    return HotelService(SqlHotelRepository(db), SqlRoomRepository(db))


def get_room_service(db: Session = Depends(get_db)) -> RoomService:
    return RoomService(SqlRoomRepository(db), SqlHotelRepository(db))


# ----- Auth / JWT -----
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Swagger's "Authorize" button is not wired to the JSON login; tokens are
# sent as standard Bearer headers either way.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def token_for(user: models.User) -> str:
    return create_access_token({"sub": user.username, "role": Role(user.role).value})


def get_user_by_username(db: Session, username: str) -> models.User | None:
    return SqlUserRepository(db).get_by_username(username)


def _user_from_token(db: Session, token: str) -> models.User | None:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None
    username: str | None = payload.get("sub")
    if username is None:
        return None
    return get_user_by_username(db, username)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> models.User:
    user = _user_from_token(db, token)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: Session = Depends(get_db),
) -> models.User | None:
    """
    Identify the caller on public endpoints.

    Anonymous requests get ``None``. A token that is present but invalid is
    still rejected with 401 rather than silently downgraded.
    """
    if token is None:
        return None
    return await get_current_user(token, db)


def require_roles(*allowed_roles: Role):
    """
    Usage: current_user: models.User = Depends(require_roles(Role.ADMIN))
    """
    async def role_checker(current_user: models.User = Depends(get_current_user)) -> models.User:
        if Role(current_user.role) not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not enough permissions",
            )
        return current_user

    return role_checker
