import logging

from .. import models
from ..errors import InvalidCredentials, NotFound, UsernameTaken
from ..models import Role
from ..repositories import UserRepository
from .base import Clock, utcnow

logger = logging.getLogger(__name__)


class UserService:
    """
    Registration and authentication.

    ``hasher`` is anything with ``hash(secret)`` and ``verify(secret, hash)``,
    e.g. a passlib ``CryptContext``.
    """

    def __init__(self, users: UserRepository, hasher, clock: Clock = utcnow):
        self.users = users
        self.hasher = hasher
        self.clock = clock

    def _create(self, username: str, password: str, role: Role) -> models.User:
        if self.users.get_by_username(username) is not None:
            raise UsernameTaken()
        user = models.User(
            username=username,
            hashed_password=self.hasher.hash(password),
            role=role,
            created_at=self.clock(),
        )
        user = self.users.add(user)
        logger.info("user %s registered as %s", user.username, role.value)
        return user

    def register(self, username: str, password: str) -> models.User:
        """Self-service sign-up always yields a plain USER."""
        return self._create(username, password, Role.USER)

    def authenticate(self, username: str, password: str) -> models.User:
        user = self.users.get_by_username(username)
        if user is None or not self.hasher.verify(password, user.hashed_password):
            logger.warning("failed login for %s", username)
            raise InvalidCredentials()
        return user

    def get_user(self, user_id: int) -> models.User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def ensure_admin(self, username: str, password: str) -> models.User:
        """Create the built-in admin account unless the username already exists."""
        existing = self.users.get_by_username(username)
        if existing is not None:
            return existing
        return self._create(username, password, Role.ADMIN)
