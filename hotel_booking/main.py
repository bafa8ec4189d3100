import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import settings
from .database import SessionLocal, init_db
from .deps import pwd_context
from .error_handlers import register_exception_handlers
from .repositories import SqlUserRepository
from .routers import auth, hotels, rooms
from .services import UserService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def seed_admin() -> None:
    """Create the configured admin account if it does not exist yet."""
    if not (settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD):
        return
    db = SessionLocal()
    try:
        UserService(SqlUserRepository(db), pwd_context).ensure_admin(
            settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD
        )
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    seed_admin()
    logger.info("%s started", settings.APP_NAME)
    yield


# -----------------------------------------
# Rate limiter, per client IP
# -----------------------------------------
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
)

app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    description="Hotels with an admin review workflow, room types and stock.",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)

register_exception_handlers(app)


# -----------------------------------------
# Routers (plain + /api, the prefix the mini-program calls)
# -----------------------------------------
app.include_router(auth.router)
app.include_router(hotels.router)
app.include_router(rooms.router)

app.include_router(auth.router, prefix="/api")
app.include_router(hotels.router, prefix="/api")
app.include_router(rooms.router, prefix="/api")


@app.get("/health", tags=["health"])
def health_check():
    return {"status": "ok"}
