"""FastAPI dependency injection helpers.

Everything here is resolved from ``request.app.state``, which the app
factory fills with the store client and the security / fare collaborators.
"""

from typing import AsyncIterator, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import Settings
from src.domain.access import Principal, ensure_role
from src.domain.enums import Role
from src.domain.errors import AuthenticationError
from src.services.accounts import AccountService
from src.services.admin import AdminService
from src.services.queue import QueueService
from src.services.ratings import RatingService
from src.services.rides import RideService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield an async DB session; commit on success, rollback on error."""
    async with request.app.state.db.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


# ── Services ──────────────────────────────────────────────────────────


def get_account_service(
    request: Request, db: AsyncSession = Depends(get_db)
) -> AccountService:
    return AccountService(db, request.app.state.hasher, request.app.state.tokens)


def get_ride_service(
    request: Request, db: AsyncSession = Depends(get_db)
) -> RideService:
    return RideService(db, request.app.state.fares)


def get_rating_service(db: AsyncSession = Depends(get_db)) -> RatingService:
    return RatingService(db)


def get_queue_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> QueueService:
    return QueueService(db, max_attempts=settings.ticket_max_attempts)


def get_admin_service(db: AsyncSession = Depends(get_db)) -> AdminService:
    return AdminService(db)


# ── Auth ──────────────────────────────────────────────────────────────


async def get_principal(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication token required.")
    return request.app.state.tokens.decode(credentials.credentials)


def require_roles(*roles: Role) -> Callable:
    """Dependency factory: authenticate, then reject roles outside *roles*."""

    async def _require(principal: Principal = Depends(get_principal)) -> Principal:
        ensure_role(principal, roles)
        return principal

    return _require
