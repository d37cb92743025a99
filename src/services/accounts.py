"""
Account use cases: registration, login, profile patches, driver status.

Customers, drivers and admins live in separate tables but share the
same shape; ``ACCOUNT_REPOSITORIES`` picks the table from the ``Role``.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.access import Principal, ensure_owner_or_admin
from src.domain.enums import DriverStatus, Role, SELF_SETTABLE_DRIVER_STATUSES
from src.domain.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDenied,
    ValidationError,
)
from src.infrastructure.models import AdminModel, CustomerModel, DriverModel
from src.infrastructure.repositories import (
    AccountRepository,
    AdminRepository,
    CustomerRepository,
    DriverRepository,
)
from src.infrastructure.security import PasswordHasher, TokenService

logger = logging.getLogger(__name__)

ACCOUNT_REPOSITORIES: dict[Role, type[AccountRepository]] = {
    Role.CUSTOMER: CustomerRepository,
    Role.DRIVER: DriverRepository,
    Role.ADMIN: AdminRepository,
}

# Fields a profile PATCH may touch, per account table
PATCHABLE_FIELDS: dict[Role, frozenset[str]] = {
    Role.CUSTOMER: frozenset({"username", "email", "phone_no", "password"}),
    Role.DRIVER: frozenset({"username", "email", "phone_no", "car_model", "password"}),
    Role.ADMIN: frozenset({"username", "email", "password"}),
}


class AccountService:
    def __init__(
        self, session: AsyncSession, hasher: PasswordHasher, tokens: TokenService
    ):
        self.session = session
        self.hasher = hasher
        self.tokens = tokens

    def _repo(self, role: Role) -> AccountRepository:
        return ACCOUNT_REPOSITORIES[role](self.session)

    async def _ensure_email_free(self, role: Role, email: str) -> None:
        if await self._repo(role).get_by_email(email):
            raise ConflictError(
                f"{role.value.capitalize()} with this email already exists."
            )

    # ── Registration ──────────────────────────────────────────────────

    async def register_customer(
        self, *, username: str, email: str, password: str, phone_no: str
    ) -> CustomerModel:
        await self._ensure_email_free(Role.CUSTOMER, email)
        customer = await self._repo(Role.CUSTOMER).create(
            CustomerModel(
                username=username,
                email=email,
                password_hash=self.hasher.hash(password),
                phone_no=phone_no,
                role=Role.CUSTOMER,
            )
        )
        logger.info("Customer %d registered", customer.id)
        return customer

    async def register_driver(
        self,
        *,
        username: str,
        email: str,
        password: str,
        phone_no: str,
        car_model: str,
    ) -> DriverModel:
        await self._ensure_email_free(Role.DRIVER, email)
        driver = await self._repo(Role.DRIVER).create(
            DriverModel(
                username=username,
                email=email,
                password_hash=self.hasher.hash(password),
                phone_no=phone_no,
                car_model=car_model,
                role=Role.DRIVER,
                status=DriverStatus.AVAILABLE,
                earnings=0.0,
            )
        )
        logger.info("Driver %d registered", driver.id)
        return driver

    async def register_admin(
        self, *, username: str, email: str, password: str
    ) -> AdminModel:
        await self._ensure_email_free(Role.ADMIN, email)
        admin = await self._repo(Role.ADMIN).create(
            AdminModel(
                username=username,
                email=email,
                password_hash=self.hasher.hash(password),
                role=Role.ADMIN,
            )
        )
        logger.info("Admin %d registered", admin.id)
        return admin

    # ── Login ─────────────────────────────────────────────────────────

    async def login(self, role: Role, email: str, password: str) -> tuple[Any, str]:
        """Return ``(account, bearer token)`` for valid credentials."""
        account = await self._repo(role).get_by_email(email)
        if account is None or not self.hasher.verify(password, account.password_hash):
            raise AuthenticationError("Invalid email or password.")
        if account.is_blocked:
            raise PermissionDenied("This account has been blocked.")
        token = self.tokens.issue(Principal(id=account.id, role=role))
        return account, token

    # ── Profiles ──────────────────────────────────────────────────────

    async def get_account(self, role: Role, account_id: int) -> Any:
        account = await self._repo(role).get_by_id(account_id)
        if account is None:
            raise NotFoundError(f"{role.value.capitalize()} not found")
        return account

    async def update_profile(
        self,
        principal: Principal,
        role: Role,
        account_id: int,
        changes: dict[str, Any],
    ) -> Any:
        ensure_owner_or_admin(
            principal,
            role,
            account_id,
            "Access denied. You can only update your own profile.",
        )
        changes = {k: v for k, v in changes.items() if v is not None}
        unknown = set(changes) - PATCHABLE_FIELDS[role]
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}"
            )

        account = await self.get_account(role, account_id)
        new_email = changes.get("email")
        if new_email and new_email != account.email:
            await self._ensure_email_free(role, new_email)

        password = changes.pop("password", None)
        if password:
            account.password_hash = self.hasher.hash(password)
        for field, value in changes.items():
            setattr(account, field, value)
        await self.session.flush()
        logger.info("%s %d profile updated", role.value.capitalize(), account_id)
        return account

    # ── Drivers ───────────────────────────────────────────────────────

    async def set_driver_availability(
        self, principal: Principal, driver_id: int, status: DriverStatus
    ) -> DriverModel:
        if principal.role != Role.DRIVER or principal.id != driver_id:
            raise PermissionDenied(
                "Access denied. You can only update your own availability."
            )
        if status not in SELF_SETTABLE_DRIVER_STATUSES:
            raise ValidationError(
                "Invalid status provided. Must be Available, Offline, or On Trip."
            )
        driver = await self.get_account(Role.DRIVER, driver_id)
        if driver.is_blocked:
            raise PermissionDenied("Blocked drivers cannot change availability.")
        driver.status = status
        await self.session.flush()
        logger.info("Driver %d availability set to %s", driver_id, status.value)
        return driver

    async def driver_rating(self, driver_id: int) -> float:
        driver = await self.get_account(Role.DRIVER, driver_id)
        return driver.rating or 0.0

    async def driver_earnings(self, principal: Principal, driver_id: int) -> float:
        ensure_owner_or_admin(
            principal,
            Role.DRIVER,
            driver_id,
            "Access denied. You can only view your own earnings.",
        )
        driver = await self.get_account(Role.DRIVER, driver_id)
        return driver.earnings or 0.0
