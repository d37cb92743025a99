"""Administrative use cases: user listing, blocking, deletion, reports."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import AccountType, DriverStatus
from src.domain.errors import ConflictError, NotFoundError
from src.domain.reports import MonthlyReport, monthly_reports
from src.infrastructure.models import CustomerModel, DriverModel
from src.infrastructure.repositories import (
    CustomerRepository,
    DriverRepository,
    RideRepository,
)

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.customers = CustomerRepository(session)
        self.drivers = DriverRepository(session)
        self.rides = RideRepository(session)

    async def list_users(self) -> tuple[list[CustomerModel], list[DriverModel]]:
        return await self.customers.list_all(), await self.drivers.list_all()

    async def list_customers(self) -> list[CustomerModel]:
        return await self.customers.list_all()

    async def block(self, account_type: AccountType, account_id: int) -> None:
        if account_type == AccountType.DRIVER:
            account = await self.drivers.get_by_id(account_id)
        else:
            account = await self.customers.get_by_id(account_id)
        if account is None:
            raise NotFoundError(f"{account_type.value} not found.")

        account.is_blocked = True
        if isinstance(account, DriverModel):
            account.status = DriverStatus.BLOCKED
        await self.session.flush()
        logger.warning("%s %d blocked", account_type.value.capitalize(), account_id)

    async def delete_customer(self, customer_id: int) -> None:
        customer = await self.customers.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")
        # rides, their ratings and payments are kept as history
        if await self.rides.exists_for_customer(customer_id):
            raise ConflictError(
                f"Customer {customer_id} has rides and cannot be deleted; block the account instead."
            )
        await self.customers.delete(customer)
        logger.info("Customer %d deleted", customer_id)

    async def monthly_reports(self) -> list[MonthlyReport]:
        return monthly_reports(await self.rides.completed_fares())
