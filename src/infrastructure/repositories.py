"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.
"""

from __future__ import annotations

from typing import Optional, Type, Union

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import (
    AdminModel,
    CategoryModel,
    CustomerModel,
    DriverModel,
    LocationModel,
    PaymentModel,
    QueueTicketModel,
    RatingModel,
    RideModel,
    utcnow,
)
from src.domain.enums import DriverStatus, RideStatus

AccountModel = Union[CustomerModel, DriverModel, AdminModel]


class AccountRepository:
    """Shared queries for the three account tables."""

    model: Type[AccountModel]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, account: AccountModel) -> AccountModel:
        self.session.add(account)
        await self.session.flush()
        return account

    async def get_by_id(self, account_id: int) -> Optional[AccountModel]:
        return await self.session.get(self.model, account_id)

    async def get_by_email(self, email: str) -> Optional[AccountModel]:
        result = await self.session.execute(
            select(self.model).where(self.model.email == email)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[AccountModel]:
        result = await self.session.execute(select(self.model).order_by(self.model.id))
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(self.model)
        )
        return result.scalar() or 0


class CustomerRepository(AccountRepository):
    model = CustomerModel

    async def delete(self, customer: CustomerModel) -> None:
        await self.session.execute(
            delete(QueueTicketModel).where(
                QueueTicketModel.customer_id == customer.id
            )
        )
        await self.session.delete(customer)
        await self.session.flush()


class DriverRepository(AccountRepository):
    model = DriverModel

    async def find_available(self) -> Optional[DriverModel]:
        result = await self.session.execute(
            select(DriverModel)
            .where(
                DriverModel.status == DriverStatus.AVAILABLE,
                DriverModel.is_blocked.is_(False),
            )
            .order_by(DriverModel.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def claim(self, driver: DriverModel) -> bool:
        """Compare-and-swap Available -> On Trip.  False if someone beat us."""
        result = await self.session.execute(
            update(DriverModel)
            .where(
                DriverModel.id == driver.id,
                DriverModel.status == DriverStatus.AVAILABLE,
                DriverModel.is_blocked.is_(False),
            )
            .values(status=DriverStatus.ON_TRIP)
            .execution_options(synchronize_session=False)
        )
        await self.session.refresh(driver)
        return result.rowcount == 1

    async def occupy(self, driver: DriverModel) -> None:
        driver.status = DriverStatus.ON_TRIP
        await self.session.flush()

    async def release(self, driver_id: int) -> None:
        """On Trip -> Available; blocked or offline drivers are left alone."""
        await self.session.execute(
            update(DriverModel)
            .where(
                DriverModel.id == driver_id,
                DriverModel.status == DriverStatus.ON_TRIP,
            )
            .values(status=DriverStatus.AVAILABLE)
            .execution_options(synchronize_session=False)
        )
        await self._refresh_if_loaded(driver_id)

    async def credit(self, driver_id: int, amount: float) -> None:
        """Atomic ``earnings += amount``."""
        await self.session.execute(
            update(DriverModel)
            .where(DriverModel.id == driver_id)
            .values(earnings=DriverModel.earnings + amount)
            .execution_options(synchronize_session=False)
        )
        await self._refresh_if_loaded(driver_id)

    async def _refresh_if_loaded(self, driver_id: int) -> None:
        # bulk UPDATEs bypass the identity map; reload any cached row
        await self.session.get(DriverModel, driver_id, populate_existing=True)


class AdminRepository(AccountRepository):
    model = AdminModel


class RideRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, ride: RideModel) -> RideModel:
        self.session.add(ride)
        await self.session.flush()
        return ride

    async def get_by_id(self, ride_id: int) -> Optional[RideModel]:
        return await self.session.get(RideModel, ride_id)

    async def compare_and_set(
        self, ride: RideModel, expected: RideStatus, **values
    ) -> bool:
        """Apply *values* only if the stored status is still *expected*."""
        result = await self.session.execute(
            update(RideModel)
            .where(RideModel.id == ride.id, RideModel.status == expected)
            .values(updated_at=utcnow(), **values)
            .execution_options(synchronize_session=False)
        )
        await self.session.refresh(ride)
        return result.rowcount == 1

    async def exists_for_customer(self, customer_id: int) -> bool:
        result = await self.session.execute(
            select(RideModel.id).where(RideModel.customer_id == customer_id).limit(1)
        )
        return result.first() is not None

    async def list_for_customer(self, customer_id: int) -> list[RideModel]:
        result = await self.session.execute(
            select(RideModel)
            .where(RideModel.customer_id == customer_id)
            .order_by(RideModel.booked_at, RideModel.id)
        )
        return list(result.scalars().all())

    async def completed_fares(self) -> list[tuple]:
        result = await self.session.execute(
            select(RideModel.booked_at, RideModel.fare).where(
                RideModel.status == RideStatus.COMPLETED
            )
        )
        return [tuple(row) for row in result.all()]


class RatingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, rating: RatingModel) -> RatingModel:
        self.session.add(rating)
        await self.session.flush()
        return rating

    async def values_for_driver(self, driver_id: int) -> list[int]:
        result = await self.session.execute(
            select(RatingModel.rating).where(RatingModel.driver_id == driver_id)
        )
        return list(result.scalars().all())


class PaymentRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, payment: PaymentModel) -> PaymentModel:
        self.session.add(payment)
        await self.session.flush()
        return payment


class LocationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, location: LocationModel) -> LocationModel:
        self.session.add(location)
        await self.session.flush()
        return location

    async def get_by_id(self, location_id: int) -> Optional[LocationModel]:
        return await self.session.get(LocationModel, location_id)

    async def get_by_name(self, name: str) -> Optional[LocationModel]:
        result = await self.session.execute(
            select(LocationModel).where(LocationModel.name == name)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[LocationModel]:
        result = await self.session.execute(
            select(LocationModel).order_by(LocationModel.id)
        )
        return list(result.scalars().all())


class CategoryRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, category: CategoryModel) -> CategoryModel:
        self.session.add(category)
        await self.session.flush()
        return category

    async def get_by_id(self, category_id: int) -> Optional[CategoryModel]:
        return await self.session.get(CategoryModel, category_id)

    async def get_by_name(self, name: str) -> Optional[CategoryModel]:
        result = await self.session.execute(
            select(CategoryModel).where(CategoryModel.name == name)
        )
        return result.scalar_one_or_none()

    async def list_all(self) -> list[CategoryModel]:
        result = await self.session.execute(
            select(CategoryModel).order_by(CategoryModel.id)
        )
        return list(result.scalars().all())


class QueueRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def max_number(self, location_id: int, category_id: int) -> Optional[int]:
        result = await self.session.execute(
            select(func.max(QueueTicketModel.number)).where(
                QueueTicketModel.location_id == location_id,
                QueueTicketModel.category_id == category_id,
            )
        )
        return result.scalar()

    async def insert(self, ticket: QueueTicketModel) -> QueueTicketModel:
        self.session.add(ticket)
        await self.session.flush()
        return ticket

    async def next_unserved_for_customer(
        self, customer_id: int
    ) -> Optional[QueueTicketModel]:
        result = await self.session.execute(
            select(QueueTicketModel)
            .where(
                QueueTicketModel.customer_id == customer_id,
                QueueTicketModel.served.is_(False),
            )
            .order_by(QueueTicketModel.number, QueueTicketModel.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def next_unserved_for_pair(
        self, location_id: int, category_id: int
    ) -> Optional[QueueTicketModel]:
        result = await self.session.execute(
            select(QueueTicketModel)
            .where(
                QueueTicketModel.location_id == location_id,
                QueueTicketModel.category_id == category_id,
                QueueTicketModel.served.is_(False),
            )
            .order_by(QueueTicketModel.number)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def mark_served(self, ticket: QueueTicketModel) -> QueueTicketModel:
        ticket.served = True
        ticket.served_at = utcnow()
        await self.session.flush()
        return ticket

    async def unserved_for_customer(self, customer_id: int) -> list[QueueTicketModel]:
        result = await self.session.execute(
            select(QueueTicketModel)
            .where(
                QueueTicketModel.customer_id == customer_id,
                QueueTicketModel.served.is_(False),
            )
            .order_by(QueueTicketModel.issued_at, QueueTicketModel.id)
        )
        return list(result.scalars().all())

    async def delete_for_customer_category(
        self, customer_id: int, category_id: int
    ) -> int:
        result = await self.session.execute(
            delete(QueueTicketModel).where(
                QueueTicketModel.customer_id == customer_id,
                QueueTicketModel.category_id == category_id,
            )
        )
        return result.rowcount or 0

    async def list_tickets(
        self, location_id: Optional[int] = None
    ) -> list[QueueTicketModel]:
        query = select(QueueTicketModel).order_by(
            QueueTicketModel.location_id,
            QueueTicketModel.category_id,
            QueueTicketModel.number,
        )
        if location_id is not None:
            query = query.where(QueueTicketModel.location_id == location_id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count(self, served: Optional[bool] = None) -> int:
        query = select(func.count()).select_from(QueueTicketModel)
        if served is not None:
            query = query.where(QueueTicketModel.served.is_(served))
        result = await self.session.execute(query)
        return result.scalar() or 0
