"""
Queue ticketing use cases.

``obtain`` issues the next number for a ``(location, category)`` pair.
The number is computed from the current maximum and inserted inside a
savepoint; the unique index on ``(location_id, category_id, number)``
turns a lost race into an ``IntegrityError``, after which the maximum is
re-read and the insert retried.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.access import Principal, ensure_owner_or_admin
from src.domain.enums import Role
from src.domain.errors import (
    ConflictError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)
from src.domain.sequencing import next_ticket_number
from src.infrastructure.models import CategoryModel, LocationModel, QueueTicketModel
from src.infrastructure.repositories import (
    CategoryRepository,
    CustomerRepository,
    LocationRepository,
    QueueRepository,
)

logger = logging.getLogger(__name__)


class QueueService:
    def __init__(self, session: AsyncSession, max_attempts: int = 5):
        self.session = session
        self.max_attempts = max_attempts
        self.queue = QueueRepository(session)
        self.customers = CustomerRepository(session)
        self.locations = LocationRepository(session)
        self.categories = CategoryRepository(session)

    # ── Customers ─────────────────────────────────────────────────────

    async def obtain(
        self,
        principal: Principal,
        *,
        customer_id: int,
        location_id: int,
        category_id: int,
    ) -> tuple[QueueTicketModel, LocationModel, CategoryModel]:
        ensure_owner_or_admin(
            principal,
            Role.CUSTOMER,
            customer_id,
            "Access denied. You can only obtain tickets for yourself.",
        )
        customer = await self.customers.get_by_id(customer_id)
        location = await self.locations.get_by_id(location_id)
        category = await self.categories.get_by_id(category_id)
        if customer is None or location is None or category is None:
            raise ValidationError(
                "Invalid customer, location, or appointment category provided."
            )
        if not location.is_available:
            raise UnavailableError(f"Location {location.name} is not available.")

        for attempt in range(1, self.max_attempts + 1):
            number = next_ticket_number(
                await self.queue.max_number(location_id, category_id)
            )
            try:
                async with self.session.begin_nested():
                    ticket = await self.queue.insert(
                        QueueTicketModel(
                            customer_id=customer_id,
                            location_id=location_id,
                            category_id=category_id,
                            number=number,
                            served=False,
                        )
                    )
            except IntegrityError:
                logger.info(
                    "Ticket %d for location %d / category %d taken concurrently "
                    "(attempt %d/%d)",
                    number,
                    location_id,
                    category_id,
                    attempt,
                    self.max_attempts,
                )
                continue
            logger.info(
                "Ticket %d issued to customer %d at location %d / category %d",
                ticket.number,
                customer_id,
                location_id,
                category_id,
            )
            return ticket, location, category

        raise UnavailableError("Failed to obtain queue number; please retry.")

    async def tickets_for(
        self, principal: Principal, customer_id: int
    ) -> list[QueueTicketModel]:
        ensure_owner_or_admin(principal, Role.CUSTOMER, customer_id)
        return await self.queue.unserved_for_customer(customer_id)

    # ── Staff ─────────────────────────────────────────────────────────

    async def serve_next_for_customer(self, customer_id: int) -> QueueTicketModel:
        ticket = await self.queue.next_unserved_for_customer(customer_id)
        if ticket is None:
            raise NotFoundError(
                f"No pending queue entry found for customer {customer_id}"
            )
        await self.queue.mark_served(ticket)
        logger.info("Calling ticket %d for customer %d", ticket.number, customer_id)
        return ticket

    async def serve_next_for_pair(
        self, location_id: int, category_id: int
    ) -> QueueTicketModel:
        ticket = await self.queue.next_unserved_for_pair(location_id, category_id)
        if ticket is None:
            raise NotFoundError(
                f"No one is waiting at location {location_id} "
                f"for category {category_id}"
            )
        await self.queue.mark_served(ticket)
        logger.info(
            "Calling ticket %d at location %d / category %d",
            ticket.number,
            location_id,
            category_id,
        )
        return ticket

    async def cancel(self, customer_id: int, category_id: int) -> None:
        deleted = await self.queue.delete_for_customer_category(
            customer_id, category_id
        )
        if not deleted:
            raise NotFoundError(
                f"No queue entry found for customer {customer_id} "
                f"in category {category_id}"
            )
        logger.info(
            "Cancelled %d ticket(s) of customer %d in category %d",
            deleted,
            customer_id,
            category_id,
        )

    async def set_location_availability(
        self, location_id: int, is_available: bool
    ) -> LocationModel:
        location = await self.locations.get_by_id(location_id)
        if location is None:
            raise NotFoundError("Location not found")
        location.is_available = is_available
        await self.session.flush()
        logger.info("Location %d availability set to %s", location_id, is_available)
        return location

    # ── Reference data ────────────────────────────────────────────────

    async def add_location(
        self, name: str, hours: Optional[str] = None, is_available: bool = True
    ) -> LocationModel:
        if await self.locations.get_by_name(name):
            raise ConflictError("Location with this name already exists")
        return await self.locations.create(
            LocationModel(name=name, hours=hours, is_available=is_available)
        )

    async def list_locations(self) -> list[LocationModel]:
        return await self.locations.list_all()

    async def add_category(
        self, name: str, description: Optional[str] = None
    ) -> CategoryModel:
        if await self.categories.get_by_name(name):
            raise ConflictError("Category with this name already exists")
        return await self.categories.create(
            CategoryModel(name=name, description=description)
        )

    async def list_categories(self) -> list[CategoryModel]:
        return await self.categories.list_all()

    # ── Reporting ─────────────────────────────────────────────────────

    async def report(self) -> dict[str, int]:
        return {
            "total_customers": await self.customers.count(),
            "total_queue_entries": await self.queue.count(),
            "active_queue_entries": await self.queue.count(served=False),
        }

    async def analytics(self, location_id: Optional[int] = None) -> list[dict]:
        locations = {loc.id: loc.name for loc in await self.locations.list_all()}
        categories = {cat.id: cat.name for cat in await self.categories.list_all()}
        return [
            {
                "customer_id": ticket.customer_id,
                "location": locations.get(ticket.location_id),
                "appointment_category": categories.get(ticket.category_id),
                "number": ticket.number,
            }
            for ticket in await self.queue.list_tickets(location_id)
        ]
