"""Rating submission and the driver average it maintains."""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.access import Principal, ensure_owner_or_admin
from src.domain.enums import Role
from src.domain.errors import NotFoundError, ValidationError
from src.domain.rating import average_rating, validate_rating
from src.infrastructure.models import RatingModel
from src.infrastructure.repositories import (
    DriverRepository,
    RatingRepository,
    RideRepository,
)

logger = logging.getLogger(__name__)


class RatingService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.ratings = RatingRepository(session)
        self.drivers = DriverRepository(session)
        self.rides = RideRepository(session)

    async def rate(
        self,
        principal: Principal,
        *,
        driver_id: int,
        ride_id: int,
        value: int,
        customer_id: Optional[int] = None,
    ) -> tuple[RatingModel, Optional[float]]:
        """Store a rating and return it with the driver's new average."""
        validate_rating(value)
        if customer_id is None:
            if principal.role != Role.CUSTOMER:
                raise ValidationError("customerId is required.")
            customer_id = principal.id
        ensure_owner_or_admin(
            principal,
            Role.CUSTOMER,
            customer_id,
            "Access denied. You can only rate as yourself.",
        )

        driver = await self.drivers.get_by_id(driver_id)
        if driver is None:
            raise NotFoundError("Driver not found.")
        ride = await self.rides.get_by_id(ride_id)
        if ride is None:
            raise NotFoundError("Ride not found.")
        ensure_owner_or_admin(
            principal,
            Role.CUSTOMER,
            ride.customer_id,
            "Access denied. You can only rate your own rides.",
        )
        if ride.customer_id != customer_id:
            raise ValidationError(
                f"Customer {customer_id} did not take ride {ride_id}."
            )
        if ride.driver_id is not None and ride.driver_id != driver_id:
            raise ValidationError(f"Driver {driver_id} did not drive ride {ride_id}.")

        rating = await self.ratings.create(
            RatingModel(
                customer_id=customer_id,
                driver_id=driver_id,
                ride_id=ride_id,
                rating=value,
            )
        )
        # full recompute over every rating of this driver
        driver.rating = average_rating(await self.ratings.values_for_driver(driver_id))
        await self.session.flush()
        logger.info(
            "Driver %d rated %d by customer %d (average now %s)",
            driver_id,
            value,
            customer_id,
            driver.rating,
        )
        return rating, driver.rating
