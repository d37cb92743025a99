"""
Ride use cases: book, accept, cancel, pay.

Each operation loads the rows it needs, asks ``src.domain.lifecycle`` for
a ``RidePlan`` and applies it.  Ride status changes are compare-and-set
on the previously read status and drivers are claimed with a conditional
update, so two requests racing on the same ride or driver cannot both
win.  All writes of one operation share the request's unit of work and
commit or roll back together.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.access import Principal, ensure_owner_or_admin
from src.domain.enums import PaymentStatus, RideStatus, Role
from src.domain.errors import (
    InvalidStateTransition,
    NotFoundError,
    PermissionDenied,
    UnavailableError,
    ValidationError,
)
from src.domain.lifecycle import (
    RidePlan,
    plan_accept,
    plan_booking,
    plan_cancel,
    plan_payment,
)
from src.domain.pricing import FareStrategy
from src.infrastructure.models import DriverModel, PaymentModel, RideModel
from src.infrastructure.repositories import (
    CustomerRepository,
    DriverRepository,
    PaymentRepository,
    RideRepository,
)

logger = logging.getLogger(__name__)

# How many available drivers to try before giving up on a booking
CLAIM_ATTEMPTS = 3


class RideService:
    def __init__(self, session: AsyncSession, fares: FareStrategy):
        self.session = session
        self.fares = fares
        self.rides = RideRepository(session)
        self.drivers = DriverRepository(session)
        self.customers = CustomerRepository(session)
        self.payments = PaymentRepository(session)

    # ── Look-ups ──────────────────────────────────────────────────────

    async def _ride(self, ride_id: int) -> RideModel:
        ride = await self.rides.get_by_id(ride_id)
        if ride is None:
            raise NotFoundError("Ride not found.")
        return ride

    async def _driver(self, driver_id: int) -> DriverModel:
        driver = await self.drivers.get_by_id(driver_id)
        if driver is None:
            raise NotFoundError("Driver not found.")
        return driver

    async def get(self, principal: Principal, ride_id: int) -> RideModel:
        ride = await self._ride(ride_id)
        visible = (
            principal.is_admin
            or (principal.role == Role.CUSTOMER and ride.customer_id == principal.id)
            or (principal.role == Role.DRIVER and ride.driver_id == principal.id)
        )
        if not visible:
            raise PermissionDenied("Access denied. This ride is not yours.")
        return ride

    async def history(self, principal: Principal) -> list[RideModel]:
        return await self.rides.list_for_customer(principal.id)

    # ── Plan application ──────────────────────────────────────────────

    async def _apply(
        self, ride: RideModel, expected: RideStatus, plan: RidePlan, **extra
    ) -> None:
        changed = await self.rides.compare_and_set(
            ride, expected, status=plan.status, driver_id=plan.driver_id, **extra
        )
        if not changed:
            raise InvalidStateTransition(
                "Ride status changed concurrently; please retry."
            )
        for driver_id in plan.release:
            await self.drivers.release(driver_id)
        if plan.credit and plan.driver_id is not None:
            await self.drivers.credit(plan.driver_id, plan.credit)

    # ── Book ──────────────────────────────────────────────────────────

    async def book(
        self,
        principal: Principal,
        pickup_location: str,
        destination: str,
        customer_id: Optional[int] = None,
    ) -> RideModel:
        if customer_id is None:
            if principal.role != Role.CUSTOMER:
                raise ValidationError("customerId is required.")
            customer_id = principal.id
        ensure_owner_or_admin(
            principal,
            Role.CUSTOMER,
            customer_id,
            "Access denied. You can only book rides for yourself.",
        )
        customer = await self.customers.get_by_id(customer_id)
        if customer is None:
            raise NotFoundError("Customer not found.")
        if customer.is_blocked:
            raise PermissionDenied("This account has been blocked.")

        plan: Optional[RidePlan] = None
        for _ in range(CLAIM_ATTEMPTS):
            candidate = await self.drivers.find_available()
            plan = plan_booking(candidate)  # raises when nobody is free
            if await self.drivers.claim(candidate):
                break
            logger.info("Driver %d was claimed concurrently, retrying", candidate.id)
            plan = None
        if plan is None:
            raise UnavailableError("No drivers available at the moment.")

        ride = await self.rides.create(
            RideModel(
                customer_id=customer_id,
                driver_id=plan.driver_id,
                pickup_location=pickup_location,
                destination=destination,
                status=plan.status,
                payment_status=PaymentStatus.PENDING,
                fare=self.fares.quote(pickup_location, destination),
            )
        )
        logger.info(
            "Ride %d booked for customer %d with driver %d (fare %.2f)",
            ride.id,
            customer_id,
            plan.driver_id,
            ride.fare,
        )
        return ride

    # ── Accept ────────────────────────────────────────────────────────

    async def accept(
        self, principal: Principal, ride_id: int, driver_id: Optional[int] = None
    ) -> RideModel:
        if principal.role != Role.DRIVER:
            raise PermissionDenied("Only drivers can accept rides.")
        if driver_id is not None and driver_id != principal.id:
            raise PermissionDenied("Access denied. You can only accept rides as yourself.")

        ride = await self._ride(ride_id)
        driver = await self._driver(principal.id)
        expected = RideStatus(ride.status)
        plan = plan_accept(ride, driver)

        await self.drivers.occupy(driver)
        await self._apply(ride, expected, plan)
        logger.info("Ride %d accepted by driver %d", ride.id, driver.id)
        return ride

    # ── Cancel ────────────────────────────────────────────────────────

    async def cancel(self, principal: Principal, ride_id: int) -> RideModel:
        ride = await self._ride(ride_id)
        if principal.role == Role.DRIVER:
            owner_role, owner_id = Role.DRIVER, ride.driver_id
        else:
            owner_role, owner_id = Role.CUSTOMER, ride.customer_id
        ensure_owner_or_admin(
            principal,
            owner_role,
            owner_id,
            "Access denied. You can only cancel your own rides.",
        )

        expected = RideStatus(ride.status)
        plan = plan_cancel(ride)
        await self._apply(ride, expected, plan)
        logger.info(
            "Ride %d cancelled by %s %d", ride.id, principal.role.value, principal.id
        )
        return ride

    # ── Pay ───────────────────────────────────────────────────────────

    async def pay(
        self, principal: Principal, ride_id: int, driver_id: int, amount: float
    ) -> PaymentModel:
        ride = await self._ride(ride_id)
        ensure_owner_or_admin(
            principal,
            Role.CUSTOMER,
            ride.customer_id,
            "Access denied. You can only pay for your own rides.",
        )
        await self._driver(driver_id)

        expected = RideStatus(ride.status)
        plan = plan_payment(ride, driver_id, amount)
        payment = await self.payments.create(
            PaymentModel(
                ride_id=ride.id,
                driver_id=driver_id,
                amount=round(amount, 2),
                status=PaymentStatus.COMPLETED,
            )
        )
        await self._apply(
            ride,
            expected,
            plan,
            payment_status=PaymentStatus.PAID,
            payment_id=payment.id,
        )
        logger.info(
            "Payment %d of %.2f recorded for ride %d (driver %d)",
            payment.id,
            amount,
            ride.id,
            driver_id,
        )
        return payment
