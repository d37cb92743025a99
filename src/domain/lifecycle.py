"""
Ride Lifecycle Validator
========================

States::

    Pending --accept--> Accepted --pay--> Completed
       |                   |
       +------cancel-------+--> Cancelled

``Completed`` and ``Cancelled`` are terminal.  Every ``plan_*`` function
checks the guard for one transition and returns a ``RidePlan`` describing
the new ride status and the driver side effects.  Nothing here touches
the store; ``src.services.rides`` applies the plan inside one unit of work.

The functions accept anything exposing the attributes of
``src.domain.entities.Ride`` / ``Driver`` (ORM rows included).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .enums import DriverStatus, RIDE_TRANSITIONS, RideStatus
from .errors import (
    InvalidStateTransition,
    PermissionDenied,
    UnavailableError,
    ValidationError,
)


class RideLike(Protocol):
    id: Optional[int]
    status: RideStatus
    driver_id: Optional[int]


class DriverLike(Protocol):
    id: Optional[int]
    status: DriverStatus
    is_blocked: bool


@dataclass(frozen=True)
class RidePlan:
    status: RideStatus
    driver_id: Optional[int] = None
    occupy: Optional[int] = None  # driver flipped to On Trip
    release: tuple[int, ...] = ()  # drivers flipped back to Available
    credit: float = 0.0  # added to driver_id's earnings


def ensure_transition(current: RideStatus | str, target: RideStatus) -> None:
    current = RideStatus(current)
    allowed = RIDE_TRANSITIONS.get(current, set())
    if target in allowed:
        return
    if not allowed:
        raise InvalidStateTransition(
            f"Ride is already {current.value.lower()} and cannot change status."
        )
    raise InvalidStateTransition(
        f"Cannot transition ride from {current.value} to {target.value}."
    )


def plan_booking(driver: Optional[DriverLike]) -> RidePlan:
    """A booking needs an available driver; that driver goes On Trip."""
    if (
        driver is None
        or driver.is_blocked
        or DriverStatus(driver.status) != DriverStatus.AVAILABLE
    ):
        raise UnavailableError("No drivers available at the moment.")
    return RidePlan(
        status=RideStatus.PENDING, driver_id=driver.id, occupy=driver.id
    )


def plan_accept(ride: RideLike, driver: DriverLike) -> RidePlan:
    ensure_transition(ride.status, RideStatus.ACCEPTED)
    if driver.is_blocked:
        raise PermissionDenied("Blocked drivers cannot accept rides.")
    if (
        DriverStatus(driver.status) == DriverStatus.ON_TRIP
        and ride.driver_id != driver.id
    ):
        raise ValidationError(
            "You are currently on a trip and cannot accept new rides."
        )
    # the driver auto-assigned at booking is freed when someone else accepts
    release = ()
    if ride.driver_id is not None and ride.driver_id != driver.id:
        release = (ride.driver_id,)
    return RidePlan(
        status=RideStatus.ACCEPTED,
        driver_id=driver.id,
        occupy=driver.id,
        release=release,
    )


def plan_cancel(ride: RideLike) -> RidePlan:
    ensure_transition(ride.status, RideStatus.CANCELLED)
    release = (ride.driver_id,) if ride.driver_id is not None else ()
    return RidePlan(
        status=RideStatus.CANCELLED, driver_id=ride.driver_id, release=release
    )


def plan_payment(ride: RideLike, driver_id: int, amount: float) -> RidePlan:
    ensure_transition(ride.status, RideStatus.COMPLETED)
    if amount <= 0:
        raise ValidationError("Payment amount must be positive.")
    if ride.driver_id is not None and ride.driver_id != driver_id:
        raise ValidationError(
            f"Driver {driver_id} is not assigned to ride {ride.id}."
        )
    return RidePlan(
        status=RideStatus.COMPLETED,
        driver_id=driver_id,
        release=(driver_id,),
        credit=amount,
    )
