"""
Ride endpoints
==============

POST  /ride/book             -- book a ride; a free driver is assigned at once
PATCH /ride/accept/{ride_id} -- driver accepts a pending ride
PATCH /ride/cancel/{ride_id} -- customer (or admin) cancels a ride
GET   /ride/{ride_id}        -- ride details for its customer, driver or an admin
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request

from src.api.dependencies import get_ride_service, require_roles
from src.api.middleware import default_rate_limit, limiter
from src.api.schemas import (
    AcceptRideRequest,
    BookRideRequest,
    BookRideResponse,
    MessageResponse,
    RideResponse,
)
from src.domain.access import Principal
from src.domain.enums import Role
from src.services.rides import RideService

router = APIRouter(prefix="/ride", tags=["rides"])


@router.post(
    "/book",
    status_code=201,
    response_model=BookRideResponse,
    summary="Book a ride",
    responses={503: {"description": "No driver is available."}},
)
@limiter.limit(default_rate_limit)
async def book_ride(
    request: Request,
    body: BookRideRequest,
    principal: Principal = Depends(require_roles(Role.CUSTOMER, Role.ADMIN)),
    rides: RideService = Depends(get_ride_service),
):
    ride = await rides.book(
        principal,
        body.pickup_location,
        body.destination,
        customer_id=body.customer_id,
    )
    return BookRideResponse(
        message="Ride booked successfully",
        ride_id=ride.id,
        fare=ride.fare,
        driver_id=ride.driver_id,
        status=ride.status,
    )


@router.patch(
    "/accept/{ride_id}",
    response_model=MessageResponse,
    summary="Accept a pending ride",
)
@limiter.limit(default_rate_limit)
async def accept_ride(
    request: Request,
    ride_id: int,
    body: Optional[AcceptRideRequest] = Body(None),
    principal: Principal = Depends(require_roles(Role.DRIVER)),
    rides: RideService = Depends(get_ride_service),
):
    driver_id = body.driver_id if body is not None else None
    await rides.accept(principal, ride_id, driver_id=driver_id)
    return MessageResponse(message="Ride accepted successfully.")


@router.patch(
    "/cancel/{ride_id}",
    response_model=MessageResponse,
    summary="Cancel a ride",
    description=(
        "Moves a Pending or Accepted ride to Cancelled and frees its driver. "
        "Completed and Cancelled rides cannot change status."
    ),
)
@limiter.limit(default_rate_limit)
async def cancel_ride(
    request: Request,
    ride_id: int,
    principal: Principal = Depends(require_roles(Role.CUSTOMER, Role.ADMIN)),
    rides: RideService = Depends(get_ride_service),
):
    await rides.cancel(principal, ride_id)
    return MessageResponse(message="Ride cancelled successfully.")


@router.get(
    "/{ride_id}",
    response_model=RideResponse,
    summary="Get a ride",
)
@limiter.limit(default_rate_limit)
async def get_ride(
    request: Request,
    ride_id: int,
    principal: Principal = Depends(
        require_roles(Role.CUSTOMER, Role.DRIVER, Role.ADMIN)
    ),
    rides: RideService = Depends(get_ride_service),
):
    return await rides.get(principal, ride_id)
