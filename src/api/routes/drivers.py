"""
Driver endpoints
================

POST  /driver/register                -- create a driver account (starts Available)
GET   /driver/login                   -- bearer token for a driver (POST also accepted)
PATCH /driver/{driver_id}             -- update own profile (admins: any profile)
PATCH /driver/{driver_id}/availability -- Available / Offline / On Trip
PATCH /driver/cancel-ride/{ride_id}   -- assigned driver cancels a ride
GET   /driver/rating/{driver_id}      -- current average rating
GET   /driver/earnings/{driver_id}    -- cumulative earnings (own or admin)
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_account_service, get_ride_service, require_roles
from src.api.middleware import default_rate_limit, limiter
from src.api.schemas import (
    AvailabilityRequest,
    DriverEarningsResponse,
    DriverLoginResponse,
    DriverRatingResponse,
    DriverRegisteredResponse,
    DriverRegisterRequest,
    DriverUpdateRequest,
    LoginRequest,
    MessageResponse,
)
from src.domain.access import Principal
from src.domain.enums import Role
from src.services.accounts import AccountService
from src.services.rides import RideService

router = APIRouter(prefix="/driver", tags=["drivers"])


@router.post(
    "/register",
    status_code=201,
    response_model=DriverRegisteredResponse,
    summary="Register a driver",
)
@limiter.limit(default_rate_limit)
async def register(
    request: Request,
    body: DriverRegisterRequest,
    accounts: AccountService = Depends(get_account_service),
):
    driver = await accounts.register_driver(
        username=body.username,
        email=body.email,
        password=body.password,
        phone_no=body.phone_no,
        car_model=body.car_model,
    )
    return DriverRegisteredResponse(
        message="Driver registered successfully", driver_id=driver.id
    )


@router.api_route(
    "/login",
    methods=["GET", "POST"],
    response_model=DriverLoginResponse,
    summary="Log in as a driver",
)
@limiter.limit(default_rate_limit)
async def login(
    request: Request,
    body: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
):
    driver, token = await accounts.login(Role.DRIVER, body.email, body.password)
    return DriverLoginResponse(
        message="Driver login successful",
        driver_id=driver.id,
        token=token,
        role=Role.DRIVER,
    )


@router.patch(
    "/cancel-ride/{ride_id}",
    response_model=MessageResponse,
    summary="Cancel a ride assigned to the calling driver",
)
@limiter.limit(default_rate_limit)
async def cancel_ride(
    request: Request,
    ride_id: int,
    principal: Principal = Depends(require_roles(Role.DRIVER)),
    rides: RideService = Depends(get_ride_service),
):
    await rides.cancel(principal, ride_id)
    return MessageResponse(message="Ride cancelled successfully by driver.")


@router.get(
    "/rating/{driver_id}",
    response_model=DriverRatingResponse,
    summary="Average rating of a driver",
)
@limiter.limit(default_rate_limit)
async def rating(
    request: Request,
    driver_id: int,
    principal: Principal = Depends(
        require_roles(Role.CUSTOMER, Role.DRIVER, Role.ADMIN)
    ),
    accounts: AccountService = Depends(get_account_service),
):
    return DriverRatingResponse(rating=await accounts.driver_rating(driver_id))


@router.get(
    "/earnings/{driver_id}",
    response_model=DriverEarningsResponse,
    summary="Cumulative earnings of a driver",
)
@limiter.limit(default_rate_limit)
async def earnings(
    request: Request,
    driver_id: int,
    principal: Principal = Depends(require_roles(Role.DRIVER, Role.ADMIN)),
    accounts: AccountService = Depends(get_account_service),
):
    return DriverEarningsResponse(
        earnings=await accounts.driver_earnings(principal, driver_id)
    )


@router.patch(
    "/{driver_id}/availability",
    response_model=MessageResponse,
    summary="Set the calling driver's availability",
)
@limiter.limit(default_rate_limit)
async def set_availability(
    request: Request,
    driver_id: int,
    body: AvailabilityRequest,
    principal: Principal = Depends(require_roles(Role.DRIVER)),
    accounts: AccountService = Depends(get_account_service),
):
    driver = await accounts.set_driver_availability(principal, driver_id, body.status)
    return MessageResponse(
        message=f"Driver availability updated to {driver.status.value}"
    )


@router.patch(
    "/{driver_id}",
    response_model=MessageResponse,
    summary="Update a driver profile",
)
@limiter.limit(default_rate_limit)
async def update_profile(
    request: Request,
    driver_id: int,
    body: DriverUpdateRequest,
    principal: Principal = Depends(require_roles(Role.DRIVER, Role.ADMIN)),
    accounts: AccountService = Depends(get_account_service),
):
    await accounts.update_profile(
        principal, Role.DRIVER, driver_id, body.model_dump(exclude_unset=True)
    )
    return MessageResponse(message="Driver profile updated successfully")
