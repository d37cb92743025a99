"""
Customer endpoints
==================

POST  /customer/register      -- create a customer account
GET   /customer/login         -- exchange credentials for a bearer token (POST also accepted)
PATCH /customer/{customer_id} -- update own profile (admins: any profile)
GET   /customer/rides         -- ride history of the caller
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_account_service, get_ride_service, require_roles
from src.api.middleware import default_rate_limit, limiter
from src.api.schemas import (
    CustomerLoginResponse,
    CustomerRegisteredResponse,
    CustomerRegisterRequest,
    CustomerUpdateRequest,
    LoginRequest,
    MessageResponse,
    RideResponse,
)
from src.domain.access import Principal
from src.domain.enums import Role
from src.services.accounts import AccountService
from src.services.rides import RideService

router = APIRouter(prefix="/customer", tags=["customers"])


@router.post(
    "/register",
    status_code=201,
    response_model=CustomerRegisteredResponse,
    summary="Register a customer",
)
@limiter.limit(default_rate_limit)
async def register(
    request: Request,
    body: CustomerRegisterRequest,
    accounts: AccountService = Depends(get_account_service),
):
    customer = await accounts.register_customer(
        username=body.username,
        email=body.email,
        password=body.password,
        phone_no=body.phone_no,
    )
    return CustomerRegisteredResponse(
        message="Registration successful", customer_id=customer.id
    )


@router.api_route(
    "/login",
    methods=["GET", "POST"],
    response_model=CustomerLoginResponse,
    summary="Log in as a customer",
)
@limiter.limit(default_rate_limit)
async def login(
    request: Request,
    body: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
):
    customer, token = await accounts.login(Role.CUSTOMER, body.email, body.password)
    return CustomerLoginResponse(
        message="Login successful",
        customer_id=customer.id,
        token=token,
        role=Role.CUSTOMER,
    )


@router.get(
    "/rides",
    response_model=list[RideResponse],
    summary="Ride history of the authenticated customer",
)
@limiter.limit(default_rate_limit)
async def ride_history(
    request: Request,
    principal: Principal = Depends(require_roles(Role.CUSTOMER)),
    rides: RideService = Depends(get_ride_service),
):
    return await rides.history(principal)


@router.patch(
    "/{customer_id}",
    response_model=MessageResponse,
    summary="Update a customer profile",
)
@limiter.limit(default_rate_limit)
async def update_profile(
    request: Request,
    customer_id: int,
    body: CustomerUpdateRequest,
    principal: Principal = Depends(require_roles(Role.CUSTOMER, Role.ADMIN)),
    accounts: AccountService = Depends(get_account_service),
):
    await accounts.update_profile(
        principal, Role.CUSTOMER, customer_id, body.model_dump(exclude_unset=True)
    )
    return MessageResponse(message="Customer profile updated successfully")
