"""
Payment endpoint
================

POST /payment -- pay for a ride; completes it and credits the driver
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_ride_service, require_roles
from src.api.middleware import default_rate_limit, limiter
from src.api.schemas import PaymentRequest, PaymentResponse
from src.domain.access import Principal
from src.domain.enums import Role
from src.services.rides import RideService

router = APIRouter(prefix="/payment", tags=["payments"])


@router.post(
    "",
    status_code=201,
    response_model=PaymentResponse,
    summary="Pay for a ride",
)
@limiter.limit(default_rate_limit)
async def pay_for_ride(
    request: Request,
    body: PaymentRequest,
    principal: Principal = Depends(require_roles(Role.CUSTOMER, Role.ADMIN)),
    rides: RideService = Depends(get_ride_service),
):
    payment = await rides.pay(principal, body.ride_id, body.driver_id, body.amount)
    return PaymentResponse(
        message="Payment successful, ride completed.", payment_id=payment.id
    )
