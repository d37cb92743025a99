"""
Rating endpoint
===============

POST /rating -- rate the driver of one of the caller's rides (1-5)
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_rating_service, require_roles
from src.api.middleware import default_rate_limit, limiter
from src.api.schemas import RatingRequest, RatingResponse
from src.domain.access import Principal
from src.domain.enums import Role
from src.services.ratings import RatingService

router = APIRouter(prefix="/rating", tags=["ratings"])


@router.post(
    "",
    status_code=201,
    response_model=RatingResponse,
    summary="Rate a driver",
)
@limiter.limit(default_rate_limit)
async def rate_driver(
    request: Request,
    body: RatingRequest,
    principal: Principal = Depends(require_roles(Role.CUSTOMER, Role.ADMIN)),
    ratings: RatingService = Depends(get_rating_service),
):
    rating, average = await ratings.rate(
        principal,
        driver_id=body.driver_id,
        ride_id=body.ride_id,
        value=body.rating,
        customer_id=body.customer_id,
    )
    return RatingResponse(
        message="Rating submitted successfully",
        rating_id=rating.id,
        driver_rating=average,
    )
