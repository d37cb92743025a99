"""
Staff endpoints
===============

PATCH  /staff/queue/next/customer/{customer_id}          -- call a customer's oldest ticket
PATCH  /staff/queue/next/{location_id}/{category_id}     -- call the lowest waiting number
DELETE /staff/queue/cancel/customer/{customer_id}/{category_id} -- drop a customer's tickets
PATCH  /staff/location/{location_id}                     -- open / close a location

Staff actions are performed by admins.
"""

from fastapi import APIRouter, Depends, Request, Response

from src.api.dependencies import get_queue_service, require_roles
from src.api.middleware import default_rate_limit, limiter
from src.api.schemas import (
    CallNextResponse,
    LocationAvailabilityRequest,
    LocationResponse,
)
from src.domain.enums import Role
from src.services.queue import QueueService

router = APIRouter(
    prefix="/staff",
    tags=["staff"],
    dependencies=[Depends(require_roles(Role.ADMIN))],
)


# declared before /queue/next/{location_id}/{category_id} so "customer"
# is never read as a location id
@router.patch(
    "/queue/next/customer/{customer_id}",
    response_model=CallNextResponse,
    summary="Call the next ticket of a customer",
)
@limiter.limit(default_rate_limit)
async def call_next_for_customer(
    request: Request,
    customer_id: int,
    queue: QueueService = Depends(get_queue_service),
):
    ticket = await queue.serve_next_for_customer(customer_id)
    return CallNextResponse(
        message=f"Calling next customer: {ticket.customer_id}",
        queue_number=ticket.number,
    )


@router.patch(
    "/queue/next/{location_id}/{category_id}",
    response_model=CallNextResponse,
    summary="Call the next ticket at a location and category",
)
@limiter.limit(default_rate_limit)
async def call_next_for_pair(
    request: Request,
    location_id: int,
    category_id: int,
    queue: QueueService = Depends(get_queue_service),
):
    ticket = await queue.serve_next_for_pair(location_id, category_id)
    return CallNextResponse(
        message=f"Calling next customer: {ticket.customer_id}",
        queue_number=ticket.number,
    )


@router.delete(
    "/queue/cancel/customer/{customer_id}/{category_id}",
    status_code=204,
    summary="Cancel a customer's tickets in a category",
)
@limiter.limit(default_rate_limit)
async def cancel_tickets(
    request: Request,
    customer_id: int,
    category_id: int,
    queue: QueueService = Depends(get_queue_service),
):
    await queue.cancel(customer_id, category_id)
    return Response(status_code=204)


@router.patch(
    "/location/{location_id}",
    response_model=LocationResponse,
    summary="Set location availability",
)
@limiter.limit(default_rate_limit)
async def set_location_availability(
    request: Request,
    location_id: int,
    body: LocationAvailabilityRequest,
    queue: QueueService = Depends(get_queue_service),
):
    return await queue.set_location_availability(location_id, body.availability)
