"""
Queue endpoints (customer side)
===============================

POST /queue/obtain                -- take the next number for a location / category
GET  /queue/customer/{customer_id} -- waiting tickets of a customer
"""

from fastapi import APIRouter, Depends, Request

from src.api.dependencies import get_queue_service, require_roles
from src.api.middleware import default_rate_limit, limiter
from src.api.schemas import QueueObtainRequest, QueueTicketResponse, TicketResponse
from src.domain.access import Principal
from src.domain.enums import Role
from src.services.queue import QueueService

router = APIRouter(prefix="/queue", tags=["queue"])


@router.post(
    "/obtain",
    status_code=201,
    response_model=QueueTicketResponse,
    summary="Obtain a queue number",
    responses={503: {"description": "Location closed or number contention."}},
)
@limiter.limit(default_rate_limit)
async def obtain_ticket(
    request: Request,
    body: QueueObtainRequest,
    principal: Principal = Depends(require_roles(Role.CUSTOMER, Role.ADMIN)),
    queue: QueueService = Depends(get_queue_service),
):
    ticket, location, category = await queue.obtain(
        principal,
        customer_id=body.customer_id,
        location_id=body.location_id,
        category_id=body.category_id,
    )
    return QueueTicketResponse(
        message="Queue number obtained successfully",
        queue_number=ticket.number,
        queue_entry_id=ticket.id,
        location_name=location.name,
        category_name=category.name,
    )


@router.get(
    "/customer/{customer_id}",
    response_model=list[TicketResponse],
    summary="Waiting tickets of a customer",
)
@limiter.limit(default_rate_limit)
async def customer_tickets(
    request: Request,
    customer_id: int,
    principal: Principal = Depends(require_roles(Role.CUSTOMER, Role.ADMIN)),
    queue: QueueService = Depends(get_queue_service),
):
    return await queue.tickets_for(principal, customer_id)
