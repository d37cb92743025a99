"""
Analytics endpoints
===================

GET /analytics/queue?locationId= -- every ticket with its location and category names
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from src.api.dependencies import get_queue_service, require_roles
from src.api.middleware import default_rate_limit, limiter
from src.api.schemas import QueueAnalyticsRow
from src.domain.enums import Role
from src.services.queue import QueueService

router = APIRouter(
    prefix="/analytics",
    tags=["analytics"],
    dependencies=[Depends(require_roles(Role.ADMIN))],
)


@router.get(
    "/queue",
    response_model=list[QueueAnalyticsRow],
    summary="Queue tickets, optionally for one location",
)
@limiter.limit(default_rate_limit)
async def queue_analytics(
    request: Request,
    location_id: Optional[int] = Query(None, alias="locationId"),
    queue: QueueService = Depends(get_queue_service),
):
    return [QueueAnalyticsRow(**row) for row in await queue.analytics(location_id)]
