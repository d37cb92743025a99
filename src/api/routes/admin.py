"""
Admin / observability endpoints
===============================

POST   /admin/register             -- create an admin account
GET    /admin/login                -- bearer token for an admin (POST also accepted)
GET    /admin/users                -- all customers and drivers
PATCH  /admin/block/{type}/{id}    -- block a customer or driver
GET    /admin/reports              -- completed rides and payments per month
GET    /admin/queue/reports        -- queue totals
GET    /admin/locations            -- list locations (POST adds one)
GET    /admin/categories           -- list appointment categories (POST adds one)
GET    /admin/customers            -- list customers
DELETE /admin/customers/{id}       -- delete a ride-less customer and their tickets
GET    /admin/health               -- simple health check
"""

from fastapi import APIRouter, Depends, Request, Response

from src.api.dependencies import (
    get_account_service,
    get_admin_service,
    get_queue_service,
    require_roles,
)
from src.api.middleware import default_rate_limit, limiter
from src.api.schemas import (
    AdminLoginResponse,
    AdminRegisteredResponse,
    AdminRegisterRequest,
    CategoryCreatedResponse,
    CategoryCreateRequest,
    CategoryResponse,
    CustomerResponse,
    DriverResponse,
    HealthResponse,
    LocationCreatedResponse,
    LocationCreateRequest,
    LocationResponse,
    LoginRequest,
    MessageResponse,
    MonthlyReportResponse,
    QueueReportResponse,
    UsersResponse,
)
from src.domain.enums import AccountType, Role
from src.services.accounts import AccountService
from src.services.admin import AdminService
from src.services.queue import QueueService

router = APIRouter(prefix="/admin", tags=["admin"])

admin_only = [Depends(require_roles(Role.ADMIN))]


# ── Accounts ──────────────────────────────────────────────────────────


@router.post(
    "/register",
    status_code=201,
    response_model=AdminRegisteredResponse,
    summary="Register an admin",
)
@limiter.limit(default_rate_limit)
async def register(
    request: Request,
    body: AdminRegisterRequest,
    accounts: AccountService = Depends(get_account_service),
):
    admin = await accounts.register_admin(
        username=body.username, email=body.email, password=body.password
    )
    return AdminRegisteredResponse(
        message="Admin registered successfully", admin_id=admin.id
    )


@router.api_route(
    "/login",
    methods=["GET", "POST"],
    response_model=AdminLoginResponse,
    summary="Log in as an admin",
)
@limiter.limit(default_rate_limit)
async def login(
    request: Request,
    body: LoginRequest,
    accounts: AccountService = Depends(get_account_service),
):
    admin, token = await accounts.login(Role.ADMIN, body.email, body.password)
    return AdminLoginResponse(
        message="Admin login successful",
        admin_id=admin.id,
        token=token,
        role=Role.ADMIN,
    )


@router.get(
    "/users",
    response_model=UsersResponse,
    dependencies=admin_only,
    summary="List customers and drivers",
)
@limiter.limit(default_rate_limit)
async def list_users(
    request: Request,
    admin: AdminService = Depends(get_admin_service),
):
    customers, drivers = await admin.list_users()
    return UsersResponse(
        customers=[CustomerResponse.model_validate(c) for c in customers],
        drivers=[DriverResponse.model_validate(d) for d in drivers],
    )


@router.patch(
    "/block/{account_type}/{account_id}",
    response_model=MessageResponse,
    dependencies=admin_only,
    summary="Block a customer or driver",
)
@limiter.limit(default_rate_limit)
async def block_account(
    request: Request,
    account_type: AccountType,
    account_id: int,
    admin: AdminService = Depends(get_admin_service),
):
    await admin.block(account_type, account_id)
    return MessageResponse(
        message=f"{account_type.value.capitalize()} blocked successfully."
    )


@router.get(
    "/customers",
    response_model=list[CustomerResponse],
    dependencies=admin_only,
    summary="List customers",
)
@limiter.limit(default_rate_limit)
async def list_customers(
    request: Request,
    admin: AdminService = Depends(get_admin_service),
):
    return await admin.list_customers()


@router.delete(
    "/customers/{customer_id}",
    status_code=204,
    dependencies=admin_only,
    summary="Delete a customer",
)
@limiter.limit(default_rate_limit)
async def delete_customer(
    request: Request,
    customer_id: int,
    admin: AdminService = Depends(get_admin_service),
):
    await admin.delete_customer(customer_id)
    return Response(status_code=204)


# ── Reports ───────────────────────────────────────────────────────────


@router.get(
    "/reports",
    response_model=list[MonthlyReportResponse],
    dependencies=admin_only,
    summary="Completed rides and payments per month",
)
@limiter.limit(default_rate_limit)
async def monthly_reports(
    request: Request,
    admin: AdminService = Depends(get_admin_service),
):
    return [
        MonthlyReportResponse(
            month=r.label,
            total_rides=r.total_rides,
            total_payments=r.total_payments,
        )
        for r in await admin.monthly_reports()
    ]


@router.get(
    "/queue/reports",
    response_model=QueueReportResponse,
    dependencies=admin_only,
    summary="Queue totals",
)
@limiter.limit(default_rate_limit)
async def queue_report(
    request: Request,
    queue: QueueService = Depends(get_queue_service),
):
    return QueueReportResponse(**await queue.report())


# ── Reference data ────────────────────────────────────────────────────


@router.get(
    "/locations",
    response_model=list[LocationResponse],
    dependencies=admin_only,
    summary="List locations",
)
@limiter.limit(default_rate_limit)
async def list_locations(
    request: Request,
    queue: QueueService = Depends(get_queue_service),
):
    return await queue.list_locations()


@router.post(
    "/locations",
    status_code=201,
    response_model=LocationCreatedResponse,
    dependencies=admin_only,
    summary="Add a location",
)
@limiter.limit(default_rate_limit)
async def add_location(
    request: Request,
    body: LocationCreateRequest,
    queue: QueueService = Depends(get_queue_service),
):
    location = await queue.add_location(
        body.name, hours=body.hours, is_available=body.availability
    )
    return LocationCreatedResponse(
        message="Location added successfully", location_id=location.id
    )


@router.get(
    "/categories",
    response_model=list[CategoryResponse],
    dependencies=admin_only,
    summary="List appointment categories",
)
@limiter.limit(default_rate_limit)
async def list_categories(
    request: Request,
    queue: QueueService = Depends(get_queue_service),
):
    return await queue.list_categories()


@router.post(
    "/categories",
    status_code=201,
    response_model=CategoryCreatedResponse,
    dependencies=admin_only,
    summary="Add an appointment category",
)
@limiter.limit(default_rate_limit)
async def add_category(
    request: Request,
    body: CategoryCreateRequest,
    queue: QueueService = Depends(get_queue_service),
):
    category = await queue.add_category(body.name, description=body.description)
    return CategoryCreatedResponse(category_id=category.id)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
