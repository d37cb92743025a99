"""Pydantic request / response schemas for the REST API.

Wire names follow the public API (``customerId``, ``PickupLocation``,
``Fare`` ...); Python attributes stay snake_case.  Requests accept either
spelling, responses are serialised with the wire names.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.enums import DriverStatus, PaymentStatus, RideStatus, Role


class RequestModel(BaseModel):
    model_config = {"populate_by_name": True}


class PatchModel(BaseModel):
    model_config = {"populate_by_name": True, "extra": "forbid"}


class ResponseModel(BaseModel):
    model_config = {"from_attributes": True}


# ── Requests ──────────────────────────────────────────────────────────


class CustomerRegisterRequest(RequestModel):
    username: str = Field(..., min_length=1, max_length=80)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)
    phone_no: str = Field(..., min_length=1, max_length=32)


class DriverRegisterRequest(CustomerRegisterRequest):
    car_model: str = Field(..., min_length=1, max_length=80)


class AdminRegisterRequest(RequestModel):
    username: str = Field(..., min_length=1, max_length=80)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class LoginRequest(RequestModel):
    email: str
    password: str


class CustomerUpdateRequest(PatchModel):
    username: Optional[str] = Field(None, min_length=1, max_length=80)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    phone_no: Optional[str] = Field(None, min_length=1, max_length=32)
    password: Optional[str] = Field(None, min_length=1)


class DriverUpdateRequest(CustomerUpdateRequest):
    car_model: Optional[str] = Field(None, min_length=1, max_length=80)


class AvailabilityRequest(RequestModel):
    status: DriverStatus


class BookRideRequest(RequestModel):
    customer_id: Optional[int] = Field(None, alias="customerId")
    pickup_location: str = Field(..., alias="PickupLocation", min_length=1, max_length=255)
    destination: str = Field(..., alias="Destination", min_length=1, max_length=255)


class AcceptRideRequest(RequestModel):
    driver_id: Optional[int] = Field(None, alias="driverId")


class RatingRequest(RequestModel):
    customer_id: Optional[int] = Field(None, alias="customerId")
    driver_id: int = Field(..., alias="driverId")
    ride_id: int = Field(..., alias="rideId")
    rating: int


class PaymentRequest(RequestModel):
    ride_id: int = Field(..., alias="rideId")
    amount: float = Field(..., alias="Fare")
    driver_id: int = Field(..., alias="driverId")


class QueueObtainRequest(RequestModel):
    customer_id: int = Field(..., alias="customerId")
    location_id: int = Field(..., alias="locationId")
    category_id: int = Field(..., alias="appointmentCategoryId")


class LocationCreateRequest(RequestModel):
    name: str = Field(..., alias="location", min_length=1, max_length=120)
    hours: Optional[str] = Field(None, max_length=120)
    availability: bool = True


class LocationAvailabilityRequest(RequestModel):
    availability: bool


class CategoryCreateRequest(RequestModel):
    name: str = Field(..., alias="category", min_length=1, max_length=120)
    description: Optional[str] = Field(None, max_length=255)


# ── Responses ─────────────────────────────────────────────────────────


class MessageResponse(BaseModel):
    message: str


class CustomerRegisteredResponse(MessageResponse):
    customer_id: int = Field(..., serialization_alias="customerId")


class DriverRegisteredResponse(MessageResponse):
    driver_id: int = Field(..., serialization_alias="driverId")


class AdminRegisteredResponse(MessageResponse):
    admin_id: int = Field(..., serialization_alias="adminId")


class CustomerLoginResponse(CustomerRegisteredResponse):
    token: str
    role: Role


class DriverLoginResponse(DriverRegisteredResponse):
    token: str
    role: Role


class AdminLoginResponse(AdminRegisteredResponse):
    token: str
    role: Role


class CustomerResponse(ResponseModel):
    id: int
    username: str
    email: str
    phone_no: Optional[str] = None
    role: Role
    is_blocked: bool = Field(False, serialization_alias="isBlocked")
    joined_at: Optional[datetime] = Field(None, serialization_alias="joinedDate")


class DriverResponse(CustomerResponse):
    car_model: Optional[str] = None
    status: DriverStatus
    earnings: float = 0.0
    rating: Optional[float] = None


class UsersResponse(BaseModel):
    customers: list[CustomerResponse]
    drivers: list[DriverResponse]


class RideResponse(ResponseModel):
    id: int = Field(..., serialization_alias="rideId")
    customer_id: int = Field(..., serialization_alias="customerId")
    driver_id: Optional[int] = Field(None, serialization_alias="driverId")
    pickup_location: str = Field(..., serialization_alias="PickupLocation")
    destination: str = Field(..., serialization_alias="Destination")
    status: RideStatus
    payment_status: PaymentStatus = Field(..., serialization_alias="paymentStatus")
    fare: Optional[float] = Field(None, serialization_alias="fare")
    booked_at: Optional[datetime] = Field(None, serialization_alias="BookingTime")


class BookRideResponse(MessageResponse):
    ride_id: int = Field(..., serialization_alias="rideId")
    fare: float
    driver_id: Optional[int] = Field(None, serialization_alias="driverId")
    status: RideStatus


class RatingResponse(MessageResponse):
    rating_id: int = Field(..., serialization_alias="ratingId")
    driver_rating: Optional[float] = Field(None, serialization_alias="driverRating")


class DriverRatingResponse(BaseModel):
    rating: float


class DriverEarningsResponse(BaseModel):
    earnings: float


class PaymentResponse(MessageResponse):
    payment_id: int = Field(..., serialization_alias="paymentId")


class QueueTicketResponse(MessageResponse):
    queue_number: int = Field(..., serialization_alias="queueNumber")
    queue_entry_id: int = Field(..., serialization_alias="queueEntryId")
    location_name: str = Field(..., serialization_alias="locationName")
    category_name: str = Field(..., serialization_alias="appointmentCategoryName")


class TicketResponse(ResponseModel):
    id: int
    customer_id: int = Field(..., serialization_alias="customerId")
    location_id: int = Field(..., serialization_alias="locationId")
    category_id: int = Field(..., serialization_alias="appointmentCategoryId")
    number: int
    served: bool
    issued_at: Optional[datetime] = Field(None, serialization_alias="timestamp")
    served_at: Optional[datetime] = Field(None, serialization_alias="servedAt")


class CallNextResponse(MessageResponse):
    queue_number: int = Field(..., serialization_alias="queueNumber")


class LocationResponse(ResponseModel):
    id: int
    name: str = Field(..., serialization_alias="location")
    hours: Optional[str] = None
    is_available: bool = Field(..., serialization_alias="availability")


class LocationCreatedResponse(MessageResponse):
    location_id: int = Field(..., serialization_alias="locationId")


class CategoryResponse(ResponseModel):
    id: int
    name: str = Field(..., serialization_alias="category")
    description: Optional[str] = None


class CategoryCreatedResponse(BaseModel):
    category_id: int = Field(..., serialization_alias="appointmentCategoryId")


class MonthlyReportResponse(BaseModel):
    month: str = Field(..., serialization_alias="Month")
    total_rides: int = Field(..., serialization_alias="Total_Rides")
    total_payments: float = Field(..., serialization_alias="Total_Payments_Made")


class QueueReportResponse(BaseModel):
    total_customers: int = Field(..., serialization_alias="totalCustomers")
    total_queue_entries: int = Field(..., serialization_alias="totalQueueEntries")
    active_queue_entries: int = Field(..., serialization_alias="activeQueueEntries")


class QueueAnalyticsRow(BaseModel):
    customer_id: int = Field(..., serialization_alias="customerId")
    location: Optional[str] = None
    appointment_category: Optional[str] = Field(
        None, serialization_alias="appointmentCategory"
    )
    number: int


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    error: str
    detail: str
