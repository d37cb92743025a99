"""
SQLAlchemy ORM models  (PostgreSQL in production, SQLite in tests).

Tables
------
* ``customers``     -- riders of the taxi domain, ticket holders of the queue domain
* ``drivers``       -- customer-shaped accounts plus vehicle, status, earnings, rating
* ``admins``        -- administrator accounts
* ``rides``         -- bookings and their lifecycle status
* ``ratings``       -- 1-5 star ratings of a driver for a ride
* ``payments``      -- one payment completes one ride
* ``locations``     -- queue branches
* ``categories``    -- appointment categories
* ``queue_tickets`` -- sequential numbers per (location, category)

Indexes
-------
* **Unique** on account emails, location and category names, and on
  ``(location_id, category_id, number)`` -- the last one is what makes
  ticket sequencing safe under concurrent requests.
* **B-Tree** on ride ``status`` / ``customer_id`` / ``driver_id``, driver
  ``status``, rating ``driver_id`` and the queue look-up columns.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
)

from .database import Base
from src.domain.enums import DriverStatus, PaymentStatus, RideStatus, Role


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _enum(enum_cls, name: str) -> Enum:
    """Persist enum *values* ("On Trip"), not member names."""
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [m.value for m in members],
        validate_strings=True,
    )


class CustomerModel(Base):
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(80), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone_no = Column(String(32), nullable=True)
    role = Column(_enum(Role, "role"), default=Role.CUSTOMER, nullable=False)
    is_blocked = Column(Boolean, default=False, nullable=False)
    joined_at = Column(DateTime(timezone=True), default=utcnow)


class DriverModel(Base):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(80), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone_no = Column(String(32), nullable=True)
    car_model = Column(String(80), nullable=True)
    role = Column(_enum(Role, "role"), default=Role.DRIVER, nullable=False)
    status = Column(
        _enum(DriverStatus, "driverstatus"),
        default=DriverStatus.AVAILABLE,
        nullable=False,
    )
    earnings = Column(Float, default=0.0, nullable=False)
    rating = Column(Float, nullable=True)
    is_blocked = Column(Boolean, default=False, nullable=False)
    joined_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (Index("idx_drivers_status", "status"),)


class AdminModel(Base):
    __tablename__ = "admins"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(80), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(_enum(Role, "role"), default=Role.ADMIN, nullable=False)
    is_blocked = Column(Boolean, default=False, nullable=False)
    joined_at = Column(DateTime(timezone=True), default=utcnow)


class RideModel(Base):
    __tablename__ = "rides"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=True)
    pickup_location = Column(String(255), nullable=False)
    destination = Column(String(255), nullable=False)
    status = Column(
        _enum(RideStatus, "ridestatus"),
        default=RideStatus.PENDING,
        nullable=False,
    )
    payment_status = Column(
        _enum(PaymentStatus, "paymentstatus"),
        default=PaymentStatus.PENDING,
        nullable=False,
    )
    payment_id = Column(Integer, nullable=True)
    fare = Column(Float, nullable=True)

    booked_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("idx_rides_status", "status"),
        Index("idx_rides_customer", "customer_id"),
        Index("idx_rides_driver", "driver_id"),
    )


class RatingModel(Base):
    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False)
    ride_id = Column(Integer, ForeignKey("rides.id"), nullable=False)
    rating = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_ratings_range"),
        Index("idx_ratings_driver", "driver_id"),
    )


class PaymentModel(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    ride_id = Column(Integer, ForeignKey("rides.id"), nullable=False)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=False)
    amount = Column(Float, nullable=False)
    status = Column(
        _enum(PaymentStatus, "paymentstatus"),
        default=PaymentStatus.COMPLETED,
        nullable=False,
    )
    paid_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (Index("idx_payments_ride", "ride_id"),)


class LocationModel(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), unique=True, nullable=False)
    hours = Column(String(120), nullable=True)
    is_available = Column(Boolean, default=True, nullable=False)


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(120), unique=True, nullable=False)
    description = Column(String(255), nullable=True)


class QueueTicketModel(Base):
    __tablename__ = "queue_tickets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_id = Column(
        Integer, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False
    )
    location_id = Column(Integer, ForeignKey("locations.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    number = Column(Integer, nullable=False)
    served = Column(Boolean, default=False, nullable=False)
    issued_at = Column(DateTime(timezone=True), default=utcnow)
    served_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "location_id", "category_id", "number", name="uq_queue_ticket_number"
        ),
        Index("idx_queue_pair_served", "location_id", "category_id", "served"),
        Index("idx_queue_customer", "customer_id"),
    )
