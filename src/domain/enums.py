"""Domain enumerations and state-transition rules."""

import enum


class RideStatus(str, enum.Enum):
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# State machine: maps current status -> set of valid next statuses
RIDE_TRANSITIONS: dict[RideStatus, set[RideStatus]] = {
    RideStatus.PENDING: {
        RideStatus.ACCEPTED,
        RideStatus.COMPLETED,
        RideStatus.CANCELLED,
    },
    RideStatus.ACCEPTED: {RideStatus.COMPLETED, RideStatus.CANCELLED},
    RideStatus.COMPLETED: set(),
    RideStatus.CANCELLED: set(),
}

TERMINAL_STATUSES = frozenset(
    status for status, allowed in RIDE_TRANSITIONS.items() if not allowed
)


class DriverStatus(str, enum.Enum):
    AVAILABLE = "Available"
    ON_TRIP = "On Trip"
    OFFLINE = "Offline"
    BLOCKED = "Blocked"


# Statuses a driver may set on themselves
SELF_SETTABLE_DRIVER_STATUSES = frozenset(
    {DriverStatus.AVAILABLE, DriverStatus.OFFLINE, DriverStatus.ON_TRIP}
)


class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    PAID = "Paid"
    COMPLETED = "Completed"


class Role(str, enum.Enum):
    CUSTOMER = "customer"
    DRIVER = "driver"
    ADMIN = "admin"


class AccountType(str, enum.Enum):
    """Account kinds an admin can block."""

    CUSTOMER = "customer"
    DRIVER = "driver"
