"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Ride``: enforces valid lifecycle transitions
  (Pending -> Accepted -> Completed | Cancelled).
- ``Driver`` owns the on-trip / available flip and earnings bookkeeping.

The ORM models in ``src.infrastructure.models`` expose the same attribute
names, so the lifecycle rules in ``src.domain.lifecycle`` accept either.
The services work on the ORM models directly; these dataclasses are the
in-memory form of the same rules, used to exercise them without a store.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import DriverStatus, PaymentStatus, RideStatus, TERMINAL_STATUSES
from .lifecycle import ensure_transition


@dataclass
class Ride:
    id: Optional[int] = None
    customer_id: int = 0
    driver_id: Optional[int] = None
    pickup_location: str = ""
    destination: str = ""
    status: RideStatus = RideStatus.PENDING
    payment_status: PaymentStatus = PaymentStatus.PENDING
    fare: Optional[float] = None
    booked_at: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        return RideStatus(self.status) in TERMINAL_STATUSES

    def transition_to(self, new_status: RideStatus) -> None:
        """Move to *new_status* if the transition is legal, else raise."""
        ensure_transition(self.status, new_status)
        self.status = new_status


@dataclass
class Driver:
    id: Optional[int] = None
    username: str = ""
    status: DriverStatus = DriverStatus.AVAILABLE
    earnings: float = 0.0
    rating: Optional[float] = None
    is_blocked: bool = False

    @property
    def is_available(self) -> bool:
        return not self.is_blocked and self.status == DriverStatus.AVAILABLE

    def start_trip(self) -> None:
        self.status = DriverStatus.ON_TRIP

    def release(self) -> None:
        if self.status == DriverStatus.ON_TRIP:
            self.status = DriverStatus.AVAILABLE

    def credit(self, amount: float) -> None:
        self.earnings = round((self.earnings or 0.0) + amount, 2)
