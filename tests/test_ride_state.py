"""Unit tests for ride entity state transitions (State Pattern)."""

import pytest

from src.domain.entities import Driver, Ride
from src.domain.enums import DriverStatus, RideStatus
from src.domain.errors import InvalidStateTransition, ValidationError


class TestRideStateMachine:
    def test_initial_status_is_pending(self):
        ride = Ride()
        assert ride.status == RideStatus.PENDING

    # ── Valid transitions ─────────────────────────────────────────

    def test_pending_to_accepted(self):
        ride = Ride(status=RideStatus.PENDING)
        ride.transition_to(RideStatus.ACCEPTED)
        assert ride.status == RideStatus.ACCEPTED

    def test_pending_to_cancelled(self):
        ride = Ride(status=RideStatus.PENDING)
        ride.transition_to(RideStatus.CANCELLED)
        assert ride.status == RideStatus.CANCELLED

    def test_pending_to_completed(self):
        """Paying for a booked ride completes it without an explicit accept."""
        ride = Ride(status=RideStatus.PENDING)
        ride.transition_to(RideStatus.COMPLETED)
        assert ride.status == RideStatus.COMPLETED

    def test_accepted_to_completed(self):
        ride = Ride(status=RideStatus.ACCEPTED)
        ride.transition_to(RideStatus.COMPLETED)
        assert ride.status == RideStatus.COMPLETED

    def test_accepted_to_cancelled(self):
        ride = Ride(status=RideStatus.ACCEPTED)
        ride.transition_to(RideStatus.CANCELLED)
        assert ride.status == RideStatus.CANCELLED

    # ── Invalid transitions ───────────────────────────────────────

    def test_accepted_to_accepted_fails(self):
        ride = Ride(status=RideStatus.ACCEPTED)
        with pytest.raises(InvalidStateTransition):
            ride.transition_to(RideStatus.ACCEPTED)

    def test_accepted_back_to_pending_fails(self):
        ride = Ride(status=RideStatus.ACCEPTED)
        with pytest.raises(InvalidStateTransition):
            ride.transition_to(RideStatus.PENDING)

    @pytest.mark.parametrize("terminal", [RideStatus.COMPLETED, RideStatus.CANCELLED])
    @pytest.mark.parametrize("target", list(RideStatus))
    def test_terminal_states_never_change(self, terminal, target):
        ride = Ride(status=terminal)
        with pytest.raises(InvalidStateTransition):
            ride.transition_to(target)
        assert ride.status == terminal

    def test_terminal_error_message(self):
        ride = Ride(status=RideStatus.CANCELLED)
        with pytest.raises(InvalidStateTransition, match="already cancelled"):
            ride.transition_to(RideStatus.CANCELLED)

    def test_invalid_transition_is_a_validation_error(self):
        ride = Ride(status=RideStatus.COMPLETED)
        with pytest.raises(ValidationError) as exc_info:
            ride.transition_to(RideStatus.CANCELLED)
        assert exc_info.value.status_code == 400

    def test_is_terminal(self):
        assert Ride(status=RideStatus.COMPLETED).is_terminal
        assert Ride(status=RideStatus.CANCELLED).is_terminal
        assert not Ride(status=RideStatus.PENDING).is_terminal
        assert not Ride(status=RideStatus.ACCEPTED).is_terminal

    def test_accepts_raw_status_strings(self):
        ride = Ride(status="Pending")
        ride.transition_to(RideStatus.ACCEPTED)
        assert ride.status == RideStatus.ACCEPTED


class TestDriverEntity:
    def test_new_driver_is_available(self):
        assert Driver().is_available

    def test_blocked_driver_is_not_available(self):
        assert not Driver(is_blocked=True).is_available

    def test_trip_round_trip(self):
        driver = Driver()
        driver.start_trip()
        assert driver.status == DriverStatus.ON_TRIP
        assert not driver.is_available
        driver.release()
        assert driver.status == DriverStatus.AVAILABLE

    def test_release_leaves_offline_driver_alone(self):
        driver = Driver(status=DriverStatus.OFFLINE)
        driver.release()
        assert driver.status == DriverStatus.OFFLINE

    def test_credit_accumulates(self):
        driver = Driver(earnings=10.0)
        driver.credit(25.5)
        driver.credit(4.5)
        assert driver.earnings == 40.0
