"""Unit tests for ticket sequencing, rating aggregation, reports and access rules."""

from datetime import datetime

import pytest

from src.domain.access import Principal, can_act_for, ensure_owner_or_admin, ensure_role
from src.domain.enums import Role
from src.domain.errors import ErrorKind, PermissionDenied, ValidationError
from src.domain.rating import average_rating, validate_rating
from src.domain.reports import monthly_reports
from src.domain.sequencing import next_ticket_number


class TestTicketSequencer:
    def test_empty_queue_starts_at_one(self):
        assert next_ticket_number(None) == 1

    def test_increments_current_max(self):
        assert next_ticket_number(41) == 42

    def test_non_positive_max_treated_as_empty(self):
        assert next_ticket_number(0) == 1

    def test_gaps_are_not_refilled(self):
        # numbers 1 and 3 issued, 2 cancelled; the next one follows the maximum
        assert next_ticket_number(max([1, 3])) == 4


class TestRatingAggregator:
    @pytest.mark.parametrize("value", [1, 3, 5])
    def test_in_range(self, value):
        assert validate_rating(value) == value

    @pytest.mark.parametrize("value", [0, 6, -1, 10])
    def test_out_of_range(self, value):
        with pytest.raises(ValidationError):
            validate_rating(value)

    @pytest.mark.parametrize("value", [True, 4.5, "5", None])
    def test_non_integer(self, value):
        with pytest.raises(ValidationError):
            validate_rating(value)

    def test_average(self):
        assert average_rating([5, 3]) == 4.0

    def test_average_rounded(self):
        assert average_rating([5, 4, 4]) == 4.33

    def test_average_of_nothing(self):
        assert average_rating([]) is None


class TestMonthlyReports:
    def test_groups_and_sorts_by_month(self):
        reports = monthly_reports(
            [
                (datetime(2026, 10, 3), 20.0),
                (datetime(2026, 9, 30), 12.5),
                (datetime(2026, 10, 17), 30.25),
                (datetime(2025, 12, 1), 5.0),
            ]
        )
        assert [r.label for r in reports] == [
            "December 2025",
            "September 2026",
            "October 2026",
        ]
        october = reports[-1]
        assert october.total_rides == 2
        assert october.total_payments == 50.25

    def test_rows_without_timestamp_are_skipped(self):
        assert monthly_reports([(None, 10.0)]) == []

    def test_missing_fare_counts_as_zero(self):
        (report,) = monthly_reports([(datetime(2026, 1, 5), None)])
        assert report.total_rides == 1
        assert report.total_payments == 0.0


class TestAccessRules:
    def test_admin_acts_for_anyone(self):
        admin = Principal(id=1, role=Role.ADMIN)
        assert can_act_for(admin, Role.CUSTOMER, 99)
        assert can_act_for(admin, Role.DRIVER, 42)

    def test_customer_acts_for_self_only(self):
        customer = Principal(id=5, role=Role.CUSTOMER)
        assert can_act_for(customer, Role.CUSTOMER, 5)
        assert not can_act_for(customer, Role.CUSTOMER, 6)

    def test_same_id_different_role_is_not_owner(self):
        driver = Principal(id=5, role=Role.DRIVER)
        assert not can_act_for(driver, Role.CUSTOMER, 5)

    def test_ensure_owner_raises_forbidden(self):
        with pytest.raises(PermissionDenied) as exc_info:
            ensure_owner_or_admin(Principal(id=5, role=Role.CUSTOMER), Role.CUSTOMER, 6)
        assert exc_info.value.kind == ErrorKind.FORBIDDEN
        assert exc_info.value.status_code == 403

    def test_ensure_role(self):
        ensure_role(Principal(id=1, role=Role.DRIVER), [Role.DRIVER, Role.ADMIN])
        with pytest.raises(PermissionDenied):
            ensure_role(Principal(id=1, role=Role.CUSTOMER), [Role.DRIVER])
