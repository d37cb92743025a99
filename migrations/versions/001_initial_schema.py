"""Initial schema: accounts, rides, ratings, payments and the queue tables.

Revision ID: 001
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision = "001"
down_revision = None
branch_labels = None
depends_on = None

# Enum types are shared between tables, so they are created once up front
ROLE = postgresql.ENUM("customer", "driver", "admin", name="role")
DRIVER_STATUS = postgresql.ENUM(
    "Available", "On Trip", "Offline", "Blocked", name="driverstatus"
)
RIDE_STATUS = postgresql.ENUM(
    "Pending", "Accepted", "Completed", "Cancelled", name="ridestatus"
)
PAYMENT_STATUS = postgresql.ENUM(
    "Pending", "Paid", "Completed", name="paymentstatus"
)


def _ref(enum_type: postgresql.ENUM) -> postgresql.ENUM:
    return postgresql.ENUM(name=enum_type.name, create_type=False)


def _account_columns(role: str) -> list:
    return [
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(80), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", _ref(ROLE), server_default=role, nullable=False),
        sa.Column("is_blocked", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column(
            "joined_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    ]


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in (ROLE, DRIVER_STATUS, RIDE_STATUS, PAYMENT_STATUS):
        enum_type.create(bind, checkfirst=True)

    # ── accounts ──────────────────────────────────────────────────────
    op.create_table(
        "customers",
        *_account_columns("customer"),
        sa.Column("phone_no", sa.String(32), nullable=True),
    )
    op.create_table(
        "drivers",
        *_account_columns("driver"),
        sa.Column("phone_no", sa.String(32), nullable=True),
        sa.Column("car_model", sa.String(80), nullable=True),
        sa.Column(
            "status",
            _ref(DRIVER_STATUS),
            server_default="Available",
            nullable=False,
        ),
        sa.Column("earnings", sa.Float, server_default="0", nullable=False),
        sa.Column("rating", sa.Float, nullable=True),
    )
    op.create_index("idx_drivers_status", "drivers", ["status"])
    op.create_table("admins", *_account_columns("admin"))

    # ── rides ─────────────────────────────────────────────────────────
    op.create_table(
        "rides",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=False
        ),
        sa.Column(
            "driver_id", sa.Integer, sa.ForeignKey("drivers.id"), nullable=True
        ),
        sa.Column("pickup_location", sa.String(255), nullable=False),
        sa.Column("destination", sa.String(255), nullable=False),
        sa.Column(
            "status", _ref(RIDE_STATUS), server_default="Pending", nullable=False
        ),
        sa.Column(
            "payment_status",
            _ref(PAYMENT_STATUS),
            server_default="Pending",
            nullable=False,
        ),
        sa.Column("payment_id", sa.Integer, nullable=True),
        sa.Column("fare", sa.Float, nullable=True),
        sa.Column(
            "booked_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_rides_status", "rides", ["status"])
    op.create_index("idx_rides_customer", "rides", ["customer_id"])
    op.create_index("idx_rides_driver", "rides", ["driver_id"])

    # ── ratings / payments ────────────────────────────────────────────
    op.create_table(
        "ratings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "customer_id", sa.Integer, sa.ForeignKey("customers.id"), nullable=False
        ),
        sa.Column(
            "driver_id", sa.Integer, sa.ForeignKey("drivers.id"), nullable=False
        ),
        sa.Column("ride_id", sa.Integer, sa.ForeignKey("rides.id"), nullable=False),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_ratings_range"),
    )
    op.create_index("idx_ratings_driver", "ratings", ["driver_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("ride_id", sa.Integer, sa.ForeignKey("rides.id"), nullable=False),
        sa.Column(
            "driver_id", sa.Integer, sa.ForeignKey("drivers.id"), nullable=False
        ),
        sa.Column("amount", sa.Float, nullable=False),
        sa.Column(
            "status",
            _ref(PAYMENT_STATUS),
            server_default="Completed",
            nullable=False,
        ),
        sa.Column(
            "paid_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_payments_ride", "payments", ["ride_id"])

    # ── queue ─────────────────────────────────────────────────────────
    op.create_table(
        "locations",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), unique=True, nullable=False),
        sa.Column("hours", sa.String(120), nullable=True),
        sa.Column("is_available", sa.Boolean, server_default=sa.true(), nullable=False),
    )
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), unique=True, nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
    )
    op.create_table(
        "queue_tickets",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "customer_id",
            sa.Integer,
            sa.ForeignKey("customers.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "location_id", sa.Integer, sa.ForeignKey("locations.id"), nullable=False
        ),
        sa.Column(
            "category_id", sa.Integer, sa.ForeignKey("categories.id"), nullable=False
        ),
        sa.Column("number", sa.Integer, nullable=False),
        sa.Column("served", sa.Boolean, server_default=sa.false(), nullable=False),
        sa.Column(
            "issued_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column("served_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint(
            "location_id", "category_id", "number", name="uq_queue_ticket_number"
        ),
    )
    op.create_index(
        "idx_queue_pair_served",
        "queue_tickets",
        ["location_id", "category_id", "served"],
    )
    op.create_index("idx_queue_customer", "queue_tickets", ["customer_id"])


def downgrade() -> None:
    op.drop_table("queue_tickets")
    op.drop_table("categories")
    op.drop_table("locations")
    op.drop_table("payments")
    op.drop_table("ratings")
    op.drop_table("rides")
    op.drop_table("admins")
    op.drop_table("drivers")
    op.drop_table("customers")
    bind = op.get_bind()
    for enum_type in (PAYMENT_STATUS, RIDE_STATUS, DRIVER_STATUS, ROLE):
        enum_type.drop(bind, checkfirst=True)
