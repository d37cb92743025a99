"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 1 admin (admin@example.com / admin123)
  - 6 sample customers and 5 sample drivers (password: password123)
  - 6 sample rides (mix of Pending, Accepted, Completed, Cancelled)
  - 3 queue locations, 4 appointment categories and a few waiting tickets
"""

import asyncio
from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select

from src.config import get_settings
from src.domain.enums import DriverStatus, PaymentStatus, RideStatus, Role
from src.domain.rating import average_rating
from src.infrastructure.database import Database
from src.infrastructure.models import (
    AdminModel,
    CategoryModel,
    CustomerModel,
    DriverModel,
    LocationModel,
    PaymentModel,
    QueueTicketModel,
    RatingModel,
    RideModel,
)
from src.infrastructure.security import PasswordHasher
from src.logging_config import configure_logging

SAMPLE_PASSWORD = "password123"

CUSTOMERS = [
    {"username": "Aarav Sharma", "email": "aarav@example.com", "phone_no": "9000000001"},
    {"username": "Priya Patel", "email": "priya@example.com", "phone_no": "9000000002"},
    {"username": "Rohan Mehta", "email": "rohan@example.com", "phone_no": "9000000003"},
    {"username": "Sneha Gupta", "email": "sneha@example.com", "phone_no": "9000000004"},
    {"username": "Vikram Singh", "email": "vikram@example.com", "phone_no": "9000000005"},
    {"username": "Ananya Reddy", "email": "ananya@example.com", "phone_no": "9000000006"},
]

DRIVERS = [
    {"username": "Karan Joshi", "email": "karan@example.com", "phone_no": "8000000001", "car_model": "Toyota Etios"},
    {"username": "Meera Nair", "email": "meera@example.com", "phone_no": "8000000002", "car_model": "Maruti Dzire"},
    {"username": "Arjun Kumar", "email": "arjun@example.com", "phone_no": "8000000003", "car_model": "Hyundai Aura"},
    {"username": "Diya Iyer", "email": "diya@example.com", "phone_no": "8000000004", "car_model": "Honda Amaze"},
    {"username": "Rahul Verma", "email": "rahul@example.com", "phone_no": "8000000005", "car_model": "Toyota Innova"},
]

LOCATIONS = [
    {"name": "Downtown Branch", "hours": "09:00-17:00", "is_available": True},
    {"name": "Airport Kiosk", "hours": "06:00-22:00", "is_available": True},
    {"name": "Harbour Office", "hours": "10:00-16:00", "is_available": False},
]

CATEGORIES = [
    {"name": "Account Opening", "description": "New accounts and KYC"},
    {"name": "Loans", "description": "Loan enquiries and applications"},
    {"name": "Card Services", "description": "Card replacement and PIN reset"},
    {"name": "General Enquiry", "description": None},
]


async def seed(db: Database) -> None:
    hasher = PasswordHasher(get_settings().password_schemes)
    now = datetime.now(timezone.utc)

    async with db.session() as session:
        # Check if already seeded
        result = await session.execute(select(func.count()).select_from(CustomerModel))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Accounts ──────────────────────────────────────────────────
        session.add(
            AdminModel(
                username="Administrator",
                email="admin@example.com",
                password_hash=hasher.hash("admin123"),
                role=Role.ADMIN,
            )
        )
        password_hash = hasher.hash(SAMPLE_PASSWORD)
        customer_models = []
        for c in CUSTOMERS:
            m = CustomerModel(**c, password_hash=password_hash, role=Role.CUSTOMER)
            session.add(m)
            customer_models.append(m)
        driver_models = []
        for d in DRIVERS:
            m = DriverModel(
                **d,
                password_hash=password_hash,
                role=Role.DRIVER,
                status=DriverStatus.AVAILABLE,
                earnings=0.0,
            )
            session.add(m)
            driver_models.append(m)
        await session.flush()
        print(f"  Created 1 admin, {len(customer_models)} customers, {len(driver_models)} drivers")

        # ── Rides ─────────────────────────────────────────────────────
        rides_data = [
            # Completed and paid, spread over the last months for /admin/reports
            {"customer": 0, "driver": 0, "pickup": "Central Station", "dest": "Airport T1",
             "status": RideStatus.COMPLETED, "fare": 42.50, "days_ago": 65, "rating": 5},
            {"customer": 1, "driver": 1, "pickup": "Old Town", "dest": "Tech Park",
             "status": RideStatus.COMPLETED, "fare": 18.75, "days_ago": 34, "rating": 4},
            {"customer": 2, "driver": 0, "pickup": "Harbour", "dest": "University",
             "status": RideStatus.COMPLETED, "fare": 27.00, "days_ago": 3, "rating": 3},
            {"customer": 3, "driver": 2, "pickup": "Stadium", "dest": "City Mall",
             "status": RideStatus.CANCELLED, "fare": 22.10, "days_ago": 2, "rating": None},
            # In progress: their drivers are busy
            {"customer": 4, "driver": 3, "pickup": "Museum", "dest": "Airport T2",
             "status": RideStatus.ACCEPTED, "fare": 51.30, "days_ago": 0, "rating": None},
            {"customer": 5, "driver": 4, "pickup": "Lake View", "dest": "Old Town",
             "status": RideStatus.PENDING, "fare": 14.90, "days_ago": 0, "rating": None},
        ]

        ratings: dict[int, list[int]] = {}
        for r in rides_data:
            customer = customer_models[r["customer"]]
            driver = driver_models[r["driver"]]
            completed = r["status"] == RideStatus.COMPLETED
            ride = RideModel(
                customer_id=customer.id,
                driver_id=driver.id,
                pickup_location=r["pickup"],
                destination=r["dest"],
                status=r["status"],
                payment_status=PaymentStatus.PAID if completed else PaymentStatus.PENDING,
                fare=r["fare"],
                booked_at=now - timedelta(days=r["days_ago"]),
            )
            session.add(ride)
            await session.flush()

            if completed:
                payment = PaymentModel(
                    ride_id=ride.id,
                    driver_id=driver.id,
                    amount=r["fare"],
                    status=PaymentStatus.COMPLETED,
                    paid_at=ride.booked_at,
                )
                session.add(payment)
                await session.flush()
                ride.payment_id = payment.id
                driver.earnings += r["fare"]
            elif r["status"] in (RideStatus.PENDING, RideStatus.ACCEPTED):
                driver.status = DriverStatus.ON_TRIP

            if r["rating"] is not None:
                session.add(
                    RatingModel(
                        customer_id=customer.id,
                        driver_id=driver.id,
                        ride_id=ride.id,
                        rating=r["rating"],
                    )
                )
                ratings.setdefault(driver.id, []).append(r["rating"])

        for driver in driver_models:
            driver.rating = average_rating(ratings.get(driver.id, []))
        await session.flush()
        print(f"  Created {len(rides_data)} rides")

        # ── Queue ─────────────────────────────────────────────────────
        location_models = [LocationModel(**loc) for loc in LOCATIONS]
        category_models = [CategoryModel(**cat) for cat in CATEGORIES]
        session.add_all(location_models + category_models)
        await session.flush()
        print(
            f"  Created {len(location_models)} locations, "
            f"{len(category_models)} categories"
        )

        downtown, airport = location_models[0], location_models[1]
        tickets = [
            (customer_models[0], downtown, category_models[0], 1),
            (customer_models[1], downtown, category_models[0], 2),
            (customer_models[2], downtown, category_models[1], 1),
            (customer_models[3], airport, category_models[2], 1),
        ]
        for customer, location, category, number in tickets:
            session.add(
                QueueTicketModel(
                    customer_id=customer.id,
                    location_id=location.id,
                    category_id=category.id,
                    number=number,
                    served=False,
                )
            )
        await session.flush()
        print(f"  Created {len(tickets)} queue tickets")

        await session.commit()
        print("\nSeed complete!")


async def main():
    settings = get_settings()
    configure_logging(settings.log_level)
    db = Database.from_settings(settings)
    print("Seeding database...")
    try:
        await seed(db)
    finally:
        await db.dispose()


if __name__ == "__main__":
    asyncio.run(main())
