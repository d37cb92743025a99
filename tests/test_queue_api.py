"""
Integration tests for queue ticketing: obtain, staff calls, cancel and
the admin reference data / report endpoints.
"""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from src.infrastructure.repositories import QueueRepository
from tests.conftest import register_admin, register_customer


async def add_location(
    client: AsyncClient, admin: dict, name: str = "Downtown", availability: bool = True
) -> int:
    resp = await client.post(
        "/admin/locations",
        json={"location": name, "hours": "09:00-17:00", "availability": availability},
        headers=admin,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["locationId"]


async def add_category(client: AsyncClient, admin: dict, name: str = "Loans") -> int:
    resp = await client.post(
        "/admin/categories",
        json={"category": name, "description": "Loan enquiries"},
        headers=admin,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["appointmentCategoryId"]


async def obtain(
    client: AsyncClient, headers: dict, customer_id: int, location_id: int, category_id: int
):
    return await client.post(
        "/queue/obtain",
        json={
            "customerId": customer_id,
            "locationId": location_id,
            "appointmentCategoryId": category_id,
        },
        headers=headers,
    )


# ── Obtain ────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_numbers_are_contiguous_from_one(client: AsyncClient):
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin)
    category_id = await add_category(client, admin)
    customers = [
        await register_customer(client, email=f"c{i}@example.com", username=f"c{i}")
        for i in range(3)
    ]

    numbers = []
    for customer_id, headers in customers:
        resp = await obtain(client, headers, customer_id, location_id, category_id)
        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["locationName"] == "Downtown"
        assert data["appointmentCategoryName"] == "Loans"
        numbers.append(data["queueNumber"])
    assert numbers == [1, 2, 3]


@pytest.mark.asyncio
async def test_numbers_are_scoped_per_location_and_category(client: AsyncClient):
    _, admin = await register_admin(client)
    downtown = await add_location(client, admin, "Downtown")
    airport = await add_location(client, admin, "Airport")
    loans = await add_category(client, admin, "Loans")
    cards = await add_category(client, admin, "Cards")
    customer_id, customer = await register_customer(client)

    for location_id, category_id in [
        (downtown, loans),
        (downtown, cards),
        (airport, loans),
    ]:
        resp = await obtain(client, customer, customer_id, location_id, category_id)
        assert resp.json()["queueNumber"] == 1

    resp = await obtain(client, customer, customer_id, downtown, loans)
    assert resp.json()["queueNumber"] == 2


@pytest.mark.asyncio
async def test_unknown_references_are_400(client: AsyncClient):
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin)
    customer_id, customer = await register_customer(client)
    resp = await obtain(client, customer, customer_id, location_id, 999)
    assert resp.status_code == 400
    assert resp.json()["error"] == "validation"


@pytest.mark.asyncio
async def test_unavailable_location_is_503(client: AsyncClient):
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin, availability=False)
    category_id = await add_category(client, admin)
    customer_id, customer = await register_customer(client)
    resp = await obtain(client, customer, customer_id, location_id, category_id)
    assert resp.status_code == 503


@pytest.mark.asyncio
async def test_customer_cannot_obtain_for_someone_else(client: AsyncClient):
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin)
    category_id = await add_category(client, admin)
    _, alice = await register_customer(client)
    bob_id, _ = await register_customer(client, email="bob@example.com", username="bob")
    resp = await obtain(client, alice, bob_id, location_id, category_id)
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_stale_maximum_is_retried(client: AsyncClient, monkeypatch):
    """A number taken between read and insert is retried, not duplicated."""
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin)
    category_id = await add_category(client, admin)
    alice_id, alice = await register_customer(client)
    bob_id, bob = await register_customer(client, email="bob@example.com", username="bob")
    resp = await obtain(client, alice, alice_id, location_id, category_id)
    assert resp.json()["queueNumber"] == 1

    real_max_number = QueueRepository.max_number
    calls = []

    async def stale_then_real(self, loc, cat):
        calls.append((loc, cat))
        if len(calls) == 1:
            return None  # as if ticket 1 did not exist yet
        return await real_max_number(self, loc, cat)

    monkeypatch.setattr(QueueRepository, "max_number", stale_then_real)
    resp = await obtain(client, bob, bob_id, location_id, category_id)
    assert resp.status_code == 201, resp.text
    assert resp.json()["queueNumber"] == 2
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_retries_exhausted_is_503(client: AsyncClient, monkeypatch):
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin)
    category_id = await add_category(client, admin)
    alice_id, alice = await register_customer(client)
    bob_id, bob = await register_customer(client, email="bob@example.com", username="bob")
    await obtain(client, alice, alice_id, location_id, category_id)

    async def always_stale(self, loc, cat):
        return None

    monkeypatch.setattr(QueueRepository, "max_number", always_stale)
    resp = await obtain(client, bob, bob_id, location_id, category_id)
    assert resp.status_code == 503

    resp = await client.get("/admin/queue/reports", headers=admin)
    assert resp.json()["totalQueueEntries"] == 1


@pytest.mark.asyncio
async def test_customer_lists_waiting_tickets(client: AsyncClient):
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin)
    loans = await add_category(client, admin, "Loans")
    cards = await add_category(client, admin, "Cards")
    customer_id, customer = await register_customer(client)
    await obtain(client, customer, customer_id, location_id, loans)
    await obtain(client, customer, customer_id, location_id, cards)

    resp = await client.get(f"/queue/customer/{customer_id}", headers=customer)
    assert resp.status_code == 200
    tickets = resp.json()
    assert [t["appointmentCategoryId"] for t in tickets] == [loans, cards]
    assert all(t["served"] is False for t in tickets)


# ── Staff ─────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_call_next_serves_lowest_number(client: AsyncClient):
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin)
    category_id = await add_category(client, admin)
    alice_id, alice = await register_customer(client)
    bob_id, bob = await register_customer(client, email="bob@example.com", username="bob")
    await obtain(client, alice, alice_id, location_id, category_id)
    await obtain(client, bob, bob_id, location_id, category_id)

    url = f"/staff/queue/next/{location_id}/{category_id}"
    first = await client.patch(url, headers=admin)
    second = await client.patch(url, headers=admin)
    assert first.json()["queueNumber"] == 1
    assert second.json()["queueNumber"] == 2

    resp = await client.patch(url, headers=admin)
    assert resp.status_code == 404

    # serving never reuses a number
    resp = await obtain(client, alice, alice_id, location_id, category_id)
    assert resp.json()["queueNumber"] == 3


@pytest.mark.asyncio
async def test_call_next_for_customer(client: AsyncClient):
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin)
    category_id = await add_category(client, admin)
    customer_id, customer = await register_customer(client)
    await obtain(client, customer, customer_id, location_id, category_id)

    resp = await client.patch(
        f"/staff/queue/next/customer/{customer_id}", headers=admin
    )
    assert resp.status_code == 200
    assert resp.json()["queueNumber"] == 1

    resp = await client.patch(
        f"/staff/queue/next/customer/{customer_id}", headers=admin
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_staff_endpoints_need_admin(client: AsyncClient):
    customer_id, customer = await register_customer(client)
    resp = await client.patch(
        f"/staff/queue/next/customer/{customer_id}", headers=customer
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_cancel_tickets(client: AsyncClient):
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin)
    category_id = await add_category(client, admin)
    customer_id, customer = await register_customer(client)
    await obtain(client, customer, customer_id, location_id, category_id)

    url = f"/staff/queue/cancel/customer/{customer_id}/{category_id}"
    resp = await client.delete(url, headers=admin)
    assert resp.status_code == 204

    resp = await client.delete(url, headers=admin)
    assert resp.status_code == 404

    # cancelled numbers are not handed out again
    resp = await obtain(client, customer, customer_id, location_id, category_id)
    assert resp.json()["queueNumber"] == 2


@pytest.mark.asyncio
async def test_location_availability_toggle(client: AsyncClient):
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin)
    category_id = await add_category(client, admin)
    customer_id, customer = await register_customer(client)

    resp = await client.patch(
        f"/staff/location/{location_id}", json={"availability": False}, headers=admin
    )
    assert resp.status_code == 200
    assert resp.json()["availability"] is False

    resp = await obtain(client, customer, customer_id, location_id, category_id)
    assert resp.status_code == 503

    resp = await client.patch(
        "/staff/location/999", json={"availability": True}, headers=admin
    )
    assert resp.status_code == 404


# ── Admin / analytics ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_duplicate_location_is_409(client: AsyncClient):
    _, admin = await register_admin(client)
    await add_location(client, admin, "Downtown")
    resp = await client.post(
        "/admin/locations", json={"location": "Downtown"}, headers=admin
    )
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_list_reference_data(client: AsyncClient):
    _, admin = await register_admin(client)
    await add_location(client, admin, "Downtown")
    await add_category(client, admin, "Loans")

    resp = await client.get("/admin/locations", headers=admin)
    assert [loc["location"] for loc in resp.json()] == ["Downtown"]
    resp = await client.get("/admin/categories", headers=admin)
    assert [cat["category"] for cat in resp.json()] == ["Loans"]


@pytest.mark.asyncio
async def test_queue_report_and_analytics(client: AsyncClient):
    _, admin = await register_admin(client)
    downtown = await add_location(client, admin, "Downtown")
    airport = await add_location(client, admin, "Airport")
    category_id = await add_category(client, admin)
    customer_id, customer = await register_customer(client)
    await obtain(client, customer, customer_id, downtown, category_id)
    await obtain(client, customer, customer_id, airport, category_id)
    await client.patch(f"/staff/queue/next/{downtown}/{category_id}", headers=admin)

    resp = await client.get("/admin/queue/reports", headers=admin)
    assert resp.json() == {
        "totalCustomers": 1,
        "totalQueueEntries": 2,
        "activeQueueEntries": 1,
    }

    resp = await client.get(
        "/analytics/queue", params={"locationId": airport}, headers=admin
    )
    assert resp.status_code == 200
    assert resp.json() == [
        {
            "customerId": customer_id,
            "location": "Airport",
            "appointmentCategory": "Loans",
            "number": 1,
        }
    ]

    resp = await client.get("/analytics/queue", headers=admin)
    assert len(resp.json()) == 2


@pytest.mark.asyncio
async def test_delete_customer_removes_tickets(client: AsyncClient):
    _, admin = await register_admin(client)
    location_id = await add_location(client, admin)
    category_id = await add_category(client, admin)
    customer_id, customer = await register_customer(client)
    await obtain(client, customer, customer_id, location_id, category_id)

    resp = await client.delete(f"/admin/customers/{customer_id}", headers=admin)
    assert resp.status_code == 204

    resp = await client.get("/admin/customers", headers=admin)
    assert resp.json() == []
    resp = await client.get("/admin/queue/reports", headers=admin)
    assert resp.json()["totalQueueEntries"] == 0

    resp = await client.delete(f"/admin/customers/{customer_id}", headers=admin)
    assert resp.status_code == 404
