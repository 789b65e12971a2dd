"""HTTP tests for person administration: add, rename, remove, listings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select

from leavedesk.models.leave_request import LeaveRequest

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

APPROVER_ID = "M1"
APPROVER_HEADERS = {"X-Person-Id": APPROVER_ID}
PERSONS_URL = "/persons"


async def test_add_person_defaults(async_client: AsyncClient) -> None:
    resp = await async_client.post(PERSONS_URL, json={"id": "E1", "name": "Erin"}, headers=APPROVER_HEADERS)

    assert resp.status_code == 201
    data = resp.json()
    assert data["id"] == "E1"
    assert data["leave_balance"] == 6
    assert data["is_approver"] is False


async def test_add_approver(async_client: AsyncClient) -> None:
    resp = await async_client.post(
        PERSONS_URL,
        json={"id": "M2", "name": "Max", "leave_balance": 10, "is_approver": True},
        headers=APPROVER_HEADERS,
    )

    assert resp.status_code == 201
    assert resp.json()["is_approver"] is True
    assert resp.json()["leave_balance"] == 10


async def test_add_person_duplicate(async_client: AsyncClient) -> None:
    resp = await async_client.post(PERSONS_URL, json={"id": APPROVER_ID, "name": "Again"}, headers=APPROVER_HEADERS)

    assert resp.status_code == 409
    assert resp.json()["code"] == "duplicate_id"
    assert resp.json()["details"] == {"person_id": APPROVER_ID}


async def test_add_person_negative_balance_rejected(async_client: AsyncClient) -> None:
    resp = await async_client.post(
        PERSONS_URL, json={"id": "E1", "name": "Erin", "leave_balance": -3}, headers=APPROVER_HEADERS
    )

    assert resp.status_code == 422


async def test_add_person_requires_approver(async_client: AsyncClient) -> None:
    await async_client.post(PERSONS_URL, json={"id": "E1", "name": "Erin"}, headers=APPROVER_HEADERS)

    resp = await async_client.post(PERSONS_URL, json={"id": "E9", "name": "Eve"}, headers={"X-Person-Id": "E1"})

    assert resp.status_code == 403
    missing = await async_client.get(f"{PERSONS_URL}/E9")
    assert missing.status_code == 404


async def test_list_persons(async_client: AsyncClient) -> None:
    await async_client.post(PERSONS_URL, json={"id": "E1", "name": "Zed"}, headers=APPROVER_HEADERS)
    await async_client.post(PERSONS_URL, json={"id": "E2", "name": "Abe"}, headers=APPROVER_HEADERS)

    resp = await async_client.get(PERSONS_URL)

    assert resp.status_code == 200
    assert resp.json()["total"] == 3
    assert [p["name"] for p in resp.json()["items"]] == ["Abe", "Morgan Manager", "Zed"]


async def test_rename_person(async_client: AsyncClient) -> None:
    await async_client.post(PERSONS_URL, json={"id": "E1", "name": "Erin"}, headers=APPROVER_HEADERS)

    resp = await async_client.patch(f"{PERSONS_URL}/E1", json={"name": "Erin Smith"}, headers=APPROVER_HEADERS)

    assert resp.status_code == 200
    assert resp.json()["name"] == "Erin Smith"
    assert resp.json()["leave_balance"] == 6


async def test_remove_person_cascades(async_client: AsyncClient, db_session: AsyncSession) -> None:
    await async_client.post(PERSONS_URL, json={"id": "E1", "name": "Erin"}, headers=APPROVER_HEADERS)
    for _ in range(2):
        await async_client.post(
            "/requests",
            json={"employee_id": "E1", "leave_type": "Sick", "start_date": "2025-02-03", "end_date": "2025-02-04"},
        )

    resp = await async_client.delete(f"{PERSONS_URL}/E1", headers=APPROVER_HEADERS)

    assert resp.status_code == 204
    assert (await async_client.get(f"{PERSONS_URL}/E1")).status_code == 404
    assert (await async_client.get(f"{PERSONS_URL}/E1/requests")).status_code == 404
    count = await db_session.execute(select(func.count()).select_from(LeaveRequest))
    assert count.scalar_one() == 0


async def test_remove_self_refused(async_client: AsyncClient) -> None:
    resp = await async_client.delete(f"{PERSONS_URL}/{APPROVER_ID}", headers=APPROVER_HEADERS)

    assert resp.status_code == 409
    assert resp.json()["code"] == "self_removal"
    assert (await async_client.get(f"{PERSONS_URL}/{APPROVER_ID}")).status_code == 200


async def test_remove_unknown_person(async_client: AsyncClient) -> None:
    resp = await async_client.delete(f"{PERSONS_URL}/ghost", headers=APPROVER_HEADERS)

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Person 'ghost' not found"


async def test_person_requests_listing(async_client: AsyncClient) -> None:
    await async_client.post(PERSONS_URL, json={"id": "E1", "name": "Erin"}, headers=APPROVER_HEADERS)
    for leave_type in ("Vacation", "Sick"):
        await async_client.post(
            "/requests",
            json={"employee_id": "E1", "leave_type": leave_type, "start_date": "2025-03-01", "end_date": "2025-03-02"},
        )

    resp = await async_client.get(f"{PERSONS_URL}/E1/requests")

    assert resp.status_code == 200
    assert [r["leave_type"] for r in resp.json()["items"]] == ["Vacation", "Sick"]


async def test_person_requests_unknown_person(async_client: AsyncClient) -> None:
    resp = await async_client.get(f"{PERSONS_URL}/ghost/requests")

    assert resp.status_code == 404
    assert resp.json()["code"] == "person_not_found"
