"""API tests against the FastAPI app with an in-memory database."""

from datetime import datetime
from decimal import Decimal
from uuid import uuid4

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from workforce_payroll.api.app import create_app
from workforce_payroll.api.dependencies import get_db_session

MANAGER = {"X-User-Id": "manager-1", "X-User-Role": "MANAGER"}
ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "ADMIN"}
EMPLOYEE = {"X-User-Id": "employee-1", "X-User-Role": "EMPLOYEE"}

BASE = "/api/v1/payroll"


@pytest_asyncio.fixture
async def client(session_factory):
    app = create_app()

    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def create_period(client, start="2025-01-01", end="2025-01-15", **extra):
    response = await client.post(
        f"{BASE}/periods",
        json={"start_date": start, "end_date": end, "type": "SEMI_MONTHLY", **extra},
        headers=MANAGER,
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestHealth:
    async def test_live_and_ready(self, client):
        assert (await client.get("/live")).json() == {"status": "alive"}
        assert (await client.get("/ready")).json() == {"status": "ready"}

    async def test_health_checks_database(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "healthy"


class TestAuthorization:
    async def test_missing_identity(self, client):
        response = await client.get(f"{BASE}/periods")

        assert response.status_code == 401

    async def test_employee_forbidden(self, client):
        response = await client.get(f"{BASE}/periods", headers=EMPLOYEE)

        assert response.status_code == 403

    async def test_unknown_role_forbidden(self, client):
        response = await client.get(
            f"{BASE}/periods", headers={"X-User-Id": "x", "X-User-Role": "AUDITOR"}
        )

        assert response.status_code == 403

    async def test_manager_cannot_delete(self, client):
        period = await create_period(client)

        response = await client.delete(f"{BASE}/periods/{period['pay_period_id']}", headers=MANAGER)

        assert response.status_code == 403

    async def test_admin_can_delete(self, client):
        period = await create_period(client)

        response = await client.delete(f"{BASE}/periods/{period['pay_period_id']}", headers=ADMIN)

        assert response.status_code == 204
        missing = await client.get(f"{BASE}/periods/{period['pay_period_id']}", headers=ADMIN)
        assert missing.status_code == 404


class TestPayPeriodEndpoints:
    async def test_create_and_get(self, client):
        period = await create_period(client)

        assert period["status"] == "DRAFT"
        assert period["calculations"] == []

        response = await client.get(f"{BASE}/periods/{period['pay_period_id']}", headers=MANAGER)
        assert response.status_code == 200
        assert response.json()["start_date"] == "2025-01-01"

    async def test_overlap_returns_validation_body(self, client):
        await create_period(client)

        response = await client.post(
            f"{BASE}/periods",
            json={"start_date": "2025-01-15", "end_date": "2025-01-31", "type": "SEMI_MONTHLY"},
            headers=MANAGER,
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation Error"
        assert body["errors"]["date"].startswith("Pay period overlaps with existing period")

    async def test_list(self, client):
        await create_period(client)
        await create_period(client, start="2025-01-16", end="2025-01-31")

        response = await client.get(f"{BASE}/periods", params={"page_size": 1}, headers=MANAGER)

        body = response.json()
        assert body["total"] == 2
        assert body["items"][0]["start_date"] == "2025-01-16"

    async def test_update(self, client):
        period = await create_period(client)

        response = await client.put(
            f"{BASE}/periods/{period['pay_period_id']}",
            json={"type": "MONTHLY"},
            headers=MANAGER,
        )

        assert response.status_code == 200
        assert response.json()["type"] == "MONTHLY"

    async def test_get_missing(self, client):
        response = await client.get(f"{BASE}/periods/{uuid4()}", headers=MANAGER)

        assert response.status_code == 404
        assert response.json()["message"] == "Pay Period not found"


class TestPayrollFlow:
    async def test_calculate_adjust_pay_export(self, client, make_employee, make_clock):
        employee = await make_employee(first_name="Sam", last_name="Rivera")
        for day in range(6, 11):
            await make_clock(employee.employee_id, datetime(2025, 1, day, 8, 0), hours=9)
        period = await create_period(client)
        period_id = period["pay_period_id"]

        response = await client.post(f"{BASE}/calculate/{period_id}", headers=MANAGER)
        assert response.status_code == 200
        assert response.json() == {"employee_count": 1}

        detail = (await client.get(f"{BASE}/periods/{period_id}", headers=MANAGER)).json()
        assert detail["status"] == "COMPLETED"
        calculation = detail["calculations"][0]
        assert Decimal(calculation["gross_pay"]) == Decimal("950.00")

        response = await client.post(
            f"{BASE}/adjustments",
            json={
                "pay_calculation_id": calculation["pay_calculation_id"],
                "amount": "-50",
                "reason": "Equipment",
            },
            headers=MANAGER,
        )
        assert response.status_code == 201
        adjusted = response.json()["calculations"][0]
        assert Decimal(adjusted["gross_pay"]) == Decimal("900.00")
        assert adjusted["adjustments"][0]["created_by"] == "manager-1"

        rerun = await client.post(f"{BASE}/calculate/{period_id}", headers=MANAGER)
        assert rerun.status_code == 400
        assert "status" in rerun.json()["errors"]

        paid = await client.post(f"{BASE}/periods/{period_id}/paid", headers=MANAGER)
        assert paid.status_code == 200
        assert paid.json()["status"] == "PAID"

        late = await client.post(
            f"{BASE}/adjustments",
            json={
                "pay_calculation_id": calculation["pay_calculation_id"],
                "amount": "10",
                "reason": "Late bonus",
            },
            headers=MANAGER,
        )
        assert late.status_code == 400

        export = await client.get(f"{BASE}/export/{period_id}", headers=MANAGER)
        assert export.status_code == 200
        row = export.json()["rows"][0]
        assert row["last_name"] == "Rivera"
        assert row["regular_hours"] == "40.00"
        assert row["overtime_hours"] == "7.50"
        assert row["adjustments_sum"] == "-50.00"
        assert row["gross_pay"] == "900.00"

    async def test_mark_draft_as_paid_rejected(self, client):
        period = await create_period(client)

        response = await client.post(
            f"{BASE}/periods/{period['pay_period_id']}/paid", headers=MANAGER
        )

        assert response.status_code == 400
        assert "status" in response.json()["errors"]

    async def test_calculate_processing_conflict(self, client):
        period = await create_period(client, status="PROCESSING")

        response = await client.post(
            f"{BASE}/calculate/{period['pay_period_id']}", headers=MANAGER
        )

        assert response.status_code == 409
        assert "status" in response.json()["errors"]

    async def test_admin_resets_processing_period(self, client):
        period = await create_period(client, status="PROCESSING")
        url = f"{BASE}/periods/{period['pay_period_id']}/reset"

        assert (await client.post(url, headers=MANAGER)).status_code == 403

        response = await client.post(url, headers=ADMIN)

        assert response.status_code == 200
        assert response.json()["status"] == "DRAFT"

    async def test_reset_draft_period_rejected(self, client):
        period = await create_period(client)

        response = await client.post(
            f"{BASE}/periods/{period['pay_period_id']}/reset", headers=ADMIN
        )

        assert response.status_code == 400
        assert "status" in response.json()["errors"]
