"""API endpoint tests.

Tests the FastAPI endpoints over an in-memory store.
"""

from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient

from factories import PERIOD_MONTH, PERIOD_YEAR


pytestmark = pytest.mark.asyncio

PERIOD = {"month": PERIOD_MONTH, "year": PERIOD_YEAR}


def as_user(user) -> dict[str, str]:
    return {"X-User-ID": str(user.user_id)}


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["engine_version"] == "test"
        assert "timestamp" in data

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestGenerateEndpoint:
    async def test_generate(self, client: AsyncClient, hr_user, employees):
        response = await client.post(
            "/api/v1/payrolls/generate", headers=as_user(hr_user), json=PERIOD
        )
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Processed 3 employees"
        assert data["conflicts"] == []

        by_name = {c["employee"]: c for c in data["created"]}
        ada = by_name["Ada Lovelace"]
        assert ada["payroll"]["status"] == "draft"
        assert ada["payroll"]["employee_name"] == "Ada Lovelace"
        assert Decimal(ada["payroll"]["net_salary"]) == Decimal("2713.64")
        assert ada["calculation"]["working_days"] == 22
        assert Decimal(ada["calculation"]["daily_rate"]) == Decimal("136.3636")

    async def test_regenerate_reports_conflicts(self, client: AsyncClient, hr_user, employees):
        await client.post("/api/v1/payrolls/generate", headers=as_user(hr_user), json=PERIOD)

        response = await client.post(
            "/api/v1/payrolls/generate", headers=as_user(hr_user), json=PERIOD
        )
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is False
        assert data["created"] == []
        assert len(data["conflicts"]) == 3

    async def test_generate_subset(self, client: AsyncClient, hr_user, employees):
        response = await client.post(
            "/api/v1/payrolls/generate",
            headers=as_user(hr_user),
            json={**PERIOD, "employee_ids": [str(employees["alan"].employee_id)]},
        )
        assert response.status_code == 200

        created = response.json()["created"]
        assert [c["employee"] for c in created] == ["Alan Turing"]
        assert Decimal(created[0]["payroll"]["net_salary"]) == Decimal("0")

    async def test_missing_user_header(self, client: AsyncClient, employees):
        response = await client.post("/api/v1/payrolls/generate", json=PERIOD)
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    async def test_malformed_user_header(self, client: AsyncClient, employees):
        response = await client.post(
            "/api/v1/payrolls/generate", headers={"X-User-ID": "not-a-uuid"}, json=PERIOD
        )
        assert response.status_code == 400

    async def test_staff_forbidden(self, client: AsyncClient, staff_user, employees):
        response = await client.post(
            "/api/v1/payrolls/generate", headers=as_user(staff_user), json=PERIOD
        )
        assert response.status_code == 403
        assert response.json() == {"detail": "Insufficient permissions", "code": "FORBIDDEN"}

    async def test_invalid_period(self, client: AsyncClient, hr_user, employees):
        response = await client.post(
            "/api/v1/payrolls/generate",
            headers=as_user(hr_user),
            json={"month": 13, "year": PERIOD_YEAR},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_PERIOD"

    async def test_no_active_employees(self, client: AsyncClient, hr_user):
        response = await client.post(
            "/api/v1/payrolls/generate", headers=as_user(hr_user), json=PERIOD
        )
        assert response.status_code == 404
        assert response.json()["code"] == "EMPLOYEE_NOT_FOUND"


class TestCalculateEndpoint:
    async def test_calculate(self, client: AsyncClient, hr_user, employees):
        response = await client.post(
            "/api/v1/payrolls/calculate",
            headers=as_user(hr_user),
            json={**PERIOD, "employee_id": str(employees["grace"].employee_id)},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["employee"] == "Grace Hopper"
        assert Decimal(data["calculation"]["leave_deduction"]) == Decimal("600.00")
        assert Decimal(data["calculation"]["unpaid_leave_days"]) == Decimal("3")

        listing = await client.get("/api/v1/payrolls")
        assert listing.json()["total"] == 0

    async def test_calculate_unknown_employee(self, client: AsyncClient, hr_user):
        response = await client.post(
            "/api/v1/payrolls/calculate",
            headers=as_user(hr_user),
            json={**PERIOD, "employee_id": str(uuid4())},
        )
        assert response.status_code == 404


class TestApproveEndpoint:
    async def _generate(self, client, user) -> list[str]:
        response = await client.post("/api/v1/payrolls/generate", headers=as_user(user), json=PERIOD)
        return [c["payroll"]["payroll_id"] for c in response.json()["created"]]

    async def test_approve(self, client: AsyncClient, hr_user, admin_user, employees):
        ids = await self._generate(client, hr_user)

        response = await client.post(
            "/api/v1/payrolls/approve",
            headers=as_user(admin_user),
            json={"payroll_ids": ids},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["message"] == "Approved 3 payroll records"
        assert {r["status"] for r in data["approved"]} == {"approved"}
        assert {r["approved_by_user_id"] for r in data["approved"]} == {str(admin_user.user_id)}

        again = await client.post(
            "/api/v1/payrolls/approve",
            headers=as_user(admin_user),
            json={"payroll_ids": ids},
        )
        assert again.json()["approved"] == []

    async def test_approve_empty(self, client: AsyncClient, hr_user):
        response = await client.post(
            "/api/v1/payrolls/approve", headers=as_user(hr_user), json={"payroll_ids": []}
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_approve_forbidden(self, client: AsyncClient, hr_user, staff_user, employees):
        ids = await self._generate(client, hr_user)

        response = await client.post(
            "/api/v1/payrolls/approve",
            headers=as_user(staff_user),
            json={"payroll_ids": ids},
        )
        assert response.status_code == 403


class TestQueryEndpoints:
    async def test_list_and_filter(self, client: AsyncClient, hr_user, employees):
        generated = await client.post(
            "/api/v1/payrolls/generate", headers=as_user(hr_user), json=PERIOD
        )
        first_id = generated.json()["created"][0]["payroll"]["payroll_id"]
        await client.post(
            "/api/v1/payrolls/approve",
            headers=as_user(hr_user),
            json={"payroll_ids": [first_id]},
        )

        response = await client.get("/api/v1/payrolls", params=PERIOD)
        assert response.status_code == 200
        assert response.json()["total"] == 3

        approved = await client.get("/api/v1/payrolls", params={"status": "approved"})
        assert [r["payroll_id"] for r in approved.json()["items"]] == [first_id]

        ada = await client.get(
            "/api/v1/payrolls", params={"employee_id": str(employees["ada"].employee_id)}
        )
        assert ada.json()["total"] == 1

        other_month = await client.get("/api/v1/payrolls", params={"month": 5, "year": PERIOD_YEAR})
        assert other_month.json()["total"] == 0

    async def test_list_rejects_bad_month(self, client: AsyncClient):
        response = await client.get("/api/v1/payrolls", params={"month": 13})
        assert response.status_code == 422

    async def test_get_payroll(self, client: AsyncClient, hr_user, employees):
        generated = await client.post(
            "/api/v1/payrolls/generate", headers=as_user(hr_user), json=PERIOD
        )
        payroll_id = generated.json()["created"][0]["payroll"]["payroll_id"]

        response = await client.get(f"/api/v1/payrolls/{payroll_id}")
        assert response.status_code == 200
        assert response.json()["payroll_id"] == payroll_id

    async def test_get_missing_payroll(self, client: AsyncClient):
        response = await client.get(f"/api/v1/payrolls/{uuid4()}")
        assert response.status_code == 404
        assert response.json()["code"] == "PAYROLL_NOT_FOUND"
