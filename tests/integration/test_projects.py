import json

import pytest
from httpx import AsyncClient
from fastapi import status

from tests.conftest import login_as


def _new_project(**overrides):
    data = {
        "customer_name": "Vũ Ngọc Lan",
        "customer_phone": "0912000009",
        "shoot_date": "2026-11-02",
        "shoot_time": "09:00",
        "package_price": 6000000,
        "team": {"main_photographer": {"employee_id": 1}},
    }
    data.update(overrides)
    return data


@pytest.mark.asyncio
class TestProjectList:
    async def test_list_projects(self, admin_client: AsyncClient):
        response = await admin_client.get("/api/v1/projects/")
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["total"] == 3
        assert data["count"] == 3
        assert data["items"][0]["package_price"] == 15000000
        assert data["stats"] == {"total": 3, "pending": 1, "in_progress": 0, "completed": 1}

    async def test_filter_by_status_and_search(self, admin_client: AsyncClient):
        response = await admin_client.get("/api/v1/projects/", params={"status": "pending"})
        assert [p["id"] for p in response.json()["items"]] == [1]

        response = await admin_client.get("/api/v1/projects/", params={"search": "CHÂU"})
        data = response.json()
        assert data["count"] == 1
        assert data["total"] == 3
        assert data["active_filters"] == 1

    async def test_requires_session(self, client: AsyncClient):
        response = await client.get("/api/v1/projects/")
        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["redirect_to"] == "/login"


@pytest.mark.asyncio
class TestProjectCreate:
    async def test_sales_creates_pending_project(self, client: AsyncClient, backend):
        await login_as(client, "sales")

        response = await client.post("/api/v1/projects/", json=_new_project(discount=500000))
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["status"] == "pending"
        assert data["package_discount"] == 500000
        assert data["payment"]["final"] == 5500000
        assert data["payment"]["deposit"] == 3300000
        assert data["team"]["main_photographer"]["employee"] == 1

        listing = await client.get("/api/v1/projects/")
        assert listing.json()["total"] == 4

    async def test_missing_customer_is_rejected_locally(self, admin_client: AsyncClient, backend):
        response = await admin_client.post("/api/v1/projects/", json=_new_project(customer_name="  "))
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errors"]["customer_name"] == "Vui lòng nhập thông tin khách hàng"
        assert backend.calls("POST", "/projects/") == []

    async def test_main_photographer_required(self, admin_client: AsyncClient):
        response = await admin_client.post("/api/v1/projects/", json=_new_project(team={}))
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["detail"] == "Vui lòng chọn Photographer chính!"

    async def test_employee_role_cannot_create(self, client: AsyncClient):
        await login_as(client, "staff")
        response = await client.post("/api/v1/projects/", json=_new_project())
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_update_project(self, admin_client: AsyncClient, backend):
        response = await admin_client.put("/api/v1/projects/1", json={"shoot_location": "Hội An"})
        assert response.status_code == status.HTTP_200_OK

        record = backend.records["projects"][0]
        assert record["location"] == "Hội An"
        assert record["team"]["main_photographer"]["employee"] == 1
        # Editing keeps the current status
        assert record["status"] == "pending"

    async def test_update_unknown_project(self, admin_client: AsyncClient):
        response = await admin_client.put("/api/v1/projects/999", json={"notes": "x"})
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
class TestProjectActions:
    async def test_confirm_pending_project(self, client: AsyncClient, backend):
        await login_as(client, "manager")

        response = await client.post("/api/v1/projects/1/confirm")
        assert response.status_code == status.HTTP_200_OK
        assert backend.records["projects"][0]["status"] == "confirmed"

        patch = backend.calls("PATCH", "/projects/1")[0]
        assert json.loads(patch.content) == {"status": "confirmed"}

    async def test_confirm_only_pending(self, admin_client: AsyncClient, backend):
        response = await admin_client.post("/api/v1/projects/2/confirm")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert backend.calls("PATCH", "/projects/2") == []

    async def test_sales_cannot_confirm(self, client: AsyncClient):
        await login_as(client, "sales")
        response = await client.post("/api/v1/projects/1/confirm")
        assert response.status_code == status.HTTP_403_FORBIDDEN

    async def test_only_admin_deletes(self, client: AsyncClient, backend):
        await login_as(client, "manager")
        response = await client.delete("/api/v1/projects/3")
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert backend.calls("DELETE", "/projects/3") == []

        await login_as(client, "admin")
        response = await client.delete("/api/v1/projects/3")
        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {}
        assert [p["id"] for p in backend.records["projects"]] == [1, 2]

        toasts = await client.get("/api/v1/notifications/")
        assert {"type": "success", "message": "Đã xóa dự án thành công!"}.items() <= toasts.json()[-1].items()


@pytest.mark.asyncio
class TestQuote:
    async def test_quote_with_package_and_surcharge(self, admin_client: AsyncClient):
        response = await admin_client.post("/api/v1/projects/quote", json={
            "package_id": "1",
            "discount": 1000000,
            "surcharge": {"extra_hours": 1},
            "team": {
                "main_photographer": {"employee_id": "1"},
                "assistants": [{"employee_id": "2"}],
            },
        })
        assert response.status_code == status.HTTP_200_OK

        data = response.json()
        assert data["split"] == {"final_price": 14000000, "deposit": 8400000, "remaining": 5600000}
        assert data["team"]["main_photographer"]["salary"] == 500000
        assert data["team"]["main_photographer"]["bonus"] == 300000
        assert data["team"]["assistants"][0]["salary"] == 300000
        assert data["team"]["assistants"][0]["bonus"] == 200000
        assert data["summary"]["total_revenue"] == 15000000
        assert data["summary"]["total_labor_costs"] == 1300000
        assert data["summary"]["profit"] == 13700000
        assert data["summary"]["profit_margin"] == pytest.approx(91.33)

    async def test_quote_without_revenue(self, admin_client: AsyncClient):
        response = await admin_client.post("/api/v1/projects/quote", json={})
        data = response.json()
        assert data["split"]["deposit"] == 0
        assert data["summary"]["profit_margin"] == 0


@pytest.mark.asyncio
class TestProjectExport:
    async def test_export_csv(self, admin_client: AsyncClient):
        response = await admin_client.get("/api/v1/projects/export", params={"format": "csv", "status": "pending"})
        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment; filename=projects_" in response.headers["content-disposition"]

        lines = response.text.strip().splitlines()
        assert lines[0].startswith("Mã dự án,Khách hàng")
        assert len(lines) == 2
        assert "PRJ001" in lines[1]

    async def test_export_excel(self, admin_client: AsyncClient):
        response = await admin_client.get("/api/v1/projects/export")
        assert response.status_code == status.HTTP_200_OK
        assert response.content[:2] == b"PK"

    async def test_unknown_format(self, admin_client: AsyncClient):
        response = await admin_client.get("/api/v1/projects/export", params={"format": "pdf"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
