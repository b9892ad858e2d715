"""Integration tests for the audit log listing."""

from typing import Any

from fastapi.testclient import TestClient


class TestAuditLogs:
    """Tests for GET /api/admin/logs."""

    def test_requires_admin(self, client: TestClient, customer_headers: dict[str, str]) -> None:
        assert client.get("/api/admin/logs").status_code == 401
        assert client.get("/api/admin/logs", headers=customer_headers).status_code == 403

    def test_lists_newest_first(
        self, client: TestClient, admin_headers: dict[str, str], order_payload: dict[str, Any]
    ) -> None:
        number = client.post("/api/orders", json=order_payload).json()["orderNumber"]
        client.patch(f"/api/admin/orders/{number}", json={"status": "CONFIRMED"}, headers=admin_headers)

        response = client.get("/api/admin/logs", headers=admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["pagination"]["total"] == 2
        assert [item["action"] for item in data["items"]] == ["ORDER_STATUS_CHANGE", "ORDER_CREATE"]

    def test_filters_and_pagination(
        self, client: TestClient, admin_headers: dict[str, str], order_payload: dict[str, Any]
    ) -> None:
        for _ in range(3):
            client.post("/api/orders", json=order_payload)
        client.post("/api/auth/login", json={"email": "nadie@tiendavinilos.cl", "password": "x"})

        orders = client.get(
            "/api/admin/logs", params={"action": "order_create", "limit": 2}, headers=admin_headers
        ).json()
        failures = client.get("/api/admin/logs", params={"status": "FAIL"}, headers=admin_headers).json()

        assert orders["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}
        assert len(orders["items"]) == 2
        assert [item["action"] for item in failures["items"]] == ["LOGIN"]

    def test_filter_by_order_number(
        self, client: TestClient, admin_headers: dict[str, str], order_payload: dict[str, Any]
    ) -> None:
        """Test that the trail of one order can be pulled out of the feed."""
        first = client.post("/api/orders", json=order_payload).json()["orderNumber"]
        second = client.post("/api/orders", json=order_payload).json()["orderNumber"]
        client.patch(f"/api/admin/orders/{second}", json={"status": "SHIPPED"}, headers=admin_headers)

        response = client.get("/api/admin/logs", params={"orderNumber": second}, headers=admin_headers)

        items = response.json()["items"]
        assert [item["action"] for item in items] == ["ORDER_STATUS_CHANGE", "ORDER_CREATE"]
        assert all(item["meta"]["order_number"] == second for item in items)
        assert first != second
        assert items[0]["userEmail"] == "admin@tiendavinilos.cl"
        assert items[1]["userEmail"] is None

    def test_filter_by_acting_user_and_date(
        self, client: TestClient, admin_headers: dict[str, str], order_payload: dict[str, Any]
    ) -> None:
        number = client.post("/api/orders", json=order_payload).json()["orderNumber"]
        client.patch(f"/api/admin/orders/{number}", json={"status": "CONFIRMED"}, headers=admin_headers)
        admin_id = client.get("/api/auth/me", headers=admin_headers).json()["id"]

        by_admin = client.get("/api/admin/logs", params={"userId": admin_id}, headers=admin_headers).json()
        future = client.get("/api/admin/logs", params={"dateFrom": "2999-01-01"}, headers=admin_headers).json()

        assert [item["action"] for item in by_admin["items"]] == ["ORDER_STATUS_CHANGE"]
        assert future["items"] == []
