"""Integration tests for sales, cash sessions, reports and admin."""

import pytest
from fastapi.testclient import TestClient

API = "/api/v1"


def sell(client: TestClient, quantity: int = 3, **extra):
    body = {"lines": [{"recipe_id": "1", "quantity": quantity}], "payment_method": "Dinheiro"}
    body.update(extra)
    return client.post(f"{API}/sales", json=body)


class TestSalesEndpoints:
    def test_cash_sale_returns_change(self, api_client: TestClient):
        response = sell(api_client, amount_given=30)

        assert response.status_code == 201
        data = response.json()
        assert data["change"] == pytest.approx(6.0)
        assert data["sale"]["total"] == pytest.approx(24.0)
        assert data["sale"]["items"][0]["cost_price"] == pytest.approx(0.8675)

    def test_sale_does_not_touch_stock(self, api_client: TestClient):
        sell(api_client)

        assert api_client.get(f"{API}/ingredients/1").json()["current_stock"] == 10

    def test_insufficient_payment(self, api_client: TestClient):
        response = sell(api_client, amount_given=10)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INSUFFICIENT_PAYMENT"

    def test_unknown_recipe(self, api_client: TestClient):
        response = api_client.post(f"{API}/sales", json={"lines": [{"recipe_id": "x"}]})

        assert response.status_code == 404

    def test_empty_cart(self, api_client: TestClient):
        response = api_client.post(f"{API}/sales", json={"lines": []})

        assert response.status_code == 400

    def test_list_and_delete(self, api_client: TestClient):
        sale_id = sell(api_client).json()["sale"]["id"]

        assert [s["id"] for s in api_client.get(f"{API}/sales").json()] == [sale_id]
        assert api_client.delete(f"{API}/sales/{sale_id}").status_code == 200
        assert api_client.get(f"{API}/sales").json() == []


class TestCashEndpoints:
    def test_session_lifecycle(self, api_client: TestClient):
        assert api_client.get(f"{API}/cash/current").json() is None

        opened = api_client.post(f"{API}/cash/open", json={"initial_balance": 100})
        assert opened.status_code == 201

        again = api_client.post(f"{API}/cash/open", json={"initial_balance": 50})
        assert again.status_code == 409

        sell(api_client)
        current = api_client.get(f"{API}/cash/current").json()
        assert current["sales_since_open"] == pytest.approx(24.0)
        assert current["expected_balance"] == pytest.approx(124.0)

        closed = api_client.post(f"{API}/cash/close", json={"final_balance": 120})
        assert closed.status_code == 200
        summary = closed.json()
        assert summary["session"]["status"] == "closed"
        assert summary["difference"] == pytest.approx(-4.0)

        assert api_client.get(f"{API}/cash/current").json() is None
        assert len(api_client.get(f"{API}/cash").json()) == 1

    def test_close_without_open_session(self, api_client: TestClient):
        response = api_client.post(f"{API}/cash/close", json={"final_balance": 0})

        assert response.status_code == 404


class TestReportEndpoints:
    def test_dashboard_defaults_to_this_month(self, api_client: TestClient):
        sell(api_client)

        response = api_client.get(f"{API}/reports/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["sales_count"] == 1
        assert data["top_products"][0]["name"] == "Coxinha de Frango"

    def test_dashboard_inverted_range(self, api_client: TestClient):
        response = api_client.get(
            f"{API}/reports/dashboard", params={"start": "2024-03-31", "end": "2024-03-01"}
        )

        assert response.status_code == 400

    def test_csv_export(self, api_client: TestClient):
        sell(api_client)

        response = api_client.get(f"{API}/reports/sales/export", params={"fmt": "csv"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "attachment" in response.headers["content-disposition"]
        assert "Coxinha de Frango" in response.content.decode("utf-8-sig")

    def test_xlsx_export(self, api_client: TestClient):
        response = api_client.get(f"{API}/reports/sales/export")

        assert response.status_code == 200
        assert response.content[:2] == b"PK"

    def test_unknown_export_format(self, api_client: TestClient):
        response = api_client.get(f"{API}/reports/sales/export", params={"fmt": "pdf"})

        assert response.status_code == 400


class TestAuthAndAdminEndpoints:
    def test_me_in_debug_mode(self, api_client: TestClient):
        response = api_client.get(f"{API}/auth/me")

        assert response.status_code == 200
        assert response.json()["access"]["allowed"] is True

    def test_login_without_supabase_is_503(self, api_client: TestClient):
        response = api_client.post(f"{API}/auth/login", json={"email": "a@b.com", "password": "secret1"})

        assert response.status_code == 503

    def test_admin_profiles(self, api_client: TestClient):
        response = api_client.get(f"{API}/admin/profiles")

        assert response.status_code == 200
        assert response.json() == []

    def test_admin_update_unknown_profile(self, api_client: TestClient):
        response = api_client.put(
            f"{API}/admin/profiles/ghost",
            json={"subscription_status": "active", "subscription_expires_at": "2024-12-31T23:59:59"},
        )

        assert response.status_code == 404

    def test_request_id_header(self, api_client: TestClient):
        response = api_client.get("/health")

        assert "X-Request-ID" in response.headers
