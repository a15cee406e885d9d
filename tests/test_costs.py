import pytest

WEEKDAY_HOURS = {
    "monday_start": "08:00", "monday_end": "18:00",
    "tuesday_start": "08:00", "tuesday_end": "18:00",
    "wednesday_start": "08:00", "wednesday_end": "18:00",
    "thursday_start": "08:00", "thursday_end": "18:00",
    "friday_start": "08:00", "friday_end": "18:00",
}


def test_hourly_cost_unavailable_without_data(client, auth_headers):
    response = client.get("/api/costs/hourly-cost", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["available"] is False
    assert response.json()["hourly_cost"] == 0


def test_hours_round_trip(client, auth_headers):
    empty = client.get("/api/costs/hours", headers=auth_headers).json()
    assert empty["monday_start"] == ""

    saved = client.put("/api/costs/hours", json=WEEKDAY_HOURS, headers=auth_headers)
    assert saved.status_code == 200
    assert saved.json()["friday_end"] == "18:00"
    assert saved.json()["sunday_start"] == ""


def test_invalid_clock_is_422(client, auth_headers):
    response = client.put("/api/costs/hours", json={"monday_start": "25:00"}, headers=auth_headers)
    assert response.status_code == 422


def test_hourly_cost_and_summary(client, auth_headers):
    client.put("/api/costs/hours", json=WEEKDAY_HOURS, headers=auth_headers)
    client.post("/api/costs", json={"description": "Aluguel", "value": 3000, "type": "fixed"}, headers=auth_headers)
    client.post("/api/costs", json={"description": "Agua", "value": 600, "type": "variable"}, headers=auth_headers)

    hourly = client.get("/api/costs/hourly-cost", headers=auth_headers).json()
    assert hourly["available"] is True
    assert hourly["working_days_in_month"] == 20
    assert hourly["average_daily_hours"] == 9
    assert hourly["daily_cost"] == 180
    assert hourly["hourly_cost"] == 20

    summary = client.get("/api/costs/summary", headers=auth_headers).json()
    assert summary["fixed_costs"] == 3000
    assert summary["variable_costs"] == 600
    assert summary["total_monthly_expenses"] == 3600
    assert summary["product_cost_method"] == "per-service"


def test_monthly_products_cost_switches_method(client, auth_headers):
    response = client.post(
        "/api/costs",
        json={"description": "Produtos Gastos no Mês", "value": 500, "type": "variable"},
        headers=auth_headers
    )
    assert response.status_code == 201

    summary = client.get("/api/costs/summary", headers=auth_headers).json()
    assert summary["product_cost_method"] == "monthly-average"


def test_cost_crud(client, auth_headers):
    cost = client.post(
        "/api/costs",
        json={"description": "Energia", "value": 250.5},
        headers=auth_headers
    ).json()
    assert cost["type"] == "fixed"

    updated = client.put(f"/api/costs/{cost['id']}", json={"value": 300}, headers=auth_headers)
    assert updated.json()["value"] == pytest.approx(300)

    assert client.delete(f"/api/costs/{cost['id']}", headers=auth_headers).status_code == 204
    assert client.get(f"/api/costs/{cost['id']}", headers=auth_headers).status_code == 404


def test_negative_cost_is_422(client, auth_headers):
    response = client.post("/api/costs", json={"description": "X", "value": -1}, headers=auth_headers)
    assert response.status_code == 422
