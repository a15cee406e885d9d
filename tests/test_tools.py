import pytest


def test_dilution_mix(client, auth_headers):
    response = client.post(
        "/api/tools/dilution",
        json={"product_part": 1, "water_part": 4, "container_size_ml": 500},
        headers=auth_headers
    )
    assert response.status_code == 200
    data = response.json()
    assert data["product_ml"] == 100
    assert data["water_ml"] == 400
    assert data["ratio_label"] == "1:4"


def test_product_cost_with_manual_values(client, auth_headers):
    response = client.post(
        "/api/tools/product-cost",
        json={"price": 100, "size": 5, "type": "diluted", "dilution": {"value": "1:100"},
              "usage_ml": 50, "container_size_ml": 500},
        headers=auth_headers
    )
    assert response.status_code == 200, response.text
    data = response.json()
    assert data["cost"] == pytest.approx(0.01)
    assert data["cost_per_liter"] == pytest.approx(0.2)
    assert data["cost_per_container"] == pytest.approx(0.1)


def test_product_cost_from_catalog(client, auth_headers):
    product = client.post(
        "/api/products",
        json={"name": "APC", "size": 5, "price": 100, "type": "diluted", "dilution_ratio": "1:50"},
        headers=auth_headers
    ).json()
    response = client.post(
        "/api/tools/product-cost",
        json={"product_id": product["id"], "usage_ml": 100},
        headers=auth_headers
    )
    assert response.status_code == 200, response.text
    assert response.json()["cost"] == pytest.approx(0.04)
    assert response.json()["dilution_ratio"] == 50


def test_product_cost_invalid_dilution_is_422(client, auth_headers):
    response = client.post(
        "/api/tools/product-cost",
        json={"price": 100, "size": 5, "type": "diluted", "dilution": {"value": "1:0"}, "usage_ml": 50},
        headers=auth_headers
    )
    assert response.status_code == 422
