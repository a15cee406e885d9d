import pytest


def create_product(client, headers, **overrides):
    payload = {
        "name": "Shampoo Automotivo",
        "size": 5,
        "price": 100,
        "type": "diluted",
        "dilution_ratio": "1:100",
        "container_size_ml": 500,
    }
    payload.update(overrides)
    response = client.post("/api/products", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def create_service(client, headers, **overrides):
    payload = {
        "name": "Lavagem Completa",
        "price": 120,
        "labor_cost_per_hour": 30,
        "execution_time": "01:30",
        "other_costs": 5,
    }
    payload.update(overrides)
    response = client.post("/api/services", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestProducts:
    def test_create_diluted_product(self, client, auth_headers):
        product = create_product(client, auth_headers)
        assert product["dilution_ratio"] == 100
        assert product["dilution_label"] == "1:100"
        assert product["cost_per_liter"] == pytest.approx(0.2)
        assert product["cost_per_container"] == pytest.approx(0.1)

    def test_diluted_requires_ratio(self, client, auth_headers):
        response = client.post(
            "/api/products",
            json={"name": "X", "size": 1, "price": 10, "type": "diluted"},
            headers=auth_headers
        )
        assert response.status_code == 422

    @pytest.mark.parametrize("ratio", ["1:0", "abc", "0"])
    def test_invalid_ratio_is_422(self, client, auth_headers, ratio):
        response = client.post(
            "/api/products",
            json={"name": "X", "size": 1, "price": 10, "type": "diluted", "dilution_ratio": ratio},
            headers=auth_headers
        )
        assert response.status_code == 422

    def test_ready_to_use_product(self, client, auth_headers):
        product = create_product(
            client, auth_headers,
            name="Cera Pronta", size=1, price=40, type="ready-to-use", dilution_ratio=None
        )
        assert product["dilution_label"] == "N/A"
        assert product["cost_per_liter"] == pytest.approx(40)
        assert product["cost_per_container"] == 0

    def test_update_and_delete(self, client, auth_headers):
        product = create_product(client, auth_headers)
        response = client.put(
            f"/api/products/{product['id']}",
            json={"price": 200, "dilution_ratio": "1:50"},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["cost_per_liter"] == pytest.approx(0.8)

        assert client.delete(f"/api/products/{product['id']}", headers=auth_headers).status_code == 204
        assert client.get(f"/api/products/{product['id']}", headers=auth_headers).status_code == 404

    def test_products_are_scoped_by_user(self, client, auth_headers, other_headers):
        product = create_product(client, auth_headers)
        assert client.get(f"/api/products/{product['id']}", headers=other_headers).status_code == 404


class TestServices:
    def test_service_with_products_and_profitability(self, client, auth_headers):
        product = create_product(client, auth_headers)
        service = create_service(
            client, auth_headers,
            products=[{"product_id": product["id"], "usage_per_vehicle": 50}]
        )

        assert service["execution_time_minutes"] == 90
        assert service["execution_time"] == "01:30"
        assert len(service["products"]) == 1
        assert service["products"][0]["name"] == "Shampoo Automotivo"
        assert service["products"][0]["cost"] == pytest.approx(0.01)

        profitability = service["profitability"]
        assert profitability["labor_cost"] == pytest.approx(45)
        assert profitability["total_cost"] == pytest.approx(50.01)
        assert profitability["profit"] == pytest.approx(69.99)

    def test_link_dilution_override(self, client, auth_headers):
        product = create_product(client, auth_headers)
        service = create_service(
            client, auth_headers,
            products=[{"product_id": product["id"], "usage_per_vehicle": 50, "dilution_ratio": "1:10"}]
        )
        assert service["products"][0]["dilution_ratio"] == 10
        assert service["products"][0]["cost"] == pytest.approx(0.1)

    def test_invalid_time_is_422(self, client, auth_headers):
        response = client.post(
            "/api/services",
            json={"name": "X", "price": 10, "execution_time": "1h30"},
            headers=auth_headers
        )
        assert response.status_code == 422

    def test_unknown_product_is_404(self, client, auth_headers):
        response = client.post(
            "/api/services",
            json={"name": "X", "price": 10, "products": [{"product_id": "missing", "usage_per_vehicle": 10}]},
            headers=auth_headers
        )
        assert response.status_code == 404

    def test_update_replaces_products(self, client, auth_headers):
        first = create_product(client, auth_headers, name="A")
        second = create_product(client, auth_headers, name="B")
        service = create_service(
            client, auth_headers,
            products=[{"product_id": first["id"], "usage_per_vehicle": 10}]
        )

        response = client.put(
            f"/api/services/{service['id']}",
            json={"execution_time": "02:00", "products": [{"product_id": second["id"], "usage_per_vehicle": 20}]},
            headers=auth_headers
        )
        assert response.status_code == 200, response.text
        updated = response.json()
        assert updated["execution_time_minutes"] == 120
        assert [p["name"] for p in updated["products"]] == ["B"]

    def test_deleting_product_removes_link(self, client, auth_headers):
        product = create_product(client, auth_headers)
        service = create_service(
            client, auth_headers,
            products=[{"product_id": product["id"], "usage_per_vehicle": 50}]
        )
        client.delete(f"/api/products/{product['id']}", headers=auth_headers)

        reloaded = client.get(f"/api/services/{service['id']}", headers=auth_headers).json()
        assert reloaded["products"] == []

    def test_ranking_counts_quotes(self, client, auth_headers):
        popular = create_service(client, auth_headers, name="Polimento")
        rare = create_service(client, auth_headers, name="Higienizacao")
        create_service(client, auth_headers, name="Vitrificacao")

        for services in ([popular], [popular, rare], [popular]):
            response = client.post(
                "/api/quotes",
                json={"client_name": "Cliente", "services": [{"service_id": s["id"]} for s in services]},
                headers=auth_headers
            )
            assert response.status_code == 201, response.text

        ranking = client.get("/api/services/ranking", headers=auth_headers).json()
        assert [r["name"] for r in ranking] == ["Polimento", "Higienizacao", "Vitrificacao"]
        assert [r["quote_count"] for r in ranking] == [3, 1, 0]
