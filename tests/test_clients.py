def create_client(client, headers, **overrides):
    payload = {
        "name": "Joao Silva",
        "phone": "41999990000",
        "email": "joao@example.com",
        "vehicles": [
            {"brand": "Honda", "model": "Civic", "plate": "ABC1D23"},
            {"brand": "Fiat", "model": "Uno"},
        ],
    }
    payload.update(overrides)
    response = client.post("/api/clients", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_client_with_vehicles(client, auth_headers):
    data = create_client(client, auth_headers)
    assert data["name"] == "Joao Silva"
    assert len(data["vehicles"]) == 2
    descriptions = {v["description"] for v in data["vehicles"]}
    assert "Honda Civic (ABC1D23)" in descriptions
    assert "Fiat Uno" in descriptions


def test_list_and_search(client, auth_headers):
    create_client(client, auth_headers, name="Maria Souza", vehicles=[])
    create_client(client, auth_headers, name="Carlos Lima", phone="4133334444", vehicles=[])

    everyone = client.get("/api/clients", headers=auth_headers).json()
    assert [c["name"] for c in everyone] == ["Carlos Lima", "Maria Souza"]

    found = client.get("/api/clients", params={"search": "3333"}, headers=auth_headers).json()
    assert [c["name"] for c in found] == ["Carlos Lima"]


def test_update_syncs_vehicles(client, auth_headers):
    data = create_client(client, auth_headers)
    civic = next(v for v in data["vehicles"] if v["model"] == "Civic")

    response = client.put(
        f"/api/clients/{data['id']}",
        json={
            "phone": "41888887777",
            "vehicles": [
                {"id": civic["id"], "brand": "Honda", "model": "Civic", "plate": "XYZ9K87", "color": "Preto"},
                {"brand": "VW", "model": "Gol"},
            ],
        },
        headers=auth_headers
    )
    assert response.status_code == 200, response.text
    updated = response.json()
    assert updated["phone"] == "41888887777"
    assert updated["name"] == "Joao Silva"

    vehicles = client.get(f"/api/clients/{data['id']}/vehicles", headers=auth_headers).json()
    assert {v["model"] for v in vehicles} == {"Civic", "Gol"}
    civic_after = next(v for v in vehicles if v["model"] == "Civic")
    assert civic_after["id"] == civic["id"]
    assert civic_after["plate"] == "XYZ9K87"


def test_update_without_vehicles_keeps_them(client, auth_headers):
    data = create_client(client, auth_headers)
    response = client.put(f"/api/clients/{data['id']}", json={"notes": "VIP"}, headers=auth_headers)
    assert response.status_code == 200
    assert len(response.json()["vehicles"]) == 2


def test_unknown_vehicle_id_rolls_back(client, auth_headers):
    data = create_client(client, auth_headers)
    response = client.put(
        f"/api/clients/{data['id']}",
        json={"name": "Outro Nome", "vehicles": [{"id": "does-not-exist", "model": "X"}]},
        headers=auth_headers
    )
    assert response.status_code == 404

    unchanged = client.get(f"/api/clients/{data['id']}", headers=auth_headers).json()
    assert unchanged["name"] == "Joao Silva"
    assert len(unchanged["vehicles"]) == 2


def test_invalid_email_is_422(client, auth_headers):
    response = client.post("/api/clients", json={"name": "X", "email": "not-an-email"}, headers=auth_headers)
    assert response.status_code == 422


def test_other_user_cannot_see_client(client, auth_headers, other_headers):
    data = create_client(client, auth_headers)
    assert client.get(f"/api/clients/{data['id']}", headers=other_headers).status_code == 404
    assert client.get("/api/clients", headers=other_headers).json() == []


def test_delete_client(client, auth_headers):
    data = create_client(client, auth_headers)
    response = client.delete(f"/api/clients/{data['id']}", headers=auth_headers)
    assert response.status_code == 204
    assert client.get(f"/api/clients/{data['id']}", headers=auth_headers).status_code == 404
