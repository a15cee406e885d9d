from datetime import date, timedelta


def create_account(client, headers, name="Banco", initial=1000, type="bank"):
    response = client.post(
        "/api/financial/accounts",
        json={"name": name, "type": type, "initial_balance": initial},
        headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


def balance_of(client, headers, account_id):
    return client.get(f"/api/financial/accounts/{account_id}", headers=headers).json()["current_balance"]


def test_account_starts_with_initial_balance(client, auth_headers):
    account = create_account(client, auth_headers, initial=250)
    assert account["current_balance"] == 250


def test_transactions_adjust_balance(client, auth_headers):
    account = create_account(client, auth_headers)

    credit = client.post(
        "/api/financial/transactions",
        json={"account_id": account["id"], "amount": 300, "type": "credit", "description": "Servico"},
        headers=auth_headers
    )
    assert credit.status_code == 201
    assert credit.json()["transaction_date"] == date.today().isoformat()

    client.post(
        "/api/financial/transactions",
        json={"account_id": account["id"], "amount": 120.5, "type": "debit", "description": "Produtos"},
        headers=auth_headers
    )
    assert balance_of(client, auth_headers, account["id"]) == 1179.5


def test_soft_delete_reverts_balance(client, auth_headers):
    account = create_account(client, auth_headers)
    transaction = client.post(
        "/api/financial/transactions",
        json={"account_id": account["id"], "amount": 200, "type": "debit", "description": "Aluguel"},
        headers=auth_headers
    ).json()

    assert balance_of(client, auth_headers, account["id"]) == 800
    response = client.delete(f"/api/financial/transactions/{transaction['id']}", headers=auth_headers)
    assert response.status_code == 204
    assert balance_of(client, auth_headers, account["id"]) == 1000

    visible = client.get("/api/financial/transactions", headers=auth_headers).json()
    assert visible == []
    everything = client.get("/api/financial/transactions", params={"include_deleted": True}, headers=auth_headers).json()
    assert everything[0]["is_deleted"] is True

    again = client.delete(f"/api/financial/transactions/{transaction['id']}", headers=auth_headers)
    assert again.status_code == 404


def test_non_positive_amount_is_422(client, auth_headers):
    response = client.post(
        "/api/financial/transactions",
        json={"amount": 0, "type": "credit", "description": "X"},
        headers=auth_headers
    )
    assert response.status_code == 422


def test_transfer(client, auth_headers):
    bank = create_account(client, auth_headers, name="Banco", initial=1000)
    cash = create_account(client, auth_headers, name="Caixa", initial=0, type="cash")

    response = client.post(
        "/api/financial/transfer",
        json={"from_account_id": bank["id"], "to_account_id": cash["id"], "amount": 150},
        headers=auth_headers
    )
    assert response.status_code == 201, response.text
    assert [t["type"] for t in response.json()] == ["debit", "credit"]

    assert balance_of(client, auth_headers, bank["id"]) == 850
    assert balance_of(client, auth_headers, cash["id"]) == 150

    total = client.get("/api/financial/balance", headers=auth_headers).json()
    assert total["total_balance"] == 1000
    assert total["accounts"] == 2


def test_transfer_to_same_account_rejected(client, auth_headers):
    bank = create_account(client, auth_headers)
    response = client.post(
        "/api/financial/transfer",
        json={"from_account_id": bank["id"], "to_account_id": bank["id"], "amount": 10},
        headers=auth_headers
    )
    assert response.status_code == 400


def test_transfer_to_foreign_account_changes_nothing(client, auth_headers, other_headers):
    bank = create_account(client, auth_headers)
    foreign = create_account(client, other_headers)
    response = client.post(
        "/api/financial/transfer",
        json={"from_account_id": bank["id"], "to_account_id": foreign["id"], "amount": 10},
        headers=auth_headers
    )
    assert response.status_code == 404
    assert balance_of(client, auth_headers, bank["id"]) == 1000


def test_settle_payable(client, auth_headers):
    account = create_account(client, auth_headers)
    item = client.post(
        "/api/financial/planned",
        json={
            "kind": "payable",
            "description": "Fornecedor de quimicos",
            "amount": 400,
            "due_date": (date.today() + timedelta(days=5)).isoformat(),
            "account_id": account["id"],
        },
        headers=auth_headers
    ).json()
    assert item["status"] == "pending"

    pending = client.get("/api/financial/balance", headers=auth_headers).json()
    assert pending["pending_payables"] == 400

    response = client.post(f"/api/financial/planned/{item['id']}/settle", headers=auth_headers)
    assert response.status_code == 200, response.text
    settled = response.json()
    assert settled["status"] == "paid"
    assert settled["transaction_id"]

    assert balance_of(client, auth_headers, account["id"]) == 600
    transactions = client.get("/api/financial/transactions", headers=auth_headers).json()
    assert transactions[0]["type"] == "debit"
    assert transactions[0]["related_entity_id"] == item["id"]

    twice = client.post(f"/api/financial/planned/{item['id']}/settle", headers=auth_headers)
    assert twice.status_code == 400


def test_settle_receivable_into_other_account(client, auth_headers):
    cash = create_account(client, auth_headers, name="Caixa", initial=0, type="cash")
    item = client.post(
        "/api/financial/planned",
        json={"kind": "receivable", "description": "Frota", "amount": 900, "due_date": date.today().isoformat()},
        headers=auth_headers
    ).json()

    response = client.post(
        f"/api/financial/planned/{item['id']}/settle",
        json={"account_id": cash["id"]},
        headers=auth_headers
    )
    assert response.status_code == 200
    assert response.json()["account_id"] == cash["id"]
    assert balance_of(client, auth_headers, cash["id"]) == 900


def test_overdue_filter(client, auth_headers):
    yesterday = (date.today() - timedelta(days=1)).isoformat()
    tomorrow = (date.today() + timedelta(days=1)).isoformat()
    for description, due in (("Atrasada", yesterday), ("Em dia", tomorrow)):
        client.post(
            "/api/financial/planned",
            json={"kind": "payable", "description": description, "amount": 10, "due_date": due},
            headers=auth_headers
        )

    overdue = client.get("/api/financial/planned", params={"overdue": True}, headers=auth_headers).json()
    assert [i["description"] for i in overdue] == ["Atrasada"]
    assert overdue[0]["is_overdue"] is True


def test_account_with_transactions_cannot_be_deleted(client, auth_headers):
    account = create_account(client, auth_headers)
    client.post(
        "/api/financial/transactions",
        json={"account_id": account["id"], "amount": 5, "type": "credit", "description": "X"},
        headers=auth_headers
    )
    assert client.delete(f"/api/financial/accounts/{account['id']}", headers=auth_headers).status_code == 400

    empty = create_account(client, auth_headers, name="Vazia")
    assert client.delete(f"/api/financial/accounts/{empty['id']}", headers=auth_headers).status_code == 204


def test_deleting_settlement_reopens_planned_item(client, auth_headers):
    account = create_account(client, auth_headers)
    item = client.post(
        "/api/financial/planned",
        json={"kind": "payable", "description": "Aluguel", "amount": 300,
              "due_date": date.today().isoformat(), "account_id": account["id"]},
        headers=auth_headers
    ).json()
    settled = client.post(f"/api/financial/planned/{item['id']}/settle", headers=auth_headers).json()
    assert balance_of(client, auth_headers, account["id"]) == 700

    response = client.delete(f"/api/financial/transactions/{settled['transaction_id']}", headers=auth_headers)
    assert response.status_code == 204
    assert balance_of(client, auth_headers, account["id"]) == 1000

    reopened = client.get("/api/financial/planned", headers=auth_headers).json()[0]
    assert reopened["status"] == "pending"
    assert reopened["transaction_id"] is None
    assert client.get("/api/financial/balance", headers=auth_headers).json()["pending_payables"] == 300

    again = client.post(f"/api/financial/planned/{item['id']}/settle", headers=auth_headers)
    assert again.status_code == 200
    assert balance_of(client, auth_headers, account["id"]) == 700
