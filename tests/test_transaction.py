from decimal import Decimal

from sqlmodel import select

from vicash.db.session import tenant_session
from vicash.model import Transaction

from tests.conftest import find_kind_category, register


def _create(client, headers, **overrides):
    body = {"amount": 50, "date": "2024-01-01", "type": "expense", "description": "Supermercado"}
    body.update(overrides)
    return client.post("/api/transactions", json=body, headers=headers)


def test_register_then_create_expense_end_to_end(client):
    r, headers = register(client, name="Acme", email="a@acme.com", password="secret1")
    assert r.status_code == 201
    assert r.json()["token"]
    assert r.json()["tenant_id"]

    mercado = find_kind_category(client, headers, "egresos", "Mercado")
    r = _create(client, headers, category_id=mercado["id"])

    assert r.status_code == 201
    data = r.json()
    assert data["category_type"] == "expense"
    assert Decimal(data["amount"]) == Decimal("-50")
    assert data["category_name"] == "Mercado"
    assert data["category_color"] == "#F44336"
    assert data["date"] == "2024-01-01"


def test_amount_sign_follows_type(client, acme):
    sueldo = find_kind_category(client, acme, "ingresos", "Sueldo")
    mercado = find_kind_category(client, acme, "egresos", "Mercado")

    income = _create(client, acme, amount=-1200.5, type="income", category_id=sueldo["id"]).json()
    expense = _create(client, acme, amount=-30, category_id=mercado["id"]).json()

    assert Decimal(income["amount"]) == Decimal("1200.50")
    assert Decimal(expense["amount"]) == Decimal("-30")


def test_zero_amount_is_rejected(client, acme):
    mercado = find_kind_category(client, acme, "egresos", "Mercado")
    assert _create(client, acme, amount=0, category_id=mercado["id"]).status_code == 400


def test_amount_is_validated_after_rounding_to_cents(client, acme):
    mercado = find_kind_category(client, acme, "egresos", "Mercado")
    sueldo = find_kind_category(client, acme, "ingresos", "Sueldo")

    assert _create(client, acme, amount=0.001, category_id=mercado["id"]).status_code == 400
    assert _create(client, acme, amount="9999999999.995", category_id=mercado["id"]).status_code == 400
    assert _create(client, acme, amount="1e30", category_id=mercado["id"]).status_code == 400

    r = _create(client, acme, amount="0.005", category_id=mercado["id"])
    assert r.status_code == 201
    assert Decimal(r.json()["amount"]) == Decimal("-0.01")

    r = _create(client, acme, amount="9999999999.99", type="income", category_id=sueldo["id"])
    assert r.status_code == 201
    assert Decimal(r.json()["amount"]) == Decimal("9999999999.99")

    assert len(client.get("/api/transactions", headers=acme).json()) == 2


def test_category_must_exist_in_table_of_transaction_type(client, acme):
    egresos_ids = {c["id"] for c in client.get("/api/categorias/egresos", headers=acme).json()}
    missing_id = max(egresos_ids) + 100

    r = _create(client, acme, category_id=missing_id)
    assert r.status_code == 404
    assert r.json() == {"message": "Category not found"}

    ingresos_ids = {c["id"] for c in client.get("/api/categorias/ingresos", headers=acme).json()}
    expense_only_id = max(egresos_ids - ingresos_ids)
    assert _create(client, acme, type="income", category_id=expense_only_id).status_code == 404

    with tenant_session("tenant_acme") as session:
        assert session.exec(select(Transaction)).all() == []


def test_list_is_newest_first_and_filterable(client, acme):
    sueldo = find_kind_category(client, acme, "ingresos", "Sueldo")
    mercado = find_kind_category(client, acme, "egresos", "Mercado")
    _create(client, acme, amount=1000, type="income", category_id=sueldo["id"], date="2024-01-05")
    _create(client, acme, amount=40, category_id=mercado["id"], date="2024-01-10")
    _create(client, acme, amount=60, category_id=mercado["id"], date="2024-02-03")

    r = client.get("/api/transactions", headers=acme)
    assert r.status_code == 200
    assert [t["date"] for t in r.json()] == ["2024-02-03", "2024-01-10", "2024-01-05"]

    r = client.get("/api/transactions", params={"type": "expense"}, headers=acme)
    assert {t["category_type"] for t in r.json()} == {"expense"}
    assert len(r.json()) == 2

    r = client.get("/api/transactions", params={"date_from": "2024-01-06", "date_to": "2024-01-31"}, headers=acme)
    assert [t["date"] for t in r.json()] == ["2024-01-10"]

    r = client.get("/api/transactions", params={"date_from": "2024-02-01", "date_to": "2024-01-01"}, headers=acme)
    assert r.status_code == 400


def test_summary(client, acme):
    sueldo = find_kind_category(client, acme, "ingresos", "Sueldo")
    mercado = find_kind_category(client, acme, "egresos", "Mercado")
    salud = find_kind_category(client, acme, "egresos", "Salud")
    _create(client, acme, amount=1000, type="income", category_id=sueldo["id"], date="2024-01-05")
    _create(client, acme, amount=40, category_id=mercado["id"], date="2024-01-10")
    _create(client, acme, amount=60.25, category_id=salud["id"], date="2024-02-03")

    r = client.get("/api/transactions/summary", headers=acme)
    assert r.status_code == 200
    data = r.json()
    assert Decimal(data["total_income"]) == Decimal("1000")
    assert Decimal(data["total_expense"]) == Decimal("100.25")
    assert Decimal(data["balance"]) == Decimal("899.75")
    assert data["count"] == 3
    assert [m["month"] for m in data["by_month"]] == ["2024-01", "2024-02"]
    assert Decimal(data["by_month"][0]["expense"]) == Decimal("40")
    names = {(c["type"], c["category_name"]) for c in data["by_category"]}
    assert names == {("income", "Sueldo"), ("expense", "Mercado"), ("expense", "Salud")}


def test_update_transaction(client, acme):
    mercado = find_kind_category(client, acme, "egresos", "Mercado")
    sueldo = find_kind_category(client, acme, "ingresos", "Sueldo")
    created = _create(client, acme, category_id=mercado["id"]).json()

    r = client.put(
        f"/api/transactions/{created['id']}",
        json={"amount": 75, "date": "2024-03-01", "type": "income", "category_id": sueldo["id"]},
        headers=acme,
    )
    assert r.status_code == 200
    data = r.json()
    assert Decimal(data["amount"]) == Decimal("75")
    assert data["category_type"] == "income"
    assert data["category_name"] == "Sueldo"
    assert data["description"] is None

    r = client.get(f"/api/transactions/{created['id']}", headers=acme)
    assert r.status_code == 200
    assert r.json()["date"] == "2024-03-01"

    r = client.put(
        "/api/transactions/9999",
        json={"amount": 75, "date": "2024-03-01", "type": "income", "category_id": sueldo["id"]},
        headers=acme,
    )
    assert r.status_code == 404


def test_delete_is_not_idempotent_success(client, acme):
    mercado = find_kind_category(client, acme, "egresos", "Mercado")
    created = _create(client, acme, category_id=mercado["id"]).json()

    assert client.delete(f"/api/transactions/{created['id']}", headers=acme).status_code == 204
    for _ in range(2):
        r = client.delete(f"/api/transactions/{created['id']}", headers=acme)
        assert r.status_code == 404
        assert r.json() == {"message": "Transaction not found"}


def test_transactions_are_isolated_between_tenants(client, acme):
    r, beta = register(client, name="Beta", email="b@beta.com")
    assert r.status_code == 201

    mercado = find_kind_category(client, acme, "egresos", "Mercado")
    created = _create(client, acme, category_id=mercado["id"]).json()

    assert client.get("/api/transactions", headers=beta).json() == []
    assert client.get(f"/api/transactions/{created['id']}", headers=beta).status_code == 404
    assert client.delete(f"/api/transactions/{created['id']}", headers=beta).status_code == 404
    assert len(client.get("/api/transactions", headers=acme).json()) == 1
