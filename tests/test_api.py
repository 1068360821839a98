from datetime import date

from sqlalchemy.exc import IntegrityError

from app.services import storage


def _post_tx(client, **overrides):
    payload = {
        "amount": 50,
        "date": "2024-01-05",
        "description": "Groceries",
        "type": "expense",
        "category": "Food",
    }
    payload.update(overrides)
    return client.post("/api/transactions", json=payload)


def test_root_redirects_to_dashboard(client):
    resp = client.get("/", follow_redirects=False)
    assert resp.status_code == 302
    assert resp.headers["location"] == "/dashboard"


def test_health_and_categories(client):
    assert client.get("/health").json() == {"status": "ok"}

    cats = client.get("/api/categories").json()
    assert "Food" in cats["expense"]
    assert "Salary" in cats["income"]
    assert cats["all"] == cats["expense"] + cats["income"]


def test_transaction_crud(client):
    resp = _post_tx(client)
    assert resp.status_code == 201
    created = resp.json()
    assert created["date"] == "2024-01-05T00:00:00"
    tx_id = created["id"]

    assert client.get(f"/api/transactions/{tx_id}").json()["description"] == "Groceries"

    resp = client.put(f"/api/transactions/{tx_id}", json={"amount": 75.5})
    assert resp.status_code == 200
    assert resp.json()["amount"] == 75.5
    assert resp.json()["category"] == "Food"

    resp = client.delete(f"/api/transactions/{tx_id}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Transaction deleted successfully"}

    assert client.get(f"/api/transactions/{tx_id}").status_code == 404
    assert client.delete(f"/api/transactions/{tx_id}").status_code == 404
    assert client.put(f"/api/transactions/{tx_id}", json={"amount": 1}).status_code == 404


def test_list_transactions_newest_first(client):
    _post_tx(client, description="old", date="2024-01-01")
    _post_tx(client, description="new", date="2024-03-01")

    assert [t["description"] for t in client.get("/api/transactions").json()] == ["new", "old"]


def test_create_transaction_validation_error(client):
    resp = client.post("/api/transactions", json={"amount": "abc", "type": "expense"})

    assert resp.status_code == 400
    body = resp.json()
    assert body["message"] == "Invalid transaction"
    assert {e["field"] for e in body["errors"]} == {"amount", "description", "category"}
    assert client.get("/api/transactions").json() == []


def test_update_transaction_validation_error(client):
    tx_id = _post_tx(client).json()["id"]

    resp = client.put(f"/api/transactions/{tx_id}", json={"type": "refund"})
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "type"


def test_budget_upsert(client):
    resp = client.post("/api/budgets", json={"category": "Food", "amount": 100, "month": 1, "year": 2024})
    assert resp.status_code == 201

    resp = client.post("/api/budgets", json={"category": "Food", "amount": 150, "month": 1, "year": 2024})
    assert resp.status_code == 201
    assert resp.json()["amount"] == 150

    budgets = client.get("/api/budgets").json()
    assert len(budgets) == 1
    assert budgets[0]["amount"] == 150


def test_budget_conflict_returns_409(client, monkeypatch):
    def conflicting_insert(*args, **kwargs):
        raise IntegrityError("INSERT INTO budgets", {}, Exception("UNIQUE constraint failed"))

    monkeypatch.setattr(storage, "set_budget", conflicting_insert)

    resp = client.post("/api/budgets", json={"category": "Food", "amount": 100, "month": 1, "year": 2024})

    assert resp.status_code == 409
    assert resp.json() == {"message": "Budget for this category, month, and year already exists."}


def test_budget_validation_error(client):
    resp = client.post("/api/budgets", json={"category": "Food", "amount": -1, "month": 0, "year": 2024})
    assert resp.status_code == 400
    assert {e["field"] for e in resp.json()["errors"]} == {"amount", "month"}


def test_dashboard_json_for_selected_month(client):
    _post_tx(client, amount=30, date="2024-01-01")
    _post_tx(client, amount=20, date="2024-02-01")
    _post_tx(client, amount=1000, type="income", category="Salary", date="2024-01-01")
    client.post("/api/budgets", json={"category": "Food", "amount": 100, "month": 1, "year": 2024})

    data = client.get("/api/dashboard", params={"month": "2024-01"}).json()

    assert data["month"] == "2024-01"
    assert data["month_label"] == "January 2024"
    assert data["totals"] == {"total_income": 1000.0, "total_expenses": 50.0, "net_balance": 950.0}
    assert data["category_breakdown"] == [{"name": "Food", "value": 50.0}]
    assert [m["bucket"] for m in data["monthly_series"]] == ["2024-01", "2024-02"]
    assert data["budget_reconciliation"] == [{"category": "Food", "budgeted": 100.0, "actual": 30.0}]
    assert data["insights"] == [
        "You are under budget by $70.00 this month (January 2024)!",
        'Your top expense category is "Food" ($50.00).',
        "Your spending decreased by $10.00 from Jan 2024 to Feb 2024.",
    ]
    # recent_limit=3 in the test settings
    assert len(data["recent_transactions"]) == 3
    assert data["recent_transactions"][0]["date"] == "2024-02-01T00:00:00"


def test_dashboard_json_empty_defaults_to_current_month(client):
    data = client.get("/api/dashboard").json()

    today = date.today()
    assert data["month"] == f"{today.year:04d}-{today.month:02d}"
    assert data["category_breakdown"] == []
    assert data["monthly_series"] == []
    assert data["budget_reconciliation"] == []
    assert len(data["insights"]) == 1
    assert "no budgets set" in data["insights"][0]


def test_dashboard_page_renders(client):
    _post_tx(client, amount=42, date="2024-01-10", description="Weekly shop")

    resp = client.get("/dashboard", params={"month": "2024-01"})

    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "no budgets set for January 2024" in resp.text
    assert "Weekly shop" in resp.text
    assert "$42.00" in resp.text


def test_dashboard_out_of_range_month_falls_back_to_current(client):
    today = date.today()

    for month in ("10000-01", "1999-12"):
        resp = client.get("/api/dashboard", params={"month": month})
        assert resp.status_code == 200
        assert resp.json()["month"] == f"{today.year:04d}-{today.month:02d}"
