from datetime import datetime, timezone

from app.services import storage
from models import Budget


def test_create_and_list_transactions_newest_first(session):
    storage.create_transaction(
        session,
        {"amount": 10.0, "date": datetime(2024, 1, 5), "description": "Lunch", "type": "expense", "category": "Food"},
    )
    storage.create_transaction(
        session,
        {"amount": 1000.0, "date": datetime(2024, 2, 1), "description": "Pay", "type": "income", "category": "Salary"},
    )

    rows = storage.list_transactions(session)
    assert [t.description for t in rows] == ["Pay", "Lunch"]
    assert rows[0].id is not None
    assert rows[0].created_at is not None


def test_timestamps_are_naive_utc(session):
    before = datetime.now(timezone.utc).replace(tzinfo=None)
    t = storage.create_transaction(
        session,
        {"amount": 1.0, "date": datetime(2024, 1, 1), "description": "Tea", "type": "expense", "category": "Food"},
    )
    b = storage.set_budget(session, "Food", 1, 2024, 100.0)
    after = datetime.now(timezone.utc).replace(tzinfo=None)

    for stamp in (t.created_at, t.updated_at, b.created_at, b.updated_at):
        assert stamp.tzinfo is None
        assert before <= stamp <= after


def test_create_transaction_without_date_uses_now(session):
    before = datetime.now()
    t = storage.create_transaction(
        session,
        {"amount": 3.5, "date": None, "description": "Coffee", "type": "expense", "category": "Food"},
    )
    assert t.date >= before.replace(microsecond=0)


def test_update_transaction_changes_only_given_fields(session):
    t = storage.create_transaction(
        session,
        {"amount": 10.0, "date": datetime(2024, 1, 5), "description": "Lunch", "type": "expense", "category": "Food"},
    )

    updated = storage.update_transaction(session, t.id, {"amount": 12.5, "category": "Entertainment"})

    assert updated.amount == 12.5
    assert updated.category == "Entertainment"
    assert updated.description == "Lunch"
    assert storage.update_transaction(session, 9999, {"amount": 1.0}) is None


def test_delete_transaction(session):
    t = storage.create_transaction(
        session,
        {"amount": 10.0, "date": datetime(2024, 1, 5), "description": "Lunch", "type": "expense", "category": "Food"},
    )

    assert storage.delete_transaction(session, t.id) is True
    assert storage.get_transaction(session, t.id) is None
    assert storage.delete_transaction(session, t.id) is False


def test_set_budget_overwrites_existing_key(session):
    first = storage.set_budget(session, "Food", 1, 2024, 100)
    second = storage.set_budget(session, "Food", 1, 2024, 250)

    assert first.id == second.id
    assert session.query(Budget).count() == 1
    assert storage.list_budgets(session)[0].amount == 250


def test_list_budgets_latest_month_first(session):
    storage.set_budget(session, "Transport", 1, 2024, 50)
    storage.set_budget(session, "Food", 2, 2024, 100)
    storage.set_budget(session, "Food", 1, 2024, 80)
    storage.set_budget(session, "Food", 12, 2023, 70)

    keys = [(b.year, b.month, b.category) for b in storage.list_budgets(session)]
    assert keys == [
        (2024, 2, "Food"),
        (2024, 1, "Food"),
        (2024, 1, "Transport"),
        (2023, 12, "Food"),
    ]
