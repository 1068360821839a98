from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from config import Settings
from db import Database
from main import create_app
from models import Budget, Transaction


def make_tx(type_, amount, category, day, description="test"):
    """Unsaved Transaction row; `day` is 'YYYY-MM-DD'."""
    return Transaction(
        type=type_,
        amount=amount,
        category=category,
        date=datetime.strptime(day, "%Y-%m-%d"),
        description=description,
    )


def make_budget(category, amount, month, year):
    return Budget(category=category, amount=amount, month=month, year=year)


@pytest.fixture
def database():
    db = Database("sqlite://").init()
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    s = database.session()
    yield s
    s.close()


@pytest.fixture
def client(database):
    app = create_app(Settings(database_url="sqlite://", recent_limit=3), database)
    with TestClient(app) as c:
        yield c
