import pytest
from fastapi.testclient import TestClient

from expense_tracker.db import dynamo
from expense_tracker.main import app


class InMemoryStore:
    """Stands in for the DynamoDB tables during API tests."""

    def __init__(self):
        self.expenses = {}
        self.budgets = {}

    def list_expenses(self):
        return [dict(item) for item in self.expenses.values()]

    def get_expense(self, expense_id):
        item = self.expenses.get(expense_id)
        return dict(item) if item else None

    def put_expense(self, item):
        self.expenses[item["id"]] = dict(item)
        return True

    def replace_expense(self, expense_id, item):
        if expense_id not in self.expenses:
            return None
        self.expenses[expense_id] = dict(item, id=expense_id)
        return dict(self.expenses[expense_id])

    def delete_expense(self, expense_id):
        return self.expenses.pop(expense_id, None) is not None

    def get_budget(self, month):
        item = self.budgets.get(month)
        return dict(item) if item else None

    def upsert_budget(self, item):
        self.budgets[item["month"]] = dict(item)
        return True


@pytest.fixture
def store(monkeypatch):
    fake = InMemoryStore()
    for name in (
        "list_expenses",
        "get_expense",
        "put_expense",
        "replace_expense",
        "delete_expense",
        "get_budget",
        "upsert_budget",
    ):
        monkeypatch.setattr(dynamo, name, getattr(fake, name))
    return fake


@pytest.fixture
def client(store):
    return TestClient(app)
