from datetime import date
from decimal import Decimal

import pytest

from conftest import USER
from utils.errors import ValidationError


def test_budget_status_uses_month_expenses(budget_svc, tx_svc):
    budget_svc.upsert(USER, "food", "100")
    budget_svc.upsert(USER, "transport", "40")
    tx_svc.create(USER, "expense", "60", "food", "Groceries", date="2024-03-02")
    tx_svc.create(USER, "expense", "32", "food", "Dinner", date="2024-03-08")
    tx_svc.create(USER, "expense", "999", "food", "Last month", date="2024-02-20")
    tx_svc.create(USER, "income", "10", "food", "Refund-ish", date="2024-03-03")

    status = {b.category: b for b in budget_svc.get_budget_status(USER)}

    food = status["food"]
    assert food.category_name == "Food & Dining"
    assert food.spent == Decimal("92.00")
    assert food.percentage == 92
    assert food.status == "near-limit"
    assert food.remaining == Decimal("8.00")

    transport = status["transport"]
    assert transport.spent == 0
    assert transport.status == "on-track"


def test_budget_status_for_explicit_month(budget_svc, tx_svc):
    budget_svc.upsert(USER, "food", "100")
    tx_svc.create(USER, "expense", "150", "food", "Feast", date="2024-02-20")
    (food,) = budget_svc.get_budget_status(USER, 2024, 2)
    assert food.status == "over-budget"
    assert food.percentage == 100
    assert food.remaining == 0


def test_upsert_replaces_existing_goal(budget_svc):
    budget_svc.upsert(USER, "food", "100")
    budget_svc.upsert(USER, "food", "120")
    goals = budget_svc.get_goals(USER)
    assert len(goals) == 1
    assert goals[0].limit == Decimal("120.00")
    assert budget_svc.get_total_budget(USER) == Decimal("120.00")


def test_upsert_rejects_negative_limit(budget_svc):
    with pytest.raises(ValidationError):
        budget_svc.upsert(USER, "food", "-1")


def test_zero_limit_allowed(budget_svc):
    budget_svc.upsert(USER, "clothing", 0)
    (goal,) = budget_svc.get_budget_status(USER)
    assert goal.percentage == 0
    assert goal.status == "on-track"


def test_delete_goal(budget_svc):
    budget_svc.upsert(USER, "food", "100")
    budget_svc.delete(USER, "food")
    assert budget_svc.get_goals(USER) == []


def test_expense_categories(budget_svc):
    keys = [c.key for c in budget_svc.get_expense_categories()]
    assert "food" in keys
    assert "scholarship" not in keys
