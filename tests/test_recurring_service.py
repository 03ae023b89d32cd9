from datetime import date
from decimal import Decimal

import pytest

from conftest import USER
from utils.errors import ValidationError


def test_apply_due_rules_persists_everything(recurring_svc, daos, notifier):
    rule = recurring_svc.create(USER, "expense", "50", "rent", "Dorm rent", day=5)

    created = recurring_svc.apply_due_rules(USER)

    assert len(created) == 1
    assert daos["tx"].get_all(USER)[0].id == created[0].id
    assert daos["bank"].get_by_id(USER, "main").balance == Decimal("-50.00")
    assert recurring_svc.get_by_id(USER, rule.id).last_processed == date(2024, 3, 10)
    assert notifier.calls == [("New recurring transactions have been added automatically", "info")]


def test_apply_twice_in_same_month_is_idempotent(recurring_svc, daos, notifier, clock):
    recurring_svc.create(USER, "income", "300", "allowance", "Allowance", day=1)
    recurring_svc.apply_due_rules(USER)

    clock.current = date(2024, 3, 28)
    assert recurring_svc.apply_due_rules(USER) == []
    assert len(daos["tx"].get_all(USER)) == 1
    assert daos["bank"].get_by_id(USER, "main").balance == Decimal("300.00")
    assert len(notifier.calls) == 1

    clock.current = date(2024, 4, 2)
    assert len(recurring_svc.apply_due_rules(USER)) == 1
    assert daos["bank"].get_by_id(USER, "main").balance == Decimal("600.00")


def test_nothing_due_sends_no_notification(recurring_svc, notifier):
    recurring_svc.create(USER, "expense", "9.99", "entertainment", "Streaming", day=25)
    assert recurring_svc.apply_due_rules(USER) == []
    assert notifier.calls == []


def test_no_rules_is_a_no_op(recurring_svc, notifier):
    assert recurring_svc.apply_due_rules(USER) == []
    assert notifier.calls == []


def test_failed_save_keeps_nothing(recurring_svc, db, daos, notifier, monkeypatch):
    recurring_svc.create(USER, "expense", "50", "rent", "Dorm rent", day=5)
    monkeypatch.setattr(db, "save_many", lambda user_id, values: False)

    assert recurring_svc.apply_due_rules(USER) == []
    assert daos["tx"].get_all(USER) == []
    assert recurring_svc.get_all(USER)[0].last_processed is None
    assert notifier.calls == []


def test_create_rejects_bad_rule(recurring_svc):
    with pytest.raises(ValidationError) as exc_info:
        recurring_svc.create(USER, "gift", "-5", "", "", day=40)
    assert set(exc_info.value.fields) == {"type", "amount", "category", "description", "day"}


def test_create_rejects_unsupported_frequency(recurring_svc):
    with pytest.raises(ValidationError) as exc_info:
        recurring_svc.create(USER, "expense", "5", "food", "Meal plan", day=1, frequency="weekly")
    assert exc_info.value.fields == ["frequency"]


def test_update_keeps_cursor(recurring_svc):
    rule = recurring_svc.create(USER, "expense", "50", "rent", "Dorm rent", day=5)
    recurring_svc.apply_due_rules(USER)

    updated = recurring_svc.update(USER, rule.id, "expense", "55", "rent", "Dorm rent", day=6)
    assert updated.amount == Decimal("55.00")
    assert updated.last_processed == date(2024, 3, 10)


def test_deactivated_rule_is_skipped(recurring_svc):
    rule = recurring_svc.create(USER, "expense", "50", "rent", "Dorm rent", day=5)
    recurring_svc.set_active(USER, rule.id, False)
    assert recurring_svc.apply_due_rules(USER) == []


def test_delete_unknown_rule_raises(recurring_svc):
    with pytest.raises(ValueError):
        recurring_svc.delete(USER, "nope")


def test_delete_rule(recurring_svc):
    rule = recurring_svc.create(USER, "expense", "50", "rent", "Dorm rent", day=5)
    recurring_svc.delete(USER, rule.id)
    assert recurring_svc.get_all(USER) == []


def test_users_are_isolated(recurring_svc, daos):
    recurring_svc.create(USER, "expense", "50", "rent", "Dorm rent", day=5)
    recurring_svc.apply_due_rules("someone-else")
    assert daos["tx"].get_all("someone-else") == []
    assert len(recurring_svc.apply_due_rules(USER)) == 1
