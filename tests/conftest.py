from datetime import date
from decimal import Decimal

import pytest

from database.db_manager import DatabaseManager
from database.bank_dao import BankDAO
from database.budget_dao import BudgetDAO
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from models.bank import Bank
from models.recurring_rule import RecurringRule
from services.bank_service import BankService
from services.budget_service import BudgetService
from services.recurring_service import RecurringService
from services.reminder_service import ReminderService
from services.report_service import ReportService
from services.transaction_service import TransactionService

USER = "u1"


class FakeClock:
    def __init__(self, current: date):
        self.current = current

    def __call__(self) -> date:
        return self.current


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    def notify(self, message, severity="info"):
        self.calls.append((message, severity))


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(str(tmp_path / "test.db"))
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def clock():
    return FakeClock(date(2024, 3, 10))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def daos(db):
    return {
        "tx": TransactionDAO(db),
        "bank": BankDAO(db),
        "recurring": RecurringDAO(db),
        "budget": BudgetDAO(db),
    }


@pytest.fixture
def recurring_svc(db, daos, notifier, clock):
    return RecurringService(db, daos["recurring"], daos["tx"], daos["bank"], notifier, clock)


@pytest.fixture
def tx_svc(db, daos, clock):
    return TransactionService(db, daos["tx"], daos["bank"], clock)


@pytest.fixture
def bank_svc(daos):
    return BankService(daos["bank"])


@pytest.fixture
def budget_svc(daos, clock):
    return BudgetService(daos["budget"], daos["tx"], clock)


@pytest.fixture
def report_svc(daos, clock):
    return ReportService(daos["tx"], daos["bank"], clock)


@pytest.fixture
def reminder_svc(recurring_svc, budget_svc, clock):
    return ReminderService(recurring_svc, budget_svc, clock)


def make_rule(**overrides) -> RecurringRule:
    fields = dict(
        id="r1",
        type="expense",
        amount=Decimal("50"),
        category="rent",
        description="Dorm rent",
        day=5,
        bank_id="main",
    )
    fields.update(overrides)
    return RecurringRule(**fields)


def make_bank(bank_id="main", balance="1000") -> Bank:
    return Bank(id=bank_id, name=bank_id.title(), balance=Decimal(balance))
