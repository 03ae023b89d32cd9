from datetime import date
from decimal import Decimal
from typing import Callable

from database.budget_dao import BudgetDAO
from database.transaction_dao import TransactionDAO
from models.budget import BudgetGoal, BudgetProgress
from services.aggregation import budget_progress, budget_status, filter_by_month, group_by_category
from services.category_service import get_all_categories, get_category_name
from services.validation import validate_budget_limit
from utils.currency import ZERO
from utils.date_helpers import today


class BudgetService:
    def __init__(
        self,
        budget_dao: BudgetDAO,
        tx_dao: TransactionDAO,
        clock: Callable[[], date] = today,
    ):
        self._budget_dao = budget_dao
        self._tx_dao = tx_dao
        self._clock = clock

    def get_goals(self, user_id: str) -> list[BudgetGoal]:
        return self._budget_dao.get_all(user_id)

    def get_budget_status(
        self, user_id: str, year: int | None = None, month: int | None = None
    ) -> list[BudgetProgress]:
        """Return every goal with the month's expense spending filled in."""
        if year is None or month is None:
            ref = self._clock()
            year, month = ref.year, ref.month
        expenses = [
            t for t in filter_by_month(self._tx_dao.get_all(user_id), year, month)
            if t.type == "expense"
        ]
        spending = group_by_category(expenses)
        result = []
        for goal in self._budget_dao.get_all(user_id):
            spent = spending.get(goal.category, {}).get("total", ZERO)
            result.append(BudgetProgress(
                category=goal.category,
                category_name=get_category_name(goal.category),
                limit=goal.limit,
                spent=spent,
                percentage=budget_progress(spent, goal.limit),
                status=budget_status(spent, goal.limit),
            ))
        return result

    def upsert(self, user_id: str, category: str, limit) -> BudgetGoal:
        validate_budget_limit(category, limit)
        goal = BudgetGoal(category=category, limit=limit)
        goals = [g for g in self._budget_dao.get_all(user_id) if g.category != category]
        goals.append(goal)
        if not self._budget_dao.save_all(user_id, goals):
            raise RuntimeError("Could not save budget.")
        return goal

    def delete(self, user_id: str, category: str):
        goals = self._budget_dao.get_all(user_id)
        remaining = [g for g in goals if g.category != category]
        if len(remaining) != len(goals) and not self._budget_dao.save_all(user_id, remaining):
            raise RuntimeError("Could not save budget.")

    def get_total_budget(self, user_id: str) -> Decimal:
        return sum((g.limit for g in self._budget_dao.get_all(user_id)), ZERO)

    def get_expense_categories(self):
        """Categories valid for budgeting."""
        return get_all_categories("expense")
