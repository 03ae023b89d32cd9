from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable

from services.budget_service import BudgetService
from services.category_service import get_category_name
from services.recurring_service import RecurringService
from utils.constants import (
    BUDGET_ALERT_THRESHOLD, DEFAULT_CURRENCY, SEVERITY_ORDER, UPCOMING_REMINDER_DAYS,
)
from utils.currency import format_currency
from utils.date_helpers import today


@dataclass
class Reminder:
    type: str       # 'upcoming_recurring' | 'over_budget' | 'near_budget'
    severity: str   # 'info' | 'warning' | 'error'
    title: str
    detail: str
    key: str = ""   # e.g. "budget:food" or "recurring:<id>"


class ReminderService:
    def __init__(
        self,
        recurring_service: RecurringService,
        budget_service: BudgetService,
        clock: Callable[[], date] = today,
        currency: str | None = None,
    ):
        self._recurring = recurring_service
        self._budget = budget_service
        self._clock = clock
        self._currency = currency

    def get_reminders(
        self,
        user_id: str,
        ref_date: date | None = None,
        upcoming_days: int = UPCOMING_REMINDER_DAYS,
        threshold: float = BUDGET_ALERT_THRESHOLD,
    ) -> list[Reminder]:
        ref = ref_date or self._clock()
        reminders: list[Reminder] = []
        reminders += self._check_recurring(user_id, ref, upcoming_days)
        reminders += self._check_budgets(user_id, ref, threshold)
        return sorted(reminders, key=lambda r: SEVERITY_ORDER[r.severity])

    def _fmt(self, amount) -> str:
        return format_currency(amount, self._currency or DEFAULT_CURRENCY)

    def _check_recurring(self, user_id: str, ref: date, upcoming_days: int) -> list[Reminder]:
        reminders = []
        # Due rules are materialized at startup, so only strictly future dates are reminders.
        for rule in self._recurring.get_active(user_id):
            next_due = self._recurring.next_due_date(rule, after=ref)
            if next_due is None or next_due <= ref:
                continue
            if next_due <= ref + timedelta(days=upcoming_days):
                days_away = (next_due - ref).days
                day_label = "tomorrow" if days_away == 1 else f"in {days_away} days"
                reminders.append(Reminder(
                    type="upcoming_recurring",
                    severity="info",
                    title=f"{rule.description} due {day_label}",
                    detail=(
                        f"Due on {next_due.strftime('%b %d')} · "
                        f"{self._fmt(rule.amount)} · {get_category_name(rule.category)}"
                    ),
                    key=f"recurring:{rule.id}",
                ))
        return reminders

    def _check_budgets(self, user_id: str, ref: date, threshold: float) -> list[Reminder]:
        reminders = []
        for budget in self._budget.get_budget_status(user_id, ref.year, ref.month):
            if budget.limit <= 0:
                continue
            pct = budget.percentage
            detail = (
                f"Spent {self._fmt(budget.spent)} of "
                f"{self._fmt(budget.limit)} limit ({pct:.0f}%)"
            )
            if budget.status == "over-budget":
                reminders.append(Reminder(
                    type="over_budget",
                    severity="error",
                    title=f"{budget.category_name} is over budget",
                    detail=detail,
                    key=f"budget:{budget.category}",
                ))
            elif pct >= threshold:
                reminders.append(Reminder(
                    type="near_budget",
                    severity="warning",
                    title=f"{budget.category_name} near budget limit",
                    detail=detail,
                    key=f"budget:{budget.category}",
                ))
        return reminders
