"""Pure aggregation over a ledger snapshot.

Nothing here mutates its input or raises for well-formed transactions;
an empty ledger gives zeroed or empty results.
"""
from datetime import date, datetime
from decimal import Decimal

from services.category_service import get_category_name
from utils.constants import HIGH_SPENDING_RATIO
from utils.currency import ZERO
from utils.date_helpers import parse_date


def _as_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _tx_date(tx) -> date | None:
    return parse_date(tx.date)


def totals_by_type(transactions) -> dict:
    """Return {income, expense, net} with net = income - expense."""
    income = ZERO
    expense = ZERO
    for tx in transactions:
        if tx.type == "income":
            income += _as_decimal(tx.amount)
        elif tx.type == "expense":
            expense += _as_decimal(tx.amount)
    return {"income": income, "expense": expense, "net": income - expense}


def group_by_category(transactions) -> dict:
    """Group by category key in first-seen order.

    Each value is {transactions, total, count}; total ignores direction.
    """
    grouped: dict[str, dict] = {}
    for tx in transactions:
        group = grouped.setdefault(
            tx.category, {"transactions": [], "total": ZERO, "count": 0}
        )
        group["transactions"].append(tx)
        group["total"] += _as_decimal(tx.amount)
        group["count"] += 1
    return grouped


def filter_by_date_range(transactions, start, end) -> list:
    """Transactions with start <= date <= end, compared as calendar dates."""
    start_d, end_d = parse_date(start), parse_date(end)
    if start_d is None or end_d is None:
        return []
    result = []
    for tx in transactions:
        d = _tx_date(tx)
        if d is not None and start_d <= d <= end_d:
            result.append(tx)
    return result


def filter_by_month(transactions, year: int, month: int) -> list:
    """month is 1-12."""
    result = []
    for tx in transactions:
        d = _tx_date(tx)
        if d is not None and d.year == year and d.month == month:
            result.append(tx)
    return result


def current_month_transactions(transactions, today: date) -> list:
    return filter_by_month(transactions, today.year, today.month)


def sort_transactions_by_date(transactions, ascending: bool = False) -> list:
    """Sort by date; creation timestamp breaks ties. Returns a new list."""
    def key(tx):
        ts = tx.timestamp
        return (_tx_date(tx) or date.min, ts.timestamp() if isinstance(ts, datetime) else 0.0)
    return sorted(transactions, key=key, reverse=not ascending)


def search_transactions(transactions, term: str) -> list:
    """Case-insensitive match on description, category key/name and notes."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(transactions)
    result = []
    for tx in transactions:
        haystack = (
            tx.description,
            tx.category,
            get_category_name(tx.category),
            tx.notes or "",
        )
        if any(needle in field.lower() for field in haystack):
            result.append(tx)
    return result


def savings_rate(income, expenses) -> float:
    """Percent of income kept; 0 when there is no income. May be negative."""
    income_d = _as_decimal(income)
    if income_d <= 0:
        return 0.0
    return float((income_d - _as_decimal(expenses)) / income_d * 100)


def budget_progress(spent, budgeted) -> float:
    """Percent of the budget used, clamped to [0, 100]."""
    budgeted_d = _as_decimal(budgeted)
    if budgeted_d <= 0:
        return 0.0
    pct = _as_decimal(spent) / budgeted_d * 100
    return float(min(max(pct, Decimal(0)), Decimal(100)))


def budget_status(spent, budgeted) -> str:
    progress = budget_progress(spent, budgeted)
    if progress >= 100:
        return "over-budget"
    if progress >= 90:
        return "near-limit"
    if progress >= 75:
        return "warning"
    return "on-track"


def financial_status(income, expenses) -> dict:
    """Classify a period's income/expense pair. Returns {status, message, severity}."""
    income_d = _as_decimal(income)
    expenses_d = _as_decimal(expenses)

    if income_d == 0:
        return {
            "status": "getting-started",
            "message": "Add your first income and expense transactions to see your financial status.",
            "severity": "caution",
        }
    if expenses_d > income_d:
        return {
            "status": "overspending",
            "message": "Your expenses exceed your income this month. "
                       "Review your spending and consider budget adjustments.",
            "severity": "alert",
        }
    if expenses_d / income_d > Decimal(str(HIGH_SPENDING_RATIO)):
        return {
            "status": "high-spending",
            "message": "You're spending a high percentage of your income. Try to increase your savings rate.",
            "severity": "caution",
        }
    return {
        "status": "balanced",
        "message": "Great job! Your spending is under control and you're saving consistently.",
        "severity": "balanced",
    }
