from datetime import date
from typing import Callable

from database.bank_dao import BankDAO
from database.transaction_dao import TransactionDAO
from services.aggregation import (
    filter_by_month, financial_status, group_by_category, savings_rate, totals_by_type,
)
from services.bank_service import total_balance
from services.category_service import get_category_info
from utils.constants import CHART_COLORS
from utils.date_helpers import last_n_months, today


def chart_colors(count: int) -> list[str]:
    """Cycle the palette to get `count` colors."""
    return [CHART_COLORS[i % len(CHART_COLORS)] for i in range(count)]


class ReportService:
    def __init__(
        self,
        tx_dao: TransactionDAO,
        bank_dao: BankDAO,
        clock: Callable[[], date] = today,
    ):
        self._tx_dao = tx_dao
        self._bank_dao = bank_dao
        self._clock = clock

    def _month_transactions(self, user_id: str, year: int | None, month: int | None):
        if year is None or month is None:
            ref = self._clock()
            year, month = ref.year, ref.month
        return filter_by_month(self._tx_dao.get_all(user_id), year, month)

    def get_summary(self, user_id: str, year: int | None = None, month: int | None = None) -> dict:
        """Return {income, expense, net, savings_rate, status, total_balance} for a month."""
        totals = totals_by_type(self._month_transactions(user_id, year, month))
        totals["savings_rate"] = savings_rate(totals["income"], totals["expense"])
        totals["status"] = financial_status(totals["income"], totals["expense"])
        totals["total_balance"] = total_balance(self._bank_dao.get_all(user_id))
        return totals

    def get_category_breakdown(
        self,
        user_id: str,
        type_: str = "expense",
        year: int | None = None,
        month: int | None = None,
    ) -> list[dict]:
        """Return [{category, name, icon, total, count, color_hex}, ...], largest first."""
        txs = [t for t in self._month_transactions(user_id, year, month) if t.type == type_]
        groups = group_by_category(txs)
        rows = []
        for key, group in groups.items():
            info = get_category_info(key)
            rows.append({
                "category": key,
                "name": info.name,
                "icon": info.icon,
                "total": group["total"],
                "count": group["count"],
            })
        rows.sort(key=lambda r: r["total"], reverse=True)
        for row, color in zip(rows, chart_colors(len(rows))):
            row["color_hex"] = color
        return rows

    def get_monthly_chart_data(self, user_id: str, months: int = 6) -> list[dict]:
        """Return list of {month, label, income, expense, net}, oldest first."""
        ledger = self._tx_dao.get_all(user_id)
        rows = []
        for m in last_n_months(months, self._clock()):
            totals = totals_by_type(filter_by_month(ledger, m["year"], m["month"]))
            rows.append({
                "month": f"{m['year']:04d}-{m['month']:02d}",
                "label": m["name"],
                **totals,
            })
        return rows
