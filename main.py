import argparse
import logging
import os
import sys

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.bank_dao import BankDAO
from database.budget_dao import BudgetDAO
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO

from services.budget_service import BudgetService
from services.chart_service import category_pie_chart, monthly_bar_chart
from services.notification_service import LogNotifier
from services.recurring_service import RecurringService
from services.reminder_service import ReminderService
from services.report_service import ReportService

from utils.app_config import get_currency, get_data_folder, get_log_level
from utils.constants import APP_NAME
from utils.currency import format_currency, format_percentage, format_signed
from utils.date_helpers import friendly_month, parse_date, today

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog="money-tracker", description=APP_NAME)
    parser.add_argument("--user", required=True, help="user id whose data to process")
    parser.add_argument("--date", help="treat this YYYY-MM-DD as today")
    parser.add_argument("--data-folder", help="override the configured data folder")
    parser.add_argument("--charts", metavar="DIR", help="also save report charts as PNG files in DIR")
    return parser.parse_args(argv)


def save_charts(report_svc: ReportService, user_id: str, folder: str):
    os.makedirs(folder, exist_ok=True)
    monthly_bar_chart(report_svc.get_monthly_chart_data(user_id)).savefig(
        os.path.join(folder, "monthly.png")
    )
    category_pie_chart(report_svc.get_category_breakdown(user_id)).savefig(
        os.path.join(folder, "categories.png")
    )
    logger.info("Saved charts for %s to %s", user_id, folder)


def main(argv=None) -> int:
    args = parse_args(argv)

    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ref = today()
    if args.date:
        ref = parse_date(args.date)
        if ref is None:
            print(f"Invalid --date: {args.date}", file=sys.stderr)
            return 2

    def clock():
        return ref

    currency = get_currency()

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open_in_folder(args.data_folder or get_data_folder())

    # ── DAOs ─────────────────────────────────────────────────────────────────
    tx_dao = TransactionDAO(db)
    bank_dao = BankDAO(db)
    recurring_dao = RecurringDAO(db)
    budget_dao = BudgetDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    notifier = LogNotifier()
    recurring_svc = RecurringService(db, recurring_dao, tx_dao, bank_dao, notifier, clock)
    budget_svc = BudgetService(budget_dao, tx_dao, clock)
    report_svc = ReportService(tx_dao, bank_dao, clock)
    reminder_svc = ReminderService(recurring_svc, budget_svc, clock, currency)

    try:
        # ── Apply due recurring rules ────────────────────────────────────────
        new_transactions = recurring_svc.apply_due_rules(args.user)
        for tx in new_transactions:
            print(f"+ {tx.description}: {format_currency(tx.amount, currency)} ({tx.type})")

        # ── Month summary ────────────────────────────────────────────────────
        summary = report_svc.get_summary(args.user)
        print(friendly_month(ref.year, ref.month))
        print(f"  Income:       {format_currency(summary['income'], currency)}")
        print(f"  Expenses:     {format_currency(summary['expense'], currency)}")
        print(f"  Savings rate: {format_percentage(summary['savings_rate'])}")
        print(f"  Balance:      {format_signed(summary['total_balance'], currency)}")
        print(f"  {summary['status']['message']}")

        for reminder in reminder_svc.get_reminders(args.user):
            print(f"! {reminder.title} - {reminder.detail}")

        # ── Charts ───────────────────────────────────────────────────────────
        if args.charts:
            save_charts(report_svc, args.user, args.charts)
            print(f"Charts saved to {args.charts}")
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
