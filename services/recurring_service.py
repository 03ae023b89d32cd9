import logging
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Callable

from database.db_manager import DatabaseManager
from database.bank_dao import BankDAO
from database.recurring_dao import RecurringDAO
from database.transaction_dao import TransactionDAO
from models.bank import Bank
from models.recurring_rule import RecurringRule
from models.transaction import Transaction
from services.bank_service import apply_balance_delta, signed_delta
from services.validation import validate_rule_data
from utils.constants import (
    FREQUENCY_MONTHLY, KEY_BANKS, KEY_RECURRING, KEY_TRANSACTIONS,
    RECURRING_MARKER, RECURRING_NOTES, RECURRING_NOTIFICATION,
)
from utils.date_helpers import add_months, days_in_month, now_utc, same_month, today

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class ScheduleResult:
    new_transactions: list[Transaction] = field(default_factory=list)
    ledger: list[Transaction] = field(default_factory=list)
    updated_rules: list[RecurringRule] = field(default_factory=list)
    updated_banks: list[Bank] = field(default_factory=list)
    unmatched_bank_ids: list[str] = field(default_factory=list)

    @property
    def any_processed(self) -> bool:
        return bool(self.new_transactions)


def is_rule_due(rule: RecurringRule, ref: date) -> bool:
    """True if an instance of the rule should be materialized on `ref`.

    Monthly rules fire once per calendar month, on or after their day; a
    missed day is picked up on the next run within the month. A month too
    short to reach the day is skipped.
    """
    if not rule.active or rule.frequency != FREQUENCY_MONTHLY:
        return False
    if ref.day < rule.day:
        return False
    return rule.last_processed is None or not same_month(rule.last_processed, ref)


def next_due_date(rule: RecurringRule, after: date) -> date | None:
    """First date on or after `after` on which the rule would fire, None if it never will."""
    if not rule.active or rule.frequency != FREQUENCY_MONTHLY or rule.day > 31:
        return None
    month_start = after.replace(day=1)
    if rule.last_processed is not None and same_month(rule.last_processed, after):
        month_start = add_months(month_start, 1)
    while days_in_month(month_start.year, month_start.month) < rule.day:
        month_start = add_months(month_start, 1)
    return max(month_start.replace(day=rule.day), after)


def materialize(
    rule: RecurringRule,
    on: date,
    id_factory: Callable[[], str] = new_id,
    timestamp: datetime | None = None,
) -> Transaction:
    return Transaction(
        id=id_factory(),
        type=rule.type,
        amount=rule.amount,
        category=rule.category,
        date=on,
        description=rule.description + RECURRING_MARKER,
        bank_id=rule.bank_id,
        notes=RECURRING_NOTES,
        timestamp=timestamp or now_utc(),
        origin="recurring",
    )


def process_due_rules(
    rules: list[RecurringRule],
    ref: date,
    banks: list[Bank],
    ledger: list[Transaction] = (),
    id_factory: Callable[[], str] = new_id,
    timestamp: datetime | None = None,
) -> ScheduleResult:
    """Materialize every rule due on `ref`.

    Inputs are not mutated. Due-ness is decided against the input snapshot, so
    one rule never affects another. A transaction whose bank_id matches no bank
    is still recorded; its balance delta is dropped and the id is reported in
    `unmatched_bank_ids`. New transactions are prepended to `ledger`, most
    recent first. Running again with `updated_rules` on the same month yields
    nothing.
    """
    due = [rule for rule in rules if is_rule_due(rule, ref)]
    result = ScheduleResult(
        ledger=list(ledger),
        updated_rules=list(rules),
        updated_banks=list(banks),
    )
    if not due:
        return result

    stamp = timestamp or now_utc()
    due_ids = set()
    for rule in due:
        tx = materialize(rule, ref, id_factory, stamp)
        result.new_transactions.append(tx)
        result.ledger.insert(0, tx)
        result.updated_banks, matched = apply_balance_delta(
            result.updated_banks, tx.bank_id, signed_delta(tx.type, tx.amount)
        )
        if not matched:
            result.unmatched_bank_ids.append(tx.bank_id)
        due_ids.add(id(rule))

    result.updated_rules = [
        replace(rule, last_processed=ref) if id(rule) in due_ids else rule
        for rule in rules
    ]
    logger.info(
        "Materialized %d recurring transaction(s) for %s", len(result.new_transactions), ref
    )
    return result


class RecurringService:
    def __init__(
        self,
        db: DatabaseManager,
        recurring_dao: RecurringDAO,
        tx_dao: TransactionDAO,
        bank_dao: BankDAO,
        notifier=None,
        clock: Callable[[], date] = today,
    ):
        self._db = db
        self._dao = recurring_dao
        self._tx_dao = tx_dao
        self._bank_dao = bank_dao
        self._notifier = notifier
        self._clock = clock
        self._lock = db.writer_lock

    def get_all(self, user_id: str) -> list[RecurringRule]:
        return self._dao.get_all(user_id)

    def get_active(self, user_id: str) -> list[RecurringRule]:
        return self._dao.get_active(user_id)

    def get_by_id(self, user_id: str, rule_id: str) -> RecurringRule | None:
        return self._dao.get_by_id(user_id, rule_id)

    def create(
        self,
        user_id: str,
        type_: str,
        amount,
        category: str,
        description: str,
        day: int,
        bank_id: str = "",
        frequency: str = FREQUENCY_MONTHLY,
    ) -> RecurringRule:
        validate_rule_data({
            "type": type_, "amount": amount, "category": category,
            "description": description, "day": day, "frequency": frequency,
        })
        rule = RecurringRule(
            id=new_id(), type=type_, amount=amount, category=category,
            description=description.strip(), day=day, frequency=frequency,
            bank_id=bank_id,
        )
        with self._lock:
            rules = self._dao.get_all(user_id)
            rules.append(rule)
            self._save_rules(user_id, rules)
        return rule

    def update(
        self,
        user_id: str,
        rule_id: str,
        type_: str,
        amount,
        category: str,
        description: str,
        day: int,
        bank_id: str = "",
        frequency: str = FREQUENCY_MONTHLY,
        active: bool = True,
    ) -> RecurringRule:
        """Replace a rule's terms; its last_processed cursor is kept."""
        validate_rule_data({
            "type": type_, "amount": amount, "category": category,
            "description": description, "day": day, "frequency": frequency,
        })
        with self._lock:
            rules = self._dao.get_all(user_id)
            for i, rule in enumerate(rules):
                if rule.id == rule_id:
                    rules[i] = replace(
                        rule, type=type_, amount=amount, category=category,
                        description=description.strip(), day=day,
                        bank_id=bank_id, frequency=frequency, active=active,
                    )
                    self._save_rules(user_id, rules)
                    return rules[i]
        raise ValueError(f"No recurring rule with id '{rule_id}'.")

    def set_active(self, user_id: str, rule_id: str, active: bool):
        with self._lock:
            rules = self._dao.get_all(user_id)
            for i, rule in enumerate(rules):
                if rule.id == rule_id:
                    rules[i] = replace(rule, active=active)
                    self._save_rules(user_id, rules)
                    return
        raise ValueError(f"No recurring rule with id '{rule_id}'.")

    def delete(self, user_id: str, rule_id: str):
        """Remove the rule. Transactions it already produced stay in the ledger."""
        with self._lock:
            rules = self._dao.get_all(user_id)
            remaining = [r for r in rules if r.id != rule_id]
            if len(remaining) == len(rules):
                raise ValueError(f"No recurring rule with id '{rule_id}'.")
            self._save_rules(user_id, remaining)

    def apply_due_rules(self, user_id: str, reference_date: date | None = None) -> list[Transaction]:
        """
        Apply all rules due on reference_date (default: the service clock).
        Transactions, banks and rule cursors are written in one DB transaction;
        if that write fails nothing is kept and [] is returned.
        Returns list of newly created transactions.
        """
        ref = reference_date or self._clock()
        with self._lock:
            rules = self._dao.get_all(user_id)
            if not rules:
                return []
            result = process_due_rules(
                rules, ref, self._bank_dao.get_all(user_id), self._tx_dao.get_all(user_id)
            )
            if not result.any_processed:
                logger.debug("No recurring rules due for user %s on %s", user_id, ref)
                return []

            saved = self._db.save_many(user_id, {
                KEY_TRANSACTIONS: self._tx_dao.to_records(result.ledger),
                KEY_BANKS: self._bank_dao.to_records(result.updated_banks),
                KEY_RECURRING: self._dao.to_records(result.updated_rules),
            })
            if not saved:
                logger.warning(
                    "Could not persist %d recurring transaction(s) for user %s",
                    len(result.new_transactions), user_id,
                )
                return []

        if self._notifier is not None:
            self._notifier.notify(RECURRING_NOTIFICATION, "info")
        return result.new_transactions

    def next_due_date(self, rule: RecurringRule, after: date | None = None) -> date | None:
        return next_due_date(rule, after or self._clock())

    def _save_rules(self, user_id: str, rules: list[RecurringRule]):
        if not self._dao.save_all(user_id, rules):
            raise RuntimeError("Could not save recurring rules.")
