import logging
from dataclasses import replace
from datetime import date
from typing import Callable

from database.bank_dao import BankDAO
from database.db_manager import DatabaseManager
from database.transaction_dao import TransactionDAO
from models.bank import Bank
from models.transaction import Transaction
from services.aggregation import search_transactions, sort_transactions_by_date
from services.bank_service import apply_balance_delta, signed_delta
from services.recurring_service import new_id
from services.validation import validate_transaction_data
from utils.constants import KEY_BANKS, KEY_TRANSACTIONS
from utils.date_helpers import now_utc, parse_date, today

logger = logging.getLogger(__name__)


def add_transaction(
    ledger: list[Transaction], banks: list[Bank], tx: Transaction
) -> tuple[list[Transaction], list[Bank], bool]:
    """Prepend tx and apply its balance delta. Returns (ledger, banks, bank_matched)."""
    new_banks, matched = apply_balance_delta(banks, tx.bank_id, signed_delta(tx.type, tx.amount))
    return [tx] + list(ledger), new_banks, matched


def remove_transaction(
    ledger: list[Transaction], banks: list[Bank], tx_id: str
) -> tuple[list[Transaction], list[Bank], Transaction | None]:
    """Drop tx_id from the ledger and reverse its balance delta.

    Returns (ledger, banks, removed); removed is None if the id is unknown.
    """
    removed = next((t for t in ledger if t.id == tx_id), None)
    if removed is None:
        return list(ledger), list(banks), None
    new_banks, _ = apply_balance_delta(
        banks, removed.bank_id, -signed_delta(removed.type, removed.amount)
    )
    return [t for t in ledger if t.id != tx_id], new_banks, removed


class TransactionService:
    def __init__(
        self,
        db: DatabaseManager,
        tx_dao: TransactionDAO,
        bank_dao: BankDAO,
        clock: Callable[[], date] = today,
    ):
        self._db = db
        self._dao = tx_dao
        self._bank_dao = bank_dao
        self._clock = clock
        self._lock = db.writer_lock

    def get_all(self, user_id: str) -> list[Transaction]:
        return self._dao.get_all(user_id)

    def get_by_id(self, user_id: str, tx_id: str) -> Transaction | None:
        return next((t for t in self._dao.get_all(user_id) if t.id == tx_id), None)

    def get_sorted(self, user_id: str, ascending: bool = False) -> list[Transaction]:
        return sort_transactions_by_date(self._dao.get_all(user_id), ascending)

    def search(self, user_id: str, term: str) -> list[Transaction]:
        return search_transactions(self._dao.get_all(user_id), term)

    def create(
        self,
        user_id: str,
        type_: str,
        amount,
        category: str,
        description: str,
        date=None,
        bank_id: str = "",
        notes: str = "",
    ) -> Transaction:
        """Validate and record a manual transaction, updating its bank's balance."""
        tx_date = date or self._clock()
        validate_transaction_data({
            "type": type_, "amount": amount, "category": category,
            "description": description, "date": tx_date,
        })
        tx = Transaction(
            id=new_id(),
            type=type_,
            amount=amount,
            category=category,
            date=parse_date(tx_date),
            description=description.strip(),
            bank_id=bank_id,
            notes=(notes or "").strip(),
            timestamp=now_utc(),
            origin="manual",
        )
        with self._lock:
            ledger, banks, matched = add_transaction(
                self._dao.get_all(user_id), self._bank_dao.get_all(user_id), tx
            )
            if not matched:
                logger.info("Transaction %s kept without a balance update", tx.id)
            self._persist(user_id, ledger, banks)
        return tx

    def update_notes(self, user_id: str, tx_id: str, notes: str) -> Transaction:
        """Notes are the only field editable in place; amounts never change after creation."""
        with self._lock:
            ledger = self._dao.get_all(user_id)
            for i, tx in enumerate(ledger):
                if tx.id == tx_id:
                    ledger[i] = replace(tx, notes=(notes or "").strip())
                    if not self._dao.save_all(user_id, ledger):
                        raise RuntimeError("Could not save transactions.")
                    return ledger[i]
        raise ValueError(f"No transaction with id '{tx_id}'.")

    def delete(self, user_id: str, tx_id: str) -> Transaction:
        with self._lock:
            ledger, banks, removed = remove_transaction(
                self._dao.get_all(user_id), self._bank_dao.get_all(user_id), tx_id
            )
            if removed is None:
                raise ValueError(f"No transaction with id '{tx_id}'.")
            self._persist(user_id, ledger, banks)
        return removed

    def _persist(self, user_id: str, ledger: list[Transaction], banks: list[Bank]):
        saved = self._db.save_many(user_id, {
            KEY_TRANSACTIONS: self._dao.to_records(ledger),
            KEY_BANKS: self._bank_dao.to_records(banks),
        })
        if not saved:
            raise RuntimeError("Could not save transactions.")
