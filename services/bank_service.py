import logging
from dataclasses import replace
from decimal import Decimal

from database.bank_dao import BankDAO
from models.bank import Bank
from services.validation import validate_bank_data

logger = logging.getLogger(__name__)


def signed_delta(type_: str, amount: Decimal) -> Decimal:
    """+amount for income, -amount for expense."""
    return amount if type_ == "income" else -amount


def apply_balance_delta(
    banks: list[Bank], bank_id: str, delta: Decimal
) -> tuple[list[Bank], bool]:
    """Return (banks with delta added to the first bank matching bank_id, matched).

    A missing bank is not created; the delta is dropped and matched is False.
    The input list and its Bank objects are left untouched.
    """
    for i, bank in enumerate(banks):
        if bank.id == bank_id:
            updated = list(banks)
            updated[i] = replace(bank, balance=bank.balance + delta)
            return updated, True
    logger.info("No bank with id %r; balance delta %s dropped", bank_id, delta)
    return list(banks), False


def total_balance(banks: list[Bank]) -> Decimal:
    return sum((b.balance for b in banks), Decimal("0.00"))


class BankService:
    def __init__(self, bank_dao: BankDAO):
        self._dao = bank_dao

    def get_all(self, user_id: str) -> list[Bank]:
        return self._dao.get_all(user_id)

    def get_by_id(self, user_id: str, bank_id: str) -> Bank | None:
        return self._dao.get_by_id(user_id, bank_id)

    def get_total_balance(self, user_id: str) -> Decimal:
        return total_balance(self._dao.get_all(user_id))

    def create(
        self,
        user_id: str,
        bank_id: str,
        name: str,
        type_: str = "savings",
        balance="0",
        color: str = "#4f46e5",
    ) -> Bank:
        """Add a bank; `balance` is its initial seed balance."""
        validate_bank_data({"id": bank_id, "name": name, "balance": balance})
        bank_id = bank_id.strip()
        with self._dao.writer_lock:
            banks = self._dao.get_all(user_id)
            if any(b.id == bank_id for b in banks):
                raise ValueError(f"A bank with id '{bank_id}' already exists.")
            bank = Bank(id=bank_id, name=name.strip(), type=type_, balance=balance, color=color)
            if not self._dao.save_all(user_id, banks + [bank]):
                raise RuntimeError("Could not save banks.")
        return bank

    def rename(self, user_id: str, bank_id: str, name: str, color: str | None = None) -> Bank:
        """Change presentation fields only; balances move through transactions."""
        validate_bank_data({"id": bank_id, "name": name})
        with self._dao.writer_lock:
            banks = self._dao.get_all(user_id)
            for i, bank in enumerate(banks):
                if bank.id == bank_id:
                    banks[i] = replace(bank, name=name.strip(), color=color or bank.color)
                    if not self._dao.save_all(user_id, banks):
                        raise RuntimeError("Could not save banks.")
                    return banks[i]
        raise ValueError(f"No bank with id '{bank_id}'.")

    def delete(self, user_id: str, bank_id: str):
        with self._dao.writer_lock:
            banks = self._dao.get_all(user_id)
            remaining = [b for b in banks if b.id != bank_id]
            if len(remaining) == len(banks):
                raise ValueError(f"No bank with id '{bank_id}'.")
            if not self._dao.save_all(user_id, remaining):
                raise RuntimeError("Could not save banks.")
