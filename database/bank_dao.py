import copy

from database.db_manager import DatabaseManager
from models.bank import Bank
from utils.constants import DEFAULT_BANKS, KEY_BANKS


class BankDAO:
    """Bank Ledger storage. A user with nothing stored gets DEFAULT_BANKS."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    @staticmethod
    def _record_to_model(rec: dict) -> Bank:
        return Bank(
            id=str(rec["id"]),
            name=rec.get("name", ""),
            type=rec.get("type") or "savings",
            balance=rec.get("balance", "0"),
            color=rec.get("color") or "#4f46e5",
        )

    @staticmethod
    def model_to_record(bank: Bank) -> dict:
        return {
            "id": bank.id,
            "name": bank.name,
            "type": bank.type,
            "balance": str(bank.balance),
            "color": bank.color,
        }

    def to_records(self, banks: list[Bank]) -> list[dict]:
        return [self.model_to_record(b) for b in banks]

    @property
    def writer_lock(self):
        return self._db.writer_lock

    def get_all(self, user_id: str) -> list[Bank]:
        records = self._db.load(user_id, KEY_BANKS, copy.deepcopy(DEFAULT_BANKS))
        return [self._record_to_model(r) for r in records]

    def get_by_id(self, user_id: str, bank_id: str) -> Bank | None:
        return next((b for b in self.get_all(user_id) if b.id == bank_id), None)

    def save_all(self, user_id: str, banks: list[Bank]) -> bool:
        return self._db.save(user_id, KEY_BANKS, self.to_records(banks))
