import logging

from database.db_manager import DatabaseManager
from models.transaction import Transaction
from utils.constants import DEFAULT_BANK_ID, KEY_TRANSACTIONS
from utils.date_helpers import format_date, parse_date, parse_timestamp

logger = logging.getLogger(__name__)


class TransactionDAO:
    """Ledger Store: one ordered list per user, most recent first."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    @staticmethod
    def _record_to_model(rec: dict) -> Transaction:
        return Transaction(
            id=str(rec["id"]),
            type=rec["type"],
            amount=rec["amount"],
            category=rec.get("category", ""),
            date=parse_date(rec.get("date")),
            description=rec.get("description", ""),
            bank_id=rec.get("bankId") or rec.get("bank") or DEFAULT_BANK_ID,
            notes=rec.get("notes") or "",
            timestamp=parse_timestamp(rec.get("timestamp")),
            origin=rec.get("origin") or "manual",
        )

    @staticmethod
    def model_to_record(tx: Transaction) -> dict:
        return {
            "id": tx.id,
            "type": tx.type,
            "amount": str(tx.amount),
            "category": tx.category,
            "bankId": tx.bank_id,
            "date": format_date(tx.date) if tx.date else None,
            "description": tx.description,
            "notes": tx.notes,
            "timestamp": tx.timestamp.isoformat() if tx.timestamp else None,
            "origin": tx.origin,
        }

    def to_records(self, transactions: list[Transaction]) -> list[dict]:
        return [self.model_to_record(t) for t in transactions]

    def get_all(self, user_id: str) -> list[Transaction]:
        records = self._db.load(user_id, KEY_TRANSACTIONS, [])
        models = []
        for rec in records:
            try:
                models.append(self._record_to_model(rec))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unreadable transaction record for %s: %s", user_id, exc)
        return models

    def save_all(self, user_id: str, transactions: list[Transaction]) -> bool:
        return self._db.save(user_id, KEY_TRANSACTIONS, self.to_records(transactions))
