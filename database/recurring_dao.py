import logging

from database.db_manager import DatabaseManager
from models.recurring_rule import RecurringRule
from utils.constants import DEFAULT_BANK_ID, FREQUENCY_MONTHLY, KEY_RECURRING
from utils.date_helpers import format_date, parse_date

logger = logging.getLogger(__name__)


class RecurringDAO:
    """Recurrence Registry storage."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    @staticmethod
    def _record_to_model(rec: dict) -> RecurringRule:
        return RecurringRule(
            id=str(rec["id"]),
            type=rec["type"],
            amount=rec["amount"],
            category=rec.get("category", ""),
            description=rec.get("description", ""),
            day=int(rec.get("day") or 1),
            frequency=rec.get("frequency") or FREQUENCY_MONTHLY,
            active=bool(rec.get("active", True)),
            bank_id=rec.get("bankId") or rec.get("bank") or DEFAULT_BANK_ID,
            last_processed=parse_date(rec.get("lastProcessed")),
        )

    @staticmethod
    def model_to_record(rule: RecurringRule) -> dict:
        return {
            "id": rule.id,
            "active": rule.active,
            "frequency": rule.frequency,
            "day": rule.day,
            "amount": str(rule.amount),
            "type": rule.type,
            "category": rule.category,
            "description": rule.description,
            "bankId": rule.bank_id,
            "lastProcessed": format_date(rule.last_processed) if rule.last_processed else None,
        }

    def to_records(self, rules: list[RecurringRule]) -> list[dict]:
        return [self.model_to_record(r) for r in rules]

    def get_all(self, user_id: str) -> list[RecurringRule]:
        records = self._db.load(user_id, KEY_RECURRING, [])
        models = []
        for rec in records:
            try:
                models.append(self._record_to_model(rec))
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Skipping unreadable recurring rule for %s: %s", user_id, exc)
        return models

    def get_active(self, user_id: str) -> list[RecurringRule]:
        return [r for r in self.get_all(user_id) if r.active]

    def get_by_id(self, user_id: str, rule_id: str) -> RecurringRule | None:
        return next((r for r in self.get_all(user_id) if r.id == rule_id), None)

    def save_all(self, user_id: str, rules: list[RecurringRule]) -> bool:
        return self._db.save(user_id, KEY_RECURRING, self.to_records(rules))
