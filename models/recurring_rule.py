from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from utils.constants import DEFAULT_BANK_ID, FREQUENCY_MONTHLY
from utils.currency import to_money


@dataclass
class RecurringRule:
    id: str
    type: str               # 'income' | 'expense'
    amount: Decimal
    category: str
    description: str
    day: int                # 1-31, day of month the rule is due
    frequency: str = FREQUENCY_MONTHLY
    active: bool = True
    bank_id: str = DEFAULT_BANK_ID
    last_processed: date | None = None

    def __post_init__(self):
        self.amount = to_money(self.amount)
        if not self.bank_id:
            self.bank_id = DEFAULT_BANK_ID
