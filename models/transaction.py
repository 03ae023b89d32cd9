from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from utils.constants import DEFAULT_BANK_ID
from utils.currency import to_money


@dataclass(frozen=True)
class Transaction:
    id: str
    type: str               # 'income' | 'expense'
    amount: Decimal         # always > 0; direction comes from type
    category: str
    date: date
    description: str
    bank_id: str = DEFAULT_BANK_ID
    notes: str = ""
    timestamp: datetime | None = None
    origin: str = "manual"  # 'manual' | 'recurring'

    def __post_init__(self):
        object.__setattr__(self, "amount", to_money(self.amount))
        if not self.bank_id:
            object.__setattr__(self, "bank_id", DEFAULT_BANK_ID)
