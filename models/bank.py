from dataclasses import dataclass
from decimal import Decimal

from utils.currency import to_money

@dataclass
class Bank:
    id: str
    name: str
    type: str = "savings"   # free-form label
    balance: Decimal = Decimal("0.00")
    color: str = "#4f46e5"

    def __post_init__(self):
        self.balance = to_money(self.balance)
