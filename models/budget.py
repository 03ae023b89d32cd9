from dataclasses import dataclass
from decimal import Decimal

from utils.currency import to_money


@dataclass
class BudgetGoal:
    category: str
    limit: Decimal

    def __post_init__(self):
        self.limit = to_money(self.limit)


@dataclass
class BudgetProgress:
    category: str
    category_name: str
    limit: Decimal
    spent: Decimal
    percentage: float       # 0-100, clamped
    status: str             # 'over-budget' | 'near-limit' | 'warning' | 'on-track'

    @property
    def remaining(self) -> Decimal:
        return max(Decimal("0.00"), self.limit - self.spent)
