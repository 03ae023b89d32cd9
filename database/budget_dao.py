from database.db_manager import DatabaseManager
from models.budget import BudgetGoal
from utils.constants import KEY_BUDGET


class BudgetDAO:
    """Budget goals, stored as {category: limit} per user."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def get_all(self, user_id: str) -> list[BudgetGoal]:
        stored = self._db.load(user_id, KEY_BUDGET, {})
        return [BudgetGoal(category=k, limit=v) for k, v in stored.items()]

    def get(self, user_id: str, category: str) -> BudgetGoal | None:
        return next((g for g in self.get_all(user_id) if g.category == category), None)

    def save_all(self, user_id: str, goals: list[BudgetGoal]) -> bool:
        return self._db.save(
            user_id, KEY_BUDGET, {g.category: str(g.limit) for g in goals}
        )
