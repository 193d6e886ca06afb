"""Dashboard aggregation over pantry, suggestions and the active shopping list."""

from dataclasses import dataclass

from sqlalchemy.orm import Session

from src.services.pantry_engine import CupboardStats, PantryEngine, PantryItem
from src.services.purchase_history import SmartSuggestion
from src.services.shopping_service import ListStats, ShoppingService, calculate_list_stats

SUGGESTION_LIMIT = 5


@dataclass
class DashboardData:
    cupboard_count: int
    cupboard_stats: CupboardStats
    pantry: list[PantryItem]
    expired_items: list[PantryItem]
    suggestions: list[SmartSuggestion]
    active_list_stats: ListStats | None


class DashboardService:
    """Builds the dashboard from the pantry engine and shopping service."""

    def __init__(
        self,
        db: Session,
        pantry_engine: PantryEngine | None = None,
        shopping: ShoppingService | None = None,
    ):
        self.db = db
        self.pantry_engine = pantry_engine or PantryEngine(db)
        self.shopping = shopping or ShoppingService(db)

    def get_dashboard(self, user_id: int) -> DashboardData:
        pantry = self.pantry_engine.get_user_pantry(user_id)
        active_list = self.shopping.shopping_lists.find_active_by_user_id(user_id)

        return DashboardData(
            cupboard_count=len(pantry),
            cupboard_stats=self.pantry_engine.get_cupboard_stats(user_id),
            pantry=pantry,
            expired_items=self.pantry_engine.get_expired_items(user_id),
            suggestions=self.shopping.get_suggestions(user_id, SUGGESTION_LIMIT),
            active_list_stats=calculate_list_stats(active_list.items) if active_list else None,
        )
