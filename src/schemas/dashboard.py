"""Dashboard schema."""

from pydantic import BaseModel, ConfigDict

from src.schemas.pantry import CupboardStatsResponse, PantryItemResponse
from src.schemas.shopping import ListStatsResponse, SuggestionResponse


class DashboardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    cupboard_count: int
    cupboard_stats: CupboardStatsResponse
    pantry: list[PantryItemResponse]
    expired_items: list[PantryItemResponse]
    suggestions: list[SuggestionResponse]
    active_list_stats: ListStatsResponse | None
