"""Dashboard endpoint."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import get_current_user, get_dashboard_service
from src.models.user import User
from src.schemas.dashboard import DashboardResponse
from src.services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
):
    """Pantry overview, restock suggestions and shopping list progress."""
    return service.get_dashboard(current_user.id)
