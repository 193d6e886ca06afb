"""Shopping list endpoints: active list, checkout and suggestions."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.dependencies import get_current_user, get_shopping_service
from src.models.user import User
from src.schemas.shopping import (
    CheckoutResponse,
    ShoppingListItemResponse,
    ShoppingListResponse,
    SuggestionAddRequest,
    SuggestionResponse,
)
from src.services.exceptions import ItemNotFoundError
from src.services.purchase_history import normalize_item_name
from src.services.shopping_service import ShoppingService

router = APIRouter(prefix="/api/v1/shopping-list", tags=["shopping"])

# Upper bound when looking a suggestion up by name
SUGGESTION_LOOKUP_LIMIT = 100


@router.get("", response_model=ShoppingListResponse)
def get_active_list(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ShoppingService, Depends(get_shopping_service)],
):
    """Get the active shopping list, creating it if needed."""
    return service.get_active_list(current_user.id)


@router.post("/items/{item_id}/toggle", response_model=ShoppingListItemResponse)
def toggle_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ShoppingService, Depends(get_shopping_service)],
):
    """Check or uncheck an item."""
    try:
        return service.toggle_item(current_user.id, item_id)
    except ItemNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Item not found"
        ) from None


@router.post("/complete", response_model=CheckoutResponse)
def complete_shopping(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ShoppingService, Depends(get_shopping_service)],
):
    """Record checked items as purchased and clear them from the list."""
    return {"purchased": service.complete_shopping(current_user.id)}


@router.get("/suggestions", response_model=list[SuggestionResponse])
def get_suggestions(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ShoppingService, Depends(get_shopping_service)],
    limit: int = Query(default=10, ge=1, le=50),
):
    """Items that are due for a restock based on purchase cadence."""
    return service.get_suggestions(current_user.id, limit)


@router.post(
    "/suggestions",
    response_model=ShoppingListItemResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_suggestion(
    request: SuggestionAddRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ShoppingService, Depends(get_shopping_service)],
):
    """Add a suggested item to the active list."""
    wanted = normalize_item_name(request.item_name)
    suggestion = next(
        (
            s
            for s in service.get_suggestions(current_user.id, SUGGESTION_LOOKUP_LIMIT)
            if s.item_name == wanted
        ),
        None,
    )
    if suggestion is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Suggestion not found")
    return service.add_suggestion(current_user.id, suggestion)
