"""Cupboard API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from src.api.dependencies import get_current_user, get_pantry_engine
from src.models.enums import ItemSource
from src.models.user import User
from src.schemas.pantry import (
    CupboardCountResponse,
    CupboardStatsResponse,
    ManualItemCreate,
    PantryItemResponse,
    PantryItemUpdate,
    ShoppingListAddRequest,
)
from src.schemas.shopping import ShoppingListItemResponse
from src.services.exceptions import InvalidInputError, ItemNotFoundError
from src.services.pantry_engine import PantryEngine

router = APIRouter(prefix="/api/v1/cupboard", tags=["cupboard"])


def item_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Pantry item not found")


def invalid_input(error: InvalidInputError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@router.get("", response_model=list[PantryItemResponse])
def list_pantry_items(
    current_user: Annotated[User, Depends(get_current_user)],
    engine: Annotated[PantryEngine, Depends(get_pantry_engine)],
):
    """List items probably still on hand, highest stock confidence first."""
    return engine.get_user_pantry(current_user.id)


@router.get("/count", response_model=CupboardCountResponse)
def get_cupboard_count(
    current_user: Annotated[User, Depends(get_current_user)],
    engine: Annotated[PantryEngine, Depends(get_pantry_engine)],
):
    """Number of items shown in the pantry list."""
    return CupboardCountResponse(count=engine.get_cupboard_count(current_user.id))


@router.get("/stats", response_model=CupboardStatsResponse)
def get_cupboard_stats(
    current_user: Annotated[User, Depends(get_current_user)],
    engine: Annotated[PantryEngine, Depends(get_pantry_engine)],
):
    """In stock / running low / needs restock counts."""
    return engine.get_cupboard_stats(current_user.id)


@router.get("/expired", response_model=list[PantryItemResponse])
def list_expired_items(
    current_user: Annotated[User, Depends(get_current_user)],
    engine: Annotated[PantryEngine, Depends(get_pantry_engine)],
):
    """Items that have probably run out recently."""
    return engine.get_expired_items(current_user.id)


@router.post("", response_model=PantryItemResponse, status_code=status.HTTP_201_CREATED)
def add_manual_item(
    item_data: ManualItemCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    engine: Annotated[PantryEngine, Depends(get_pantry_engine)],
):
    """Add an item to the cupboard by hand."""
    try:
        return engine.add_manual_item(current_user.id, **item_data.model_dump())
    except InvalidInputError as e:
        raise invalid_input(e) from None


@router.patch("/{source}/{item_id}", response_model=PantryItemResponse)
def update_item(
    source: ItemSource,
    item_id: int,
    item_data: PantryItemUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    engine: Annotated[PantryEngine, Depends(get_pantry_engine)],
):
    """Update quantity, shelf life (and for manual items category and notes)."""
    try:
        return engine.update_item(
            item_id,
            source,
            item_data.model_dump(exclude_unset=True),
            user_id=current_user.id,
        )
    except ItemNotFoundError:
        raise item_not_found() from None


@router.post("/{source}/{item_id}/used-up", status_code=status.HTTP_204_NO_CONTENT)
def mark_item_used_up(
    source: ItemSource,
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    engine: Annotated[PantryEngine, Depends(get_pantry_engine)],
):
    """Mark an item as used up."""
    try:
        engine.mark_item_used_up(item_id, source, user_id=current_user.id)
    except ItemNotFoundError:
        raise item_not_found() from None


@router.post("/{source}/{item_id}/confirm", response_model=PantryItemResponse)
def confirm_item_in_stock(
    source: ItemSource,
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    engine: Annotated[PantryEngine, Depends(get_pantry_engine)],
):
    """Confirm an item is still in stock, resetting its decay."""
    try:
        return engine.confirm_item_in_stock(item_id, source, user_id=current_user.id)
    except ItemNotFoundError:
        raise item_not_found() from None


@router.delete("/manual/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_manual_item(
    item_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    engine: Annotated[PantryEngine, Depends(get_pantry_engine)],
):
    """Permanently remove a manually added item."""
    try:
        engine.delete_manual_item(item_id, user_id=current_user.id)
    except ItemNotFoundError:
        raise item_not_found() from None


@router.post(
    "/shopping-list",
    response_model=ShoppingListItemResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_to_shopping_list(
    request: ShoppingListAddRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    engine: Annotated[PantryEngine, Depends(get_pantry_engine)],
):
    """Put a cupboard item on the active shopping list."""
    try:
        return engine.add_to_shopping_list(
            current_user.id, request.item_name, request.quantity, request.unit
        )
    except InvalidInputError as e:
        raise invalid_input(e) from None
