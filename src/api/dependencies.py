"""FastAPI dependencies for authentication and services."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.models.user import User
from src.services.auth import decode_access_token, get_user_by_id
from src.services.dashboard_service import DashboardService
from src.services.pantry_engine import PantryEngine
from src.services.receipt_ingestion import ReceiptIngestionService
from src.services.shopping_service import ShoppingService

security = HTTPBearer()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Get the current authenticated user from JWT token."""
    payload = decode_access_token(credentials.credentials)

    user_id = payload.get("sub") if payload else None
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = get_user_by_id(db, int(user_id))
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


def get_pantry_engine(
    db: Annotated[Session, Depends(get_db)],
) -> PantryEngine:
    """Get pantry engine with dependencies."""
    return PantryEngine(db)


def get_shopping_service(
    db: Annotated[Session, Depends(get_db)],
) -> ShoppingService:
    """Get shopping service with dependencies."""
    return ShoppingService(db)


def get_receipt_ingestion_service(
    db: Annotated[Session, Depends(get_db)],
) -> ReceiptIngestionService:
    """Get receipt ingestion service with dependencies."""
    return ReceiptIngestionService(db)


def get_dashboard_service(
    db: Annotated[Session, Depends(get_db)],
) -> DashboardService:
    """Get dashboard service with dependencies."""
    return DashboardService(db)
